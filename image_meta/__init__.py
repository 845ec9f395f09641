"""Container image tag and label metadata from git refs and CI events."""
