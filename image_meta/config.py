"""
Configuration Module for Image Meta

This module contains the constants shared across the application.
It defines the rule priorities, the default rule set and the names
of the labels, files and outputs produced by a run.

Constants:
    DEFAULT_PRIORITIES: Priority assigned to each tag rule type when none is given
    DEFAULT_TAG_RULES: Rule set used when no tag rules are configured
    OCI_LABEL_KEYS: The fixed label keys emitted for every run
    DEFAULT_BAKE_TARGET: Name of the bake target in the build-file projection
    ENV_OUTPUT_PREFIX: Prefix of the variables exported to GITHUB_ENV
"""

from .models import TagType, RefEvent

DEFAULT_PRIORITIES = {
    TagType.SCHEDULE: "1000",
    TagType.SEMVER: "900",
    TagType.PEP440: "900",
    TagType.MATCH: "800",
    TagType.EDGE: "700",
    TagType.REF: "600",
    TagType.RAW: "200",
    TagType.SHA: "100",
}

DEFAULT_TAG_RULES = [
    f"type={TagType.SCHEDULE.value}",
    f"type={TagType.REF.value},event={RefEvent.BRANCH.value}",
    f"type={TagType.REF.value},event={RefEvent.TAG.value}",
    f"type={TagType.REF.value},event={RefEvent.PR.value}",
]

DEFAULT_SCHEDULE_PATTERN = "nightly"
DEFAULT_PR_PREFIX = "pr-"
DEFAULT_SHA_PREFIX = "sha-"
SHORT_SHA_LENGTH = 7

OCI_LABEL_KEYS = [
    "org.opencontainers.image.title",
    "org.opencontainers.image.description",
    "org.opencontainers.image.url",
    "org.opencontainers.image.source",
    "org.opencontainers.image.version",
    "org.opencontainers.image.created",
    "org.opencontainers.image.revision",
    "org.opencontainers.image.licenses",
]

FLAVOR_LATEST_VALUES = ["auto", "true", "false"]
FLAVOR_KEYS = {"latest", "prefix", "suffix", "onlatest", "labelprefix"}

DEFAULT_BAKE_TARGET = "docker-metadata-action"
JSON_FILE_NAME = "metadata.json"
BAKE_FILE_NAME = "docker-metadata-action-bake.json"
ENV_OUTPUT_PREFIX = "DOCKER_METADATA_OUTPUT_"
DEFAULT_SEPARATOR = "\n"
