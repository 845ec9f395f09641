"""Custom exceptions for Image Meta."""


class DirectiveError(ValueError):
    """Raised when a tag, flavor or image directive cannot be parsed."""

    def __init__(self, message: str, directive: str = None):
        self.directive = directive
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when the run configuration is invalid."""


class GitContextError(Exception):
    """Raised when the local git repository cannot be inspected."""


class RepoInfoError(Exception):
    """Raised when repository metadata cannot be fetched from GitHub."""
