"""
Version Dialect Module

Pure functions for parsing a version string in one of the supported
numbering dialects and exposing the fields a rule pattern can use.
This module contains no side effects - only version analysis logic.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional

from packaging.version import Version as Pep440Version, InvalidVersion

# Semantic Versioning 2.0.0, https://semver.org/
SEMVER_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass
class ParsedVersion:
    """A version string understood by one of the dialects."""
    raw: str
    version: str
    major: str
    minor: str
    patch: str
    is_release: bool

    def fields(self) -> Dict[str, str]:
        """Template fields for rendering a rule pattern."""
        return {
            "raw": self.raw,
            "version": self.version,
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
        }


def parse_semver(raw: str) -> Optional[ParsedVersion]:
    """
    Parse a semantic version.

    A leading ``v`` or ``=`` and surrounding whitespace are tolerated, as in
    ``v1.2.3``. Build metadata is dropped from the normalized version.

    Args:
        raw: The version string

    Returns:
        ParsedVersion, or None if the string is not a valid semver
    """
    cleaned = raw.strip().lstrip("=v").strip()
    match = SEMVER_PATTERN.match(cleaned)
    if not match:
        return None

    version = f"{match['major']}.{match['minor']}.{match['patch']}"
    if match["prerelease"]:
        version = f"{version}-{match['prerelease']}"

    return ParsedVersion(
        raw=raw,
        version=version,
        major=match["major"],
        minor=match["minor"],
        patch=match["patch"],
        is_release=not match["prerelease"],
    )


def parse_pep440(raw: str) -> Optional[ParsedVersion]:
    """
    Parse a PEP 440 version.

    Pre-, post- and dev-releases are not considered releases.

    Args:
        raw: The version string

    Returns:
        ParsedVersion, or None if the string does not conform to PEP 440
    """
    try:
        parsed = Pep440Version(raw)
    except InvalidVersion:
        return None

    return ParsedVersion(
        raw=raw,
        version=str(parsed),
        major=str(parsed.major),
        minor=str(parsed.minor),
        patch=str(parsed.micro),
        is_release=not (parsed.is_prerelease or parsed.is_postrelease or parsed.is_devrelease),
    )
