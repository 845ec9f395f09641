"""Data models shared by the parsing, resolution and output stages."""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any
from enum import Enum

from .directives import format_record


class TagType(Enum):
    """Kinds of tag rules, one per resolution strategy."""
    SCHEDULE = "schedule"
    SEMVER = "semver"
    PEP440 = "pep440"
    MATCH = "match"
    EDGE = "edge"
    REF = "ref"
    RAW = "raw"
    SHA = "sha"


class RefEvent(Enum):
    """Ref categories a ``type=ref`` rule can follow."""
    BRANCH = "branch"
    TAG = "tag"
    PR = "pr"


class ShaFormat(Enum):
    """Commit SHA formats for ``type=sha`` rules."""
    SHORT = "short"
    LONG = "long"


@dataclass(frozen=True)
class Tag:
    """One parsed tag rule."""
    type: TagType
    attrs: Dict[str, str] = field(default_factory=dict)

    @property
    def priority(self) -> int:
        return int(self.attrs["priority"])

    def __str__(self) -> str:
        fields = [f"type={self.type.value}"]
        fields.extend(f"{key}={value}" for key, value in self.attrs.items())
        return format_record(fields)


@dataclass(frozen=True)
class Flavor:
    """Prefix/suffix/latest policy applied after version resolution."""
    latest: str = "auto"
    prefix: str = ""
    suffix: str = ""
    prefix_latest: bool = False
    suffix_latest: bool = False
    label_prefix: str = ""


@dataclass(frozen=True)
class Image:
    """An image name and whether tags are generated for it."""
    name: str
    enable: bool = True


@dataclass(frozen=True)
class Context:
    """Facts about the triggering event, as seen by the resolver."""
    ref: str = ""
    sha: str = ""
    commit_date: Optional[datetime] = None
    event_name: str = ""
    base_ref: str = ""
    default_branch: str = ""
    pr_number: Optional[str] = None
    is_default_branch: bool = False

    @property
    def branch(self) -> str:
        """Branch name of a ``refs/heads/`` ref, sanitized for use in a tag."""
        if not self.ref.startswith("refs/heads/"):
            return ""
        return re.sub(r"[^a-zA-Z0-9._-]+", "-", self.ref[len("refs/heads/"):])

    @property
    def tag(self) -> str:
        """Tag name of a ``refs/tags/`` ref with slashes replaced."""
        if not self.ref.startswith("refs/tags/"):
            return ""
        return self.ref[len("refs/tags/"):].replace("/", "-")

    @property
    def ref_event(self) -> Optional[RefEvent]:
        """Category of the current ref, or None for detached or unknown refs."""
        if self.ref.startswith("refs/heads/"):
            return RefEvent.BRANCH
        if self.ref.startswith("refs/tags/"):
            return RefEvent.TAG
        if self.ref.startswith("refs/pull/"):
            return RefEvent.PR
        return None


@dataclass(frozen=True)
class RepoInfo:
    """Repository metadata used for the fixed labels."""
    name: str = ""
    description: str = ""
    html_url: str = ""
    default_branch: str = ""
    license_spdx_id: str = ""


@dataclass
class Version:
    """Resolved version: main value, partial values and the latest flag."""
    main: Optional[str] = None
    partial: List[str] = field(default_factory=list)
    latest: bool = False


@dataclass
class MetadataPlan:
    """Everything a run produces, computed before anything is written."""
    version: Version
    tags: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    json_output: Dict[str, Any] = field(default_factory=dict)
    bake_definition: Dict[str, Any] = field(default_factory=dict)
    sep_tags: str = "\n"
    sep_labels: str = "\n"
    output_dir: str = "."
    github_output: str = ""
    github_env: str = ""
    export_env: bool = True

    def has_tags(self) -> bool:
        """Check if any image tag was generated."""
        return bool(self.tags)

    def get_outputs(self) -> Dict[str, str]:
        """Step outputs keyed by output name, bake file path excluded."""
        return {
            "version": self.version.main or "",
            "tags": self.sep_tags.join(self.tags),
            "labels": self.sep_labels.join(self.labels),
            "json": json.dumps(self.json_output),
        }


@dataclass
class ExecutionResult:
    """Result of executing a metadata plan."""
    success: bool
    errors: List[str] = field(default_factory=list)
    files_written: List[str] = field(default_factory=list)
    outputs_written: List[str] = field(default_factory=list)
    dry_run: bool = False
