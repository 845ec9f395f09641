"""
Version Resolver Module

Pure functions that evaluate priority-ordered tag rules against the
triggering event and assemble the resulting Version.
This module contains no side effects - only resolution logic.

The first enabled rule that yields a value supplies ``main``; every later
one adds a partial value. A rule that does not apply to the event (wrong
ref kind, no regex match, unparsable version) yields nothing and the run
continues.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .config import SHORT_SHA_LENGTH
from .models import Context, RefEvent, ShaFormat, Tag, TagType, Version
from .tag_rules import compile_pattern
from .templating import global_fields, render
from .versioning import parse_pep440, parse_semver

logger = logging.getLogger(__name__)

# A candidate value and whether it marks the latest release.
Candidate = Optional[Tuple[str, bool]]


def resolve(tags: List[Tag], context: Context) -> Version:
    """
    Resolve a Version from sorted tag rules.

    Rules are evaluated in the given order; they are not re-sorted.

    Args:
        tags: Tag rules sorted by priority
        context: The triggering event

    Returns:
        Version; ``main`` is None when no rule applied
    """
    version = Version()
    fields = global_fields(context)

    for tag in tags:
        if not _is_enabled(tag, fields, context.commit_date):
            continue

        candidate = _EVALUATORS[tag.type](tag, context, fields)
        if candidate is None:
            continue
        value, latest = candidate

        prefix = render(tag.attrs.get("prefix", ""), fields, context.commit_date)
        suffix = render(tag.attrs.get("suffix", ""), fields, context.commit_date)
        value = f"{prefix}{value}{suffix}"
        if not value:
            continue

        if version.main is None:
            version.main = value
        elif value != version.main and value not in version.partial:
            version.partial.append(value)
        if latest:
            version.latest = True

    return version


def _is_enabled(tag: Tag, fields: Dict[str, str], date: Optional[datetime]) -> bool:
    return render(tag.attrs["enable"], fields, date).strip().lower() == "true"


def _version_source(tag: Tag, context: Context, fields: Dict[str, str]) -> Optional[str]:
    """Value a version rule parses: its ``value`` override or the pushed tag."""
    if tag.attrs.get("value"):
        return render(tag.attrs["value"], fields, context.commit_date)
    if context.ref_event == RefEvent.TAG:
        return context.tag
    return None


def _evaluate_schedule(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    if context.event_name != "schedule":
        return None
    return render(tag.attrs["pattern"], fields, context.commit_date), False


def _evaluate_semver(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    raw = _version_source(tag, context, fields)
    if raw is None:
        return None
    parsed = parse_semver(raw)
    if parsed is None:
        logger.warning(f"{raw} is not a valid semver. More info: https://semver.org/")
        return None
    if not parsed.is_release:
        return parsed.version, False
    return render(tag.attrs["pattern"], {**fields, **parsed.fields()}, context.commit_date), True


def _evaluate_pep440(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    raw = _version_source(tag, context, fields)
    if raw is None:
        return None
    parsed = parse_pep440(raw)
    if parsed is None:
        logger.warning(f"{raw} does not conform to PEP 440. More info: https://peps.python.org/pep-0440/")
        return None
    if not parsed.is_release:
        return parsed.version, False
    return render(tag.attrs["pattern"], {**fields, **parsed.fields()}, context.commit_date), True


def _evaluate_match(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    raw = _version_source(tag, context, fields)
    if raw is None:
        return None
    pattern = tag.attrs["pattern"]
    match = compile_pattern(pattern).search(raw)
    if not match:
        logger.warning(f"{pattern} does not match {raw}.")
        return None
    try:
        value = match.group(int(tag.attrs["group"]))
    except IndexError:
        value = None
    if value is None:
        logger.warning(f"Group {tag.attrs['group']} does not exist for {pattern} pattern.")
        return None
    return value, True


def _evaluate_edge(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    if context.ref_event != RefEvent.BRANCH:
        return None
    branch = tag.attrs["branch"] or context.default_branch
    if context.branch != branch:
        return None
    return "edge", False


def _evaluate_ref(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    event = RefEvent(tag.attrs["event"])
    if context.ref_event != event:
        return None
    if event == RefEvent.BRANCH:
        return context.branch, False
    if event == RefEvent.TAG:
        return context.tag, False
    if context.pr_number:
        return str(context.pr_number), False
    return context.ref[len("refs/pull/"):].removesuffix("/merge"), False


def _evaluate_raw(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    return render(tag.attrs["value"], fields, context.commit_date), False


def _evaluate_sha(tag: Tag, context: Context, fields: Dict[str, str]) -> Candidate:
    if not context.sha:
        return None
    if tag.attrs["format"] == ShaFormat.LONG.value:
        return context.sha, False
    return context.sha[:SHORT_SHA_LENGTH], False


_EVALUATORS = {
    TagType.SCHEDULE: _evaluate_schedule,
    TagType.SEMVER: _evaluate_semver,
    TagType.PEP440: _evaluate_pep440,
    TagType.MATCH: _evaluate_match,
    TagType.EDGE: _evaluate_edge,
    TagType.REF: _evaluate_ref,
    TagType.RAW: _evaluate_raw,
    TagType.SHA: _evaluate_sha,
}
