"""
Tag Rule Grammar Module

Pure functions for turning textual tag rules into typed Tag records.
This module contains no side effects - only parsing and validation logic.

A rule is a delimited record such as ``type=semver,pattern={{version}}``.
Keys are case-folded and values trimmed; a bare first token naming a rule
type selects that type when more attributes follow, any other bare token
is the rule's ``value`` (``foo`` is shorthand for ``type=raw,value=foo``).
"""

import re
import logging
from typing import List, Optional

from .config import (
    DEFAULT_PRIORITIES,
    DEFAULT_TAG_RULES,
    DEFAULT_SCHEDULE_PATTERN,
    DEFAULT_PR_PREFIX,
    DEFAULT_SHA_PREFIX,
)
from .directives import parse_record
from .exceptions import DirectiveError
from .models import Tag, TagType, RefEvent, ShaFormat

logger = logging.getLogger(__name__)

_TYPE_VALUES = {t.value for t in TagType}
_REGEX_LITERAL = re.compile(r"^/(.+)/(.*)$")
_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    # Global, unicode and sticky matching have no Python equivalent to select.
    "g": 0,
    "u": 0,
    "y": 0,
}


def compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile a match pattern, accepting the ``/pattern/flags`` literal form.

    Args:
        pattern: Plain regular expression or regex literal

    Returns:
        Compiled regular expression

    Raises:
        DirectiveError: If the pattern or one of its flags is invalid
    """
    flags = 0
    literal = _REGEX_LITERAL.match(pattern)
    if literal:
        pattern = literal.group(1)
        for flag in literal.group(2):
            if flag not in _REGEX_FLAGS:
                raise DirectiveError(f"Unknown regular expression flag '{flag}' in {pattern}", pattern)
            flags |= _REGEX_FLAGS[flag]
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise DirectiveError(f"Invalid regular expression {pattern}: {e}", pattern) from e


def transform_tags(inputs: List[str]) -> List[Tag]:
    """
    Parse a list of rules and order them for evaluation.

    An empty list stands for the default rule set. Rules are sorted by
    priority, highest first; rules with equal priority keep input order.

    Args:
        inputs: Rule directives

    Returns:
        Sorted list of Tag records

    Raises:
        DirectiveError: If any rule is invalid
    """
    if not inputs:
        inputs = DEFAULT_TAG_RULES

    tags = [parse_tag(text) for text in inputs]
    tags = sorted(tags, key=lambda tag: tag.priority, reverse=True)
    for tag in tags:
        logger.debug(f"Tag rule: {tag}")
    return tags


def parse_tag(text: str) -> Tag:
    """
    Parse one rule into a Tag with per-type defaults applied.

    Args:
        text: The rule directive

    Returns:
        Tag record

    Raises:
        DirectiveError: If the rule is invalid; the message contains the rule
    """
    fields = [field for field in parse_record(text) if field.strip()]
    tag_type: Optional[TagType] = None
    attrs = {}

    for index, field in enumerate(fields):
        key, separator, value = field.partition("=")
        if not separator:
            token = field.strip()
            if index == 0 and len(fields) > 1 and token in _TYPE_VALUES:
                tag_type = TagType(token)
            else:
                attrs["value"] = token
            continue

        key = key.strip().lower()
        value = value.strip()
        if key == "type":
            if value not in _TYPE_VALUES:
                raise DirectiveError(f"Unknown type attribute: {value}", text)
            tag_type = TagType(value)
        else:
            attrs[key] = value

    if tag_type is None:
        tag_type = TagType.RAW

    _apply_type_defaults(tag_type, attrs, text)

    attrs.setdefault("enable", "true")
    attrs.setdefault("priority", DEFAULT_PRIORITIES[tag_type])

    enable = attrs["enable"]
    if enable not in ("true", "false") and "{{" not in enable:
        raise DirectiveError(f"Invalid value for enable attribute: {enable}", text)
    try:
        int(attrs["priority"])
    except ValueError:
        raise DirectiveError(f"Invalid priority attribute for {text}", text) from None

    return Tag(type=tag_type, attrs=attrs)


def _apply_type_defaults(tag_type: TagType, attrs: dict, text: str) -> None:
    """Default and validate the attributes specific to a rule type."""
    if tag_type == TagType.SCHEDULE:
        attrs.setdefault("pattern", DEFAULT_SCHEDULE_PATTERN)

    elif tag_type in (TagType.SEMVER, TagType.PEP440):
        if "pattern" not in attrs:
            raise DirectiveError(f"Missing pattern attribute for {text}", text)
        attrs.setdefault("value", "")

    elif tag_type == TagType.MATCH:
        if "pattern" not in attrs:
            raise DirectiveError(f"Missing pattern attribute for {text}", text)
        attrs.setdefault("group", "0")
        try:
            int(attrs["group"])
        except ValueError:
            raise DirectiveError(f"Invalid match group for {text}", text) from None
        attrs.setdefault("value", "")
        try:
            compile_pattern(attrs["pattern"])
        except DirectiveError as e:
            raise DirectiveError(f"{e} for {text}", text) from e

    elif tag_type == TagType.EDGE:
        attrs.setdefault("branch", "")

    elif tag_type == TagType.REF:
        if "event" not in attrs:
            raise DirectiveError(f"Missing event attribute for {text}", text)
        if attrs["event"] not in {e.value for e in RefEvent}:
            raise DirectiveError(f"Invalid event for {text}", text)
        if attrs["event"] == RefEvent.PR.value:
            attrs.setdefault("prefix", DEFAULT_PR_PREFIX)

    elif tag_type == TagType.RAW:
        if "value" not in attrs:
            raise DirectiveError(f"Missing value attribute for {text}", text)

    elif tag_type == TagType.SHA:
        attrs.setdefault("prefix", DEFAULT_SHA_PREFIX)
        attrs.setdefault("format", ShaFormat.SHORT.value)
        if attrs["format"] not in {f.value for f in ShaFormat}:
            raise DirectiveError(f"Invalid format for {text}", text)


def tag_to_string(tag: Tag) -> str:
    """Serialize a Tag back into a directive that parses to an equal Tag."""
    return str(tag)
