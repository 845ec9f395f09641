"""
Template Rendering Module

A minimal scanner for ``{{...}}`` expressions inside rule values. Two verbs
are understood:

- ``{{date 'FORMAT' [tz='Zone']}}`` formats a date with moment-style tokens
  (``YYYYMMDD``, ``HHmmss``...). Dates are rendered in UTC unless ``tz`` names
  an IANA zone.
- ``{{name}}`` substitutes a field (``branch``, ``tag``, ``sha``, ``base_ref``,
  ``is_default_branch`` and, for version rules, ``version``, ``major``,
  ``minor``, ``patch``, ``raw``). Unknown fields render empty.
"""

import re
import shlex
import logging
from datetime import datetime, timezone
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import SHORT_SHA_LENGTH
from .exceptions import DirectiveError
from .models import Context

logger = logging.getLogger(__name__)

_EXPRESSION = re.compile(r"\{\{\s*(.*?)\s*\}\}")

_DATE_TOKEN = re.compile(
    r"\[[^\]]*\]|YYYY|YY|Q|MMMM|MMM|MM|M|DDDD|DDD|DD|D|dddd|ddd|d"
    r"|HH|H|hh|h|mm|m|ss|s|SSS|A|a|ZZ|Z|X|x"
)


def _offset(dt: datetime, separator: str) -> str:
    offset = dt.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset else 0
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{separator}{minutes:02d}"


_DATE_FORMATTERS = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "Q": lambda d: str((d.month - 1) // 3 + 1),
    "MMMM": lambda d: d.strftime("%B"),
    "MMM": lambda d: d.strftime("%b"),
    "MM": lambda d: f"{d.month:02d}",
    "M": lambda d: str(d.month),
    "DDDD": lambda d: f"{d.timetuple().tm_yday:03d}",
    "DDD": lambda d: str(d.timetuple().tm_yday),
    "DD": lambda d: f"{d.day:02d}",
    "D": lambda d: str(d.day),
    "dddd": lambda d: d.strftime("%A"),
    "ddd": lambda d: d.strftime("%a"),
    "d": lambda d: str(d.isoweekday() % 7),
    "HH": lambda d: f"{d.hour:02d}",
    "H": lambda d: str(d.hour),
    "hh": lambda d: f"{(d.hour % 12) or 12:02d}",
    "h": lambda d: str((d.hour % 12) or 12),
    "mm": lambda d: f"{d.minute:02d}",
    "m": lambda d: str(d.minute),
    "ss": lambda d: f"{d.second:02d}",
    "s": lambda d: str(d.second),
    "SSS": lambda d: f"{d.microsecond // 1000:03d}",
    "A": lambda d: "AM" if d.hour < 12 else "PM",
    "a": lambda d: "am" if d.hour < 12 else "pm",
    "ZZ": lambda d: _offset(d, ""),
    "Z": lambda d: _offset(d, ":"),
    "X": lambda d: str(int(d.timestamp())),
    "x": lambda d: str(int(d.timestamp() * 1000)),
}


def format_date(date: datetime, fmt: str, tz: Optional[str] = None) -> str:
    """Format a date using moment-style tokens.

    Args:
        date: Date to format; naive dates are taken as UTC
        fmt: Format string, ``[...]`` escapes literal text
        tz: Optional IANA time zone name

    Returns:
        Formatted date string

    Raises:
        DirectiveError: If the time zone is unknown
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    if tz:
        try:
            date = date.astimezone(ZoneInfo(tz))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise DirectiveError(f"Unknown time zone: {tz}", tz) from e
    else:
        date = date.astimezone(timezone.utc)

    def _token(match):
        token = match.group(0)
        if token.startswith("["):
            return token[1:-1]
        return _DATE_FORMATTERS[token](date)

    return _DATE_TOKEN.sub(_token, fmt)


def global_fields(context: Context) -> Dict[str, str]:
    """Fields available to every rendered rule value."""
    return {
        "branch": context.branch,
        "tag": context.tag,
        "sha": context.sha[:SHORT_SHA_LENGTH],
        "base_ref": context.base_ref,
        "is_default_branch": "true" if context.is_default_branch else "false",
    }


def render(template: str, fields: Dict[str, str], date: Optional[datetime] = None) -> str:
    """
    Render ``{{...}}`` expressions in a template.

    Pure function: the date used by ``{{date}}`` is passed in, never read
    from the clock.

    Args:
        template: Template text
        fields: Field values for bare ``{{name}}`` expressions
        date: Date used by ``{{date ...}}`` expressions

    Returns:
        Rendered string

    Raises:
        DirectiveError: If a date expression is malformed
    """
    if "{{" not in template:
        return template

    def _expression(match):
        expression = match.group(1)
        try:
            words = shlex.split(expression)
        except ValueError as e:
            raise DirectiveError(f"Invalid template expression: {expression}", template) from e
        if not words:
            return ""
        if words[0] == "date":
            return _render_date(words[1:], date, template)
        if len(words) > 1:
            logger.warning(f"Unexpected arguments in template expression: {expression}")
        return fields.get(words[0], "")

    return _EXPRESSION.sub(_expression, template)


def _render_date(args, date, template):
    if not args:
        raise DirectiveError(f"Missing date format in {template}", template)
    if date is None:
        raise DirectiveError(f"No date available to render {template}", template)
    tz = None
    for option in args[1:]:
        key, _, value = option.partition("=")
        if key != "tz":
            raise DirectiveError(f"Unknown date option '{key}' in {template}", template)
        tz = value
    return format_date(date, args[0], tz)
