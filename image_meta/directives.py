"""
Directive Record Module

Pure functions for splitting raw configuration text into directives and
directives into fields. Tag rules, flavor entries, image entries and labels
all share this format: comma-delimited records where a double-quoted field
may contain commas, line breaks and ``""`` escaped quotes.
"""

import csv
import io
from typing import List


def _split_lines(text: str) -> List[str]:
    """Split text on line breaks that are not inside a quoted field."""
    lines = []
    start = 0
    quoted = False
    field_start = True
    index = 0
    while index < len(text):
        char = text[index]
        if quoted:
            if char == '"':
                if text[index + 1:index + 2] == '"':
                    index += 1
                else:
                    quoted = False
                    field_start = False
        elif char == '"' and field_start:
            quoted = True
        elif char in "\r\n":
            lines.append(text[start:index])
            start = index + 1
            field_start = True
        else:
            field_start = char == "," or (field_start and char in " \t")
        index += 1
    lines.append(text[start:])
    return lines


def get_input_list(text: str) -> List[str]:
    """
    Split multi-line input text into a list of directives, one per line.

    A double-quoted field may span several lines. Lines keep their quotes
    so each directive parser sees the fields as written; only a line that
    is one quoted field as a whole is unwrapped.

    Args:
        text: Raw input text

    Returns:
        List of trimmed, non-empty directives with comment lines removed
    """
    if not text:
        return []

    entries = []
    for line in _split_lines(text):
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        if entry.startswith('"') and entry.endswith('"'):
            fields = parse_record(entry)
            if len(fields) == 1:
                entry = fields[0].strip()
        if entry:
            entries.append(entry)
    return entries


def parse_record(text: str) -> List[str]:
    """Split one directive into its fields, honouring double quotes."""
    for row in csv.reader([text], skipinitialspace=True):
        return row
    return []


def format_record(fields: List[str]) -> str:
    """Join fields into one directive, quoting fields that need it."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="")
    writer.writerow(fields)
    return buffer.getvalue()
