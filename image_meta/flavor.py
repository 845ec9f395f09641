"""
Flavor Module

Pure functions for parsing flavor directives into a Flavor policy and for
applying that policy to a resolved Version.
This module contains no side effects - only affix and latest logic.
"""

import logging
from typing import List

from .config import FLAVOR_KEYS, FLAVOR_LATEST_VALUES
from .directives import parse_record
from .exceptions import DirectiveError
from .models import Flavor, Version

logger = logging.getLogger(__name__)


def parse_flavor(inputs: List[str]) -> Flavor:
    """
    Fold flavor directives into a Flavor policy.

    Later directives overwrite earlier values. ``onlatest`` binds to the
    ``prefix`` or ``suffix`` set most recently within the same directive and
    is ignored when the directive set neither before it.

    Args:
        inputs: Flavor directives, e.g. ``["latest=false", "prefix=dev-,onlatest=true"]``

    Returns:
        Flavor policy

    Raises:
        DirectiveError: On a bare key, an unknown key or an invalid value
    """
    latest = "auto"
    prefix = ""
    suffix = ""
    prefix_latest = False
    suffix_latest = False
    label_prefix = ""

    for text in inputs:
        last_affix = None
        for field in parse_record(text):
            key, separator, value = field.partition("=")
            if not separator:
                raise DirectiveError(f"Invalid entry: {text}", text)
            key = key.strip().lower()
            value = value.strip()

            if key not in FLAVOR_KEYS:
                raise DirectiveError(f"Unknown entry: {text}", text)

            if key == "latest":
                if value not in FLAVOR_LATEST_VALUES:
                    raise DirectiveError(f"Invalid latest flavor entry: {text}", text)
                latest = value
            elif key == "prefix":
                prefix = value
                prefix_latest = False
                last_affix = "prefix"
            elif key == "suffix":
                suffix = value
                suffix_latest = False
                last_affix = "suffix"
            elif key == "onlatest":
                if value not in ("true", "false"):
                    raise DirectiveError(f"Invalid onlatest flavor entry: {text}", text)
                if last_affix == "prefix":
                    prefix_latest = value == "true"
                elif last_affix == "suffix":
                    suffix_latest = value == "true"
                else:
                    logger.warning(f"onlatest without a preceding prefix or suffix is ignored: {text}")
            elif key == "labelprefix":
                label_prefix = value

    flavor = Flavor(
        latest=latest,
        prefix=prefix,
        suffix=suffix,
        prefix_latest=prefix_latest,
        suffix_latest=suffix_latest,
        label_prefix=label_prefix,
    )
    logger.info(
        f"Flavor: latest={flavor.latest} prefix={flavor.prefix} suffix={flavor.suffix} "
        f"prefix_latest={flavor.prefix_latest} suffix_latest={flavor.suffix_latest} "
        f"label_prefix={flavor.label_prefix}"
    )
    return flavor


def latest_tag_name(flavor: Flavor) -> str:
    """Name of the synthesized latest tag under a flavor."""
    prefix = flavor.prefix if flavor.prefix_latest else ""
    suffix = flavor.suffix if flavor.suffix_latest else ""
    return f"{prefix}latest{suffix}"


def apply_flavor(version: Version, flavor: Flavor) -> Version:
    """
    Apply a flavor policy to a resolved version.

    Pure function: returns a new Version.

    Args:
        version: Version computed by the resolver
        flavor: Flavor policy

    Returns:
        Version with affixes applied and, when latest, a trailing latest entry
    """
    if flavor.latest == "auto":
        latest = version.latest
    else:
        latest = flavor.latest == "true"

    if version.main is None:
        return Version(main=None, partial=[], latest=latest)

    main = f"{flavor.prefix}{version.main}{flavor.suffix}"
    partial = []
    for value in version.partial:
        value = f"{flavor.prefix}{value}{flavor.suffix}"
        if value != main and value not in partial:
            partial.append(value)

    if latest:
        name = latest_tag_name(flavor)
        if name != main and name not in partial:
            partial.append(name)

    return Version(main=main, partial=partial, latest=latest)
