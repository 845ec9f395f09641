"""
Metadata Assembly Module

Pure functions that turn a final Version, the image list and repository
metadata into image tags, OCI labels and their JSON and bake projections.
This module contains no side effects - only formatting logic.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from .config import OCI_LABEL_KEYS
from .models import Context, Flavor, Image, RepoInfo, Version

logger = logging.getLogger(__name__)


def format_created(created: datetime) -> str:
    """Format a timestamp as UTC ISO 8601 with milliseconds, e.g. ``2020-01-10T00:30:00.000Z``."""
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    created = created.astimezone(timezone.utc)
    return created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{created.microsecond // 1000:03d}Z"


def get_tags(version: Version, images: List[Image]) -> List[str]:
    """
    Build image tags, image by image.

    Args:
        version: Final version
        images: Images; disabled ones are skipped

    Returns:
        ``image:main`` followed by ``image:partial`` for every enabled image,
        or an empty list when there is no main version
    """
    if not version.main:
        return []

    tags = []
    for image in images:
        if not image.enable:
            continue
        tags.append(f"{image.name}:{version.main}")
        for partial in version.partial:
            tags.append(f"{image.name}:{partial}")
    return tags


def get_label_map(
    version: Version,
    context: Context,
    repo_info: RepoInfo,
    flavor: Flavor,
    custom_labels: List[str],
    created: datetime,
) -> Dict[str, str]:
    """
    Build the label map: the fixed OCI labels overlaid with custom labels.

    The fixed labels are always present, even when empty, and their keys
    carry the flavor's label prefix. Custom labels overwrite same-key entries;
    an entry without ``=`` is a key with an empty value.

    Args:
        version: Final version
        context: The triggering event
        repo_info: Repository metadata; missing fields render empty
        flavor: Flavor policy
        custom_labels: User label entries, ``key=value``
        created: Run timestamp

    Returns:
        Ordered dict of label key to value
    """
    values = [
        repo_info.name,
        repo_info.description,
        repo_info.html_url,
        repo_info.html_url,
        version.main,
        format_created(created),
        context.sha,
        repo_info.license_spdx_id,
    ]
    labels = {
        f"{flavor.label_prefix}{key}": value or ""
        for key, value in zip(OCI_LABEL_KEYS, values)
    }

    for entry in custom_labels:
        if not entry.strip():
            continue
        key, _, value = entry.partition("=")
        key = key.strip()
        if not key:
            logger.warning(f"Ignoring label without a key: {entry}")
            continue
        labels[key] = value

    return labels


def get_labels(label_map: Dict[str, str]) -> List[str]:
    """Labels as ``key=value`` strings in map order."""
    return [f"{key}={value}" for key, value in label_map.items()]


def get_json(tags: List[str], label_map: Dict[str, str]) -> Dict[str, Any]:
    """JSON projection of the metadata."""
    return {
        "tags": tags,
        "labels": label_map,
    }


def get_bake_definition(
    target: str,
    tags: List[str],
    label_map: Dict[str, str],
    images: List[Image],
    version: Version,
) -> Dict[str, Any]:
    """
    Bake file projection of the metadata.

    Args:
        target: Bake target name
        tags: Image tags
        label_map: Labels
        images: Images; only enabled names are passed as the IMAGES argument
        version: Final version

    Returns:
        ``{"target": {target: {"tags", "labels", "args"}}}``
    """
    return {
        "target": {
            target: {
                "tags": tags,
                "labels": label_map,
                "args": {
                    "IMAGES": ",".join(image.name for image in images if image.enable),
                    "VERSION": version.main or "",
                },
            }
        }
    }
