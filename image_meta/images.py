"""
Image Directive Module

Pure functions for parsing image directives.

A directive either lists bare image names (``user/app,ghcr.io/user/app``) or
describes one image with attributes (``name=user/app,enable=false``; a bare
first field may stand in for ``name=``).
"""

from typing import List

from .directives import parse_record
from .exceptions import DirectiveError
from .models import Image


def transform_images(inputs: List[str]) -> List[Image]:
    """
    Parse image directives.

    Disabled images are returned too so callers can report them.

    Args:
        inputs: Image directives

    Returns:
        List of Image records in input order

    Raises:
        DirectiveError: On unknown attributes, invalid values or empty names
    """
    images = []
    for text in inputs:
        fields = [field.strip() for field in parse_record(text) if field.strip()]
        if all("=" not in field for field in fields):
            images.extend(Image(name=field.lower()) for field in fields)
            continue
        images.append(_parse_image(text, fields))
    return images


def _parse_image(text: str, fields: List[str]) -> Image:
    name = None
    enable = True
    for field in fields:
        key, separator, value = field.partition("=")
        if not separator:
            key, value = "name", field
        key = key.strip().lower()
        value = value.strip()

        if key == "name":
            if name is not None:
                raise DirectiveError(f"Image name attribute set twice: {text}", text)
            name = value.lower()
        elif key == "enable":
            if value not in ("true", "false"):
                raise DirectiveError(f"Invalid enable attribute value: {text}", text)
            enable = value == "true"
        else:
            raise DirectiveError(f"Unknown image attribute: {text}", text)

    if not name:
        raise DirectiveError(f"Image name attribute empty: {text}", text)
    return Image(name=name, enable=enable)
