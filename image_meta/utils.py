"""
Utility Functions Module for Image Meta

This module provides various utility functions used throughout the application.

Functions:
    setup_logging: Configures application logging
    random_suffix: Generates random string suffixes for output delimiters
    now_utc: Returns the current run timestamp
    print_dry_run_summary: Displays the computed metadata for dry runs
"""

import random
import string
import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def random_suffix(length=4):
    """Generate a random string suffix."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def now_utc() -> datetime:
    """Current time in UTC; read once per run and passed down."""
    return datetime.now(timezone.utc)


def print_dry_run_summary(outputs):
    """Print the outputs that would be written in dry run mode."""
    print("\nDry run summary:")
    for name, value in outputs.items():
        print(f"- {name}:")
        for line in value.splitlines() or [""]:
            print(f"    {line}")
