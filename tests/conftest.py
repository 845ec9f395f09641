"""Test fixtures for Image Meta.

This module provides shared fixtures used across multiple test modules.
It sets up a frozen run clock, event contexts and repository metadata
that simulate the environment needed for testing.

Fixtures:
    now: The frozen run timestamp
    make_context: Factory for Context records
    repo_info: Repository metadata for the fixed labels
"""

from datetime import datetime, timezone

import pytest

from image_meta.models import Context, RepoInfo

SHA = "860c1904a1ce19322e91ac35af1ab07466440c37"


@pytest.fixture
def now():
    """Frozen run timestamp, 2020-01-10T00:30:00Z."""
    return datetime(2020, 1, 10, 0, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_context(now):
    """Factory building a Context for a given ref.

    Example:
        make_context("refs/tags/v1.1.1")
        make_context("refs/heads/dev", event_name="schedule")
    """

    def _make(ref="refs/heads/master", **kwargs):
        values = {
            "ref": ref,
            "sha": SHA,
            "commit_date": now,
            "event_name": "push",
            "default_branch": "master",
        }
        values.update(kwargs)
        if "is_default_branch" not in kwargs:
            values["is_default_branch"] = ref == f"refs/heads/{values['default_branch']}"
        return Context(**values)

    return _make


@pytest.fixture
def repo_info():
    """Repository metadata as returned by GitHub."""
    return RepoInfo(
        name="Hello-World",
        description="This your first repo!",
        html_url="https://github.com/octocat/Hello-World",
        default_branch="master",
        license_spdx_id="MIT",
    )
