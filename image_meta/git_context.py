"""
Git Context Module for Image Meta

This module works out the facts about the triggering event that the
resolver needs: the ref, commit SHA, commit date, default branch and
pull request details. CI variables and the event payload win; the local
checkout fills in whatever they leave out.

Functions:
    open_repository: Opens the local checkout with GitPython
    get_context: Builds the Context for a run

Raises:
    GitContextError: When the commit SHA cannot be determined
"""

import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Optional

import dpath
from dateutil import parser as date_parser
from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from .io_layer import IOLayer
from .models import Context, RepoInfo
from .utils import now_utc

logger = logging.getLogger(__name__)

_FALLBACK_DEFAULT_BRANCHES = ("main", "master")


def open_repository(path: str) -> Optional[Repo]:
    """Open the git checkout at path, or return None if there is none."""
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        logger.warning(f"No git repository found at {path}: {e}")
        return None


def _load_payload(env: Dict[str, str], io_layer: IOLayer) -> Dict[str, Any]:
    path = env.get("GITHUB_EVENT_PATH", "")
    if not path:
        return {}
    try:
        payload = io_layer.read_json(path)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring unreadable event payload {path}: {e}")
        return {}
    return payload if isinstance(payload, dict) else {}


def _payload_value(payload: Dict[str, Any], path: str) -> Optional[str]:
    value = dpath.get(payload, path, separator=".", default=None)
    if value is None or value == "":
        return None
    return str(value)


def _local_ref(io_layer: IOLayer) -> str:
    ref = io_layer.symbolic_ref()
    if ref:
        return ref
    tag = io_layer.exact_tag()
    if tag:
        return f"refs/tags/{tag}"
    return "HEAD"


def _commit_date(payload: Dict[str, Any], io_layer: IOLayer, now: datetime) -> datetime:
    timestamp = _payload_value(payload, "head_commit.timestamp")
    if timestamp:
        try:
            return date_parser.isoparse(timestamp)
        except ValueError as e:
            logger.warning(f"Ignoring invalid head commit timestamp '{timestamp}': {e}")
    return io_layer.head_commit_date() or now


def _local_default_branch(io_layer: IOLayer) -> str:
    branch = io_layer.remote_head_branch()
    if branch:
        return branch
    remote_branches = io_layer.remote_branches()
    for candidate in _FALLBACK_DEFAULT_BRANCHES:
        if f"origin/{candidate}" in remote_branches:
            return candidate
    return ""


def _pr_number_from_ref(ref: str) -> Optional[str]:
    if not ref.startswith("refs/pull/"):
        return None
    number = ref[len("refs/pull/"):].split("/", 1)[0]
    return number or None


def get_context(
    env: Dict[str, str],
    io_layer: IOLayer,
    repo_info: Optional[RepoInfo] = None,
    now: Optional[datetime] = None,
) -> Context:
    """
    Build the Context describing the triggering event.

    Args:
        env: Environment variables (typically os.environ)
        io_layer: I/O layer giving access to the payload file and local git
        repo_info: Repository metadata, used for the default branch
        now: Run timestamp, the last resort for the commit date

    Returns:
        Context for the run

    Raises:
        GitContextError: If GITHUB_SHA is unset and HEAD cannot be read
    """
    event_name = env.get("GITHUB_EVENT_NAME", "")
    payload = _load_payload(env, io_layer)

    pr_number = _payload_value(payload, "number") or _payload_value(payload, "pull_request.number")

    ref = env.get("GITHUB_REF") or _local_ref(io_layer)
    if event_name == "pull_request_target" and pr_number:
        ref = f"refs/pull/{pr_number}/merge"

    sha = env.get("GITHUB_SHA") or io_layer.head_sha()

    default_branch = (
        _payload_value(payload, "repository.default_branch")
        or (repo_info.default_branch if repo_info else "")
        or _local_default_branch(io_layer)
    )

    context = Context(
        ref=ref,
        sha=sha,
        commit_date=_commit_date(payload, io_layer, now or now_utc()),
        event_name=event_name,
        base_ref=env.get("GITHUB_BASE_REF") or _payload_value(payload, "pull_request.base.ref") or "",
        default_branch=default_branch,
        pr_number=pr_number or _pr_number_from_ref(ref),
    )
    context = replace(
        context,
        is_default_branch=bool(default_branch) and context.branch == default_branch,
    )

    logger.info(
        f"Context: event={context.event_name or '-'} ref={context.ref} sha={context.sha} "
        f"default_branch={context.default_branch or '-'}"
    )
    return context
