"""
Repository Metadata Module

Fetches the repository metadata used for the fixed labels, either from
the GitHub API or, without API access, from the git remote URL.
"""

import re
import logging
from github.GithubException import GithubException

from .exceptions import RepoInfoError
from .io_layer import IOLayer
from .models import RepoInfo

logger = logging.getLogger(__name__)

_SSH_REMOTE = re.compile(r"^(?:ssh://)?[\w.-]+@([^:/]+)[:/](?:\d+/)?(.+?)(?:\.git)?/?$")
_HTTP_REMOTE = re.compile(r"^https?://(?:[^@/]+@)?([^/]+)/(.+?)(?:\.git)?/?$")


def fetch_repo_info(io_layer: IOLayer, full_name: str) -> RepoInfo:
    """Fetch repository metadata from GitHub.

    Args:
        io_layer: I/O layer holding the GitHub client
        full_name: Repository in ``owner/repo`` form

    Returns:
        RepoInfo with missing fields as empty strings

    Raises:
        RepoInfoError: If there is no client or the API call fails
    """
    try:
        repo = io_layer.get_github_repo(full_name)
        if repo is None:
            raise RepoInfoError("No GitHub token configured")
        license_info = repo.license
        return RepoInfo(
            name=repo.name or "",
            description=repo.description or "",
            html_url=repo.html_url or "",
            default_branch=repo.default_branch or "",
            license_spdx_id=(license_info.spdx_id if license_info else "") or "",
        )
    except GithubException as e:
        raise RepoInfoError(f"Failed to fetch repository {full_name}: {e}") from e


def repo_info_from_remote_url(url: str, default_branch: str = "") -> RepoInfo:
    """Derive repository metadata from a git remote URL.

    ``git@host:owner/repo.git`` and ``https://host/owner/repo.git`` both map
    to name ``repo`` and URL ``https://host/owner/repo``. Other URLs only
    yield a name.
    """
    url = url.strip()
    if not url:
        return RepoInfo(default_branch=default_branch)

    match = _HTTP_REMOTE.match(url) or _SSH_REMOTE.match(url)
    if match:
        host, path = match.groups()
        return RepoInfo(
            name=path.rsplit("/", 1)[-1],
            html_url=f"https://{host}/{path}",
            default_branch=default_branch,
        )

    name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1].removesuffix(".git")
    logger.debug(f"Unrecognized remote URL {url}, using name '{name}'")
    return RepoInfo(name=name, default_branch=default_branch)
