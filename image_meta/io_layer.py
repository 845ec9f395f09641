"""
I/O Layer for Image Meta

This module contains all I/O operations (file system, Git, GitHub)
separated from business logic. This is the "imperative shell" that
handles all side effects.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Any
from datetime import datetime
import yaml
from git import Repo
from git.exc import GitCommandError
from github import Github

from .exceptions import GitContextError
from .utils import random_suffix


class IOLayer:
    """Handles all I/O operations for the application."""

    def __init__(self, repo: Optional[Repo], github_client: Optional[Github], dry_run: bool = False):
        """Initialize the I/O layer.

        Args:
            repo: Git repository object, or None outside a checkout
            github_client: GitHub client, or None without a token
            dry_run: If True, don't perform actual writes
        """
        self.repo = repo
        self.github_client = github_client
        self.dry_run = dry_run

    # -----------------------------------------------------------------------------
    # File System Operations
    # -----------------------------------------------------------------------------

    def read_file(self, path: str) -> Optional[str]:
        """Read a text file.

        Args:
            path: Path to the file

        Returns:
            File content as string or None if file doesn't exist
        """
        file_path = Path(path)
        if not file_path.exists():
            return None

        with file_path.open(encoding="utf-8") as f:
            return f.read()

    def read_yaml(self, path: str) -> Optional[Dict[str, Any]]:
        """Read a YAML file and return its contents.

        Args:
            path: Path to the YAML file

        Returns:
            Dictionary with YAML contents or None if file doesn't exist
        """
        file_path = Path(path)
        if not file_path.exists():
            return None

        with file_path.open(encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def read_json(self, path: str) -> Optional[Dict[str, Any]]:
        """Read a JSON file such as the GitHub event payload.

        Args:
            path: Path to the JSON file

        Returns:
            Parsed JSON or None if file doesn't exist
        """
        content = self.read_file(path)
        if content is None:
            return None
        return json.loads(content)

    def write_json(self, path: str, data: Dict[str, Any]) -> bool:
        """Write data to a JSON file, pretty-printed.

        Args:
            path: Path to the JSON file
            data: Data to write

        Returns:
            True if written, False if dry run
        """
        if self.dry_run:
            print(f"[DRY RUN] Would write to {path}")
            return False

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with file_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        return True

    def append_variable(self, path: str, name: str, value: str) -> bool:
        """Append a variable to a GitHub Actions command file (GITHUB_OUTPUT, GITHUB_ENV).

        Multi-line values use the heredoc form with a random delimiter.

        Args:
            path: Path to the command file
            name: Variable name
            value: Variable value

        Returns:
            True if written, False if dry run
        """
        if self.dry_run:
            print(f"[DRY RUN] Would set {name} in {path}")
            return False

        delimiter = f"ghadelimiter_{random_suffix(16)}"
        with Path(path).open("a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

        return True

    # -----------------------------------------------------------------------------
    # Git Operations
    # -----------------------------------------------------------------------------

    def head_sha(self) -> str:
        """Get the commit SHA of HEAD.

        Raises:
            GitContextError: If there is no repository or no commit
        """
        if self.repo is None:
            raise GitContextError("Not a git repository")
        try:
            return self.repo.head.commit.hexsha
        except (ValueError, GitCommandError) as e:
            raise GitContextError(f"Failed to get git context: {e}") from e

    def head_commit_date(self) -> Optional[datetime]:
        """Get the committer date of HEAD, or None when unavailable."""
        if self.repo is None:
            return None
        try:
            return self.repo.head.commit.committed_datetime
        except (ValueError, GitCommandError):
            return None

    def symbolic_ref(self) -> Optional[str]:
        """Get the full ref name of HEAD, or None when HEAD is detached."""
        if self.repo is None:
            return None
        try:
            ref = self.repo.git.rev_parse("--symbolic-full-name", "HEAD").strip()
        except GitCommandError:
            return None
        if not ref or ref == "HEAD":
            return None
        return ref

    def exact_tag(self) -> Optional[str]:
        """Get the tag pointing exactly at HEAD, if any."""
        if self.repo is None:
            return None
        try:
            return self.repo.git.describe("--tags", "--exact-match").strip() or None
        except GitCommandError:
            return None

    def remote_url(self, remote: str = "origin") -> str:
        """Get the URL of a remote, or an empty string when not configured."""
        if self.repo is None:
            return ""
        try:
            return self.repo.git.remote("get-url", remote).strip()
        except GitCommandError:
            return ""

    def remote_head_branch(self, remote: str = "origin") -> Optional[str]:
        """Get the branch a remote's HEAD points to."""
        if self.repo is None:
            return None
        try:
            ref = self.repo.git.symbolic_ref(f"refs/remotes/{remote}/HEAD").strip()
        except GitCommandError:
            return None
        return ref.removeprefix(f"refs/remotes/{remote}/") or None

    def remote_branches(self, remote: str = "origin") -> List[str]:
        """List remote-tracking branch names such as ``origin/main``."""
        if self.repo is None:
            return []
        try:
            return [ref.name for ref in self.repo.remote(remote).refs]
        except ValueError:
            return []

    # -----------------------------------------------------------------------------
    # GitHub Operations
    # -----------------------------------------------------------------------------

    def get_github_repo(self, full_name: str) -> Any:
        """Get a GitHub repository object.

        Args:
            full_name: Repository in ``owner/repo`` form

        Returns:
            github.Repository.Repository, or None without a GitHub client
        """
        if self.github_client is None:
            return None
        return self.github_client.get_repo(full_name)
