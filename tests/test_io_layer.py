"""Unit tests for IOLayer file, git and GitHub access."""

import json
from datetime import datetime, timezone
from unittest.mock import Mock, MagicMock, PropertyMock

import pytest
import yaml
from git.exc import GitCommandError

from image_meta.exceptions import GitContextError
from image_meta.io_layer import IOLayer


class TestFileOperations:
    """Test file reads and writes."""

    def test_read_missing_files(self, tmp_path):
        io_layer = IOLayer(None, None)

        assert io_layer.read_file(str(tmp_path / "missing")) is None
        assert io_layer.read_yaml(str(tmp_path / "missing.yaml")) is None
        assert io_layer.read_json(str(tmp_path / "missing.json")) is None

    def test_read_yaml(self, tmp_path):
        config_file = tmp_path / "meta.yaml"
        with config_file.open("w") as f:
            yaml.dump({"images": ["user/app"], "tags": ["type=sha"]}, f)

        assert IOLayer(None, None).read_yaml(str(config_file)) == {
            "images": ["user/app"],
            "tags": ["type=sha"],
        }

    def test_read_empty_yaml(self, tmp_path):
        config_file = tmp_path / "meta.yaml"
        config_file.write_text("")

        assert IOLayer(None, None).read_yaml(str(config_file)) == {}

    def test_read_json(self, tmp_path):
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps({"number": 15}))

        assert IOLayer(None, None).read_json(str(event_file)) == {"number": 15}

    def test_write_json(self, tmp_path):
        path = tmp_path / "out" / "metadata.json"

        assert IOLayer(None, None).write_json(str(path), {"tags": ["user/app:1.0"]}) is True
        assert path.read_text() == '{\n  "tags": [\n    "user/app:1.0"\n  ]\n}'

    def test_write_json_dry_run(self, tmp_path, capsys):
        path = tmp_path / "metadata.json"

        assert IOLayer(None, None, dry_run=True).write_json(str(path), {}) is False
        assert not path.exists()
        assert f"[DRY RUN] Would write to {path}" in capsys.readouterr().out

    def test_append_variable_heredoc(self, tmp_path):
        output_file = tmp_path / "github_output"
        io_layer = IOLayer(None, None)

        io_layer.append_variable(str(output_file), "version", "1.0.0")
        io_layer.append_variable(str(output_file), "tags", "user/app:1.0.0\nuser/app:latest")

        lines = output_file.read_text().splitlines()
        assert lines[0].startswith("version<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:3] == ["1.0.0", delimiter]
        tags_delimiter = lines[3].split("<<", 1)[1]
        assert lines[3].startswith("tags<<")
        assert lines[4:] == ["user/app:1.0.0", "user/app:latest", tags_delimiter]

    def test_append_variable_dry_run(self, tmp_path, capsys):
        output_file = tmp_path / "github_output"

        assert IOLayer(None, None, dry_run=True).append_variable(str(output_file), "version", "1.0") is False
        assert not output_file.exists()
        assert "[DRY RUN] Would set version" in capsys.readouterr().out


class TestGitOperations:
    """Test git queries through GitPython."""

    @pytest.fixture
    def mock_repo(self):
        """Create a mock Git repository."""
        repo = MagicMock()
        repo.git = Mock()
        return repo

    def test_head_sha(self, mock_repo):
        mock_repo.head.commit.hexsha = "860c1904a1ce19322e91ac35af1ab07466440c37"

        assert IOLayer(mock_repo, None).head_sha() == "860c1904a1ce19322e91ac35af1ab07466440c37"

    def test_head_sha_without_repo(self):
        with pytest.raises(GitContextError):
            IOLayer(None, None).head_sha()

    def test_head_sha_empty_repository(self, mock_repo):
        type(mock_repo.head).commit = PropertyMock(side_effect=ValueError("Reference does not exist"))

        with pytest.raises(GitContextError) as exc_info:
            IOLayer(mock_repo, None).head_sha()

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_head_commit_date(self, mock_repo):
        date = datetime(2020, 1, 9, 12, 0, tzinfo=timezone.utc)
        mock_repo.head.commit.committed_datetime = date

        assert IOLayer(mock_repo, None).head_commit_date() == date

    def test_symbolic_ref(self, mock_repo):
        mock_repo.git.rev_parse.return_value = "refs/heads/master\n"

        assert IOLayer(mock_repo, None).symbolic_ref() == "refs/heads/master"
        mock_repo.git.rev_parse.assert_called_once_with("--symbolic-full-name", "HEAD")

    def test_symbolic_ref_detached(self, mock_repo):
        mock_repo.git.rev_parse.return_value = "HEAD"

        assert IOLayer(mock_repo, None).symbolic_ref() is None

    def test_exact_tag(self, mock_repo):
        mock_repo.git.describe.return_value = "v1.0.0"

        assert IOLayer(mock_repo, None).exact_tag() == "v1.0.0"

    def test_no_exact_tag(self, mock_repo):
        mock_repo.git.describe.side_effect = GitCommandError("describe", 128)

        assert IOLayer(mock_repo, None).exact_tag() is None

    def test_remote_url(self, mock_repo):
        mock_repo.git.remote.return_value = "git@github.com:octocat/Hello-World.git"

        assert IOLayer(mock_repo, None).remote_url() == "git@github.com:octocat/Hello-World.git"
        mock_repo.git.remote.assert_called_once_with("get-url", "origin")

    def test_remote_url_missing(self, mock_repo):
        mock_repo.git.remote.side_effect = GitCommandError("remote", 2)

        assert IOLayer(mock_repo, None).remote_url() == ""

    def test_remote_head_branch(self, mock_repo):
        mock_repo.git.symbolic_ref.return_value = "refs/remotes/origin/main"

        assert IOLayer(mock_repo, None).remote_head_branch() == "main"

    def test_remote_branches(self, mock_repo):
        ref = Mock()
        ref.name = "origin/main"
        mock_repo.remote.return_value.refs = [ref]

        assert IOLayer(mock_repo, None).remote_branches() == ["origin/main"]

    def test_no_repository(self):
        io_layer = IOLayer(None, None)

        assert io_layer.head_commit_date() is None
        assert io_layer.symbolic_ref() is None
        assert io_layer.exact_tag() is None
        assert io_layer.remote_url() == ""
        assert io_layer.remote_head_branch() is None
        assert io_layer.remote_branches() == []


class TestGitHubOperations:
    """Test GitHub access through PyGithub."""

    def test_get_github_repo(self):
        github_client = Mock()

        repo = IOLayer(None, github_client).get_github_repo("octocat/Hello-World")

        github_client.get_repo.assert_called_once_with("octocat/Hello-World")
        assert repo is github_client.get_repo.return_value

    def test_no_client(self):
        assert IOLayer(None, None).get_github_repo("octocat/Hello-World") is None
