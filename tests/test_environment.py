"""Tests for environment configuration parsing and validation."""

import logging

from image_meta.environment import EnvironmentConfig


class TestFromEnv:
    """Test parsing environment variables."""

    def test_defaults(self):
        config = EnvironmentConfig.from_env({})

        assert config.images == []
        assert config.tags == []
        assert config.sep_tags == "\n"
        assert config.bake_target == "docker-metadata-action"
        assert config.output_dir == "."
        assert config.export_env is True
        assert config.dry_run is False

    def test_lists(self):
        config = EnvironmentConfig.from_env({
            "IMAGES": "user/app\nghcr.io/user/app",
            "TAGS": "type=ref,event=branch\n# comment\ntype=sha,format=long",
            "FLAVOR": "latest=false\nprefix=dev-,onlatest=true",
            "LABELS": "maintainer=CrazyMax\n\norg.opencontainers.image.vendor=MyCompany",
        })

        assert config.images == ["user/app", "ghcr.io/user/app"]
        assert config.tags == ["type=ref,event=branch", "type=sha,format=long"]
        assert config.flavor == ["latest=false", "prefix=dev-,onlatest=true"]
        assert config.labels == ["maintainer=CrazyMax", "org.opencontainers.image.vendor=MyCompany"]

    def test_output_dir_falls_back_to_runner_temp(self):
        assert EnvironmentConfig.from_env({"RUNNER_TEMP": "/tmp/runner"}).output_dir == "/tmp/runner"
        assert EnvironmentConfig.from_env(
            {"RUNNER_TEMP": "/tmp/runner", "OUTPUT_DIR": "out"}
        ).output_dir == "out"

    def test_flags(self):
        config = EnvironmentConfig.from_env({"DRY_RUN": "true", "SET_OUTPUT_ENV": "false", "DEBUG": "TRUE"})

        assert config.dry_run is True
        assert config.export_env is False
        assert config.debug is True

    def test_file_config_fills_unset_values(self):
        file_config = {
            "images": ["user/app", "ghcr.io/user/app"],
            "tags": "type=sha",
            "sep-tags": ",",
            "bake-target": "meta",
        }

        config = EnvironmentConfig.from_env({"TAGS": "type=ref,event=tag"}, file_config)

        assert config.images == ["user/app", "ghcr.io/user/app"]
        assert config.tags == ["type=ref,event=tag"]
        assert config.sep_tags == ","
        assert config.bake_target == "meta"


class TestValidate:
    """Test configuration validation."""

    def test_valid(self):
        config = EnvironmentConfig.from_env({"IMAGES": "user/app", "GITHUB_REPOSITORY": "octocat/Hello-World"})

        assert config.validate() == []

    def test_missing_config_file(self, tmp_path):
        config = EnvironmentConfig.from_env({"IMAGES": "user/app", "CONFIG_FILE": str(tmp_path / "nope.yaml")})

        assert config.validate() == [f"CONFIG_FILE '{tmp_path / 'nope.yaml'}' does not exist"]

    def test_invalid_repository(self):
        errors = EnvironmentConfig.from_env({"IMAGES": "user/app", "GITHUB_REPOSITORY": "hello"}).validate()

        assert errors == ["Invalid GITHUB_REPOSITORY 'hello'. Must be in format 'owner/repo'"]

    def test_invalid_boolean(self):
        errors = EnvironmentConfig.from_env({"IMAGES": "user/app", "DRY_RUN": "yes"}).validate()

        assert errors == ["DRY_RUN must be 'true' or 'false'"]

    def test_empty_separator_from_file(self):
        config = EnvironmentConfig.from_env({"IMAGES": "user/app"}, {"sep-labels": ""})

        assert config.validate() == ["SEP_LABELS cannot be empty"]

    def test_no_images_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            errors = EnvironmentConfig.from_env({}).validate()

        assert errors == []
        assert "No images configured" in caplog.text
