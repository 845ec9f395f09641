"""
Environment Configuration Module

Handles parsing and validation of environment variables.
This is a pure module - no side effects, just data transformation.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any
import logging
import os

from .config import DEFAULT_BAKE_TARGET, DEFAULT_SEPARATOR
from .directives import get_input_list

logger = logging.getLogger(__name__)

_BOOLEAN_VARIABLES = ("DRY_RUN", "SET_OUTPUT_ENV", "DEBUG")


@dataclass
class EnvironmentConfig:
    """Configuration parsed from environment variables."""

    images: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    flavor: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    sep_tags: str = DEFAULT_SEPARATOR
    sep_labels: str = DEFAULT_SEPARATOR
    bake_target: str = DEFAULT_BAKE_TARGET
    github_token: str = ""
    github_repository: str = ""
    github_server_url: str = "https://github.com"
    github_output: str = ""
    github_env: str = ""
    config_file: str = ""
    output_dir: str = "."
    target_path: str = "."
    export_env: bool = True
    dry_run: bool = False
    debug: bool = False
    _invalid_booleans: List[str] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_env(cls, env: Dict[str, str], file_config: Optional[Dict[str, Any]] = None) -> "EnvironmentConfig":
        """Create configuration from environment variables.

        Values from a YAML configuration file are used where the matching
        environment variable is unset or empty.

        Args:
            env: Dictionary of environment variables (typically os.environ)
            file_config: Parsed CONFIG_FILE contents, if any

        Returns:
            EnvironmentConfig instance
        """
        file_config = file_config or {}

        def _setting(name: str, key: str, default: str = "") -> str:
            value = env.get(name, "")
            if value:
                return value
            value = file_config.get(key)
            if value is None:
                return default
            if isinstance(value, list):
                return "\n".join(str(item) for item in value)
            return str(value)

        invalid_booleans = [
            name for name in _BOOLEAN_VARIABLES
            if env.get(name, "").strip().lower() not in ("", "true", "false")
        ]

        config = cls(
            images=get_input_list(_setting("IMAGES", "images")),
            tags=get_input_list(_setting("TAGS", "tags")),
            flavor=get_input_list(_setting("FLAVOR", "flavor")),
            labels=get_input_list(_setting("LABELS", "labels")),
            sep_tags=_setting("SEP_TAGS", "sep-tags", DEFAULT_SEPARATOR),
            sep_labels=_setting("SEP_LABELS", "sep-labels", DEFAULT_SEPARATOR),
            bake_target=_setting("BAKE_TARGET", "bake-target", DEFAULT_BAKE_TARGET).strip(),
            github_token=env.get("GH_TOKEN", ""),
            github_repository=env.get("GITHUB_REPOSITORY", "").strip(),
            github_server_url=(env.get("GITHUB_SERVER_URL") or "https://github.com").rstrip("/"),
            github_output=env.get("GITHUB_OUTPUT", ""),
            github_env=env.get("GITHUB_ENV", ""),
            config_file=env.get("CONFIG_FILE", "").strip(),
            output_dir=env.get("OUTPUT_DIR") or env.get("RUNNER_TEMP") or ".",
            target_path=env.get("TARGET_PATH", "."),
            export_env=env.get("SET_OUTPUT_ENV", "true").lower() == "true",
            dry_run=env.get("DRY_RUN", "false").lower() == "true",
            debug=env.get("DEBUG", "false").lower() == "true",
        )
        config._invalid_booleans = invalid_booleans
        return config

    def validate(self) -> List[str]:
        """Validate the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if self.config_file and not os.path.isfile(self.config_file):
            errors.append(f"CONFIG_FILE '{self.config_file}' does not exist")

        if not self.bake_target:
            errors.append("BAKE_TARGET cannot be empty")

        if not self.sep_tags:
            errors.append("SEP_TAGS cannot be empty")

        if not self.sep_labels:
            errors.append("SEP_LABELS cannot be empty")

        if self.github_repository and self.github_repository.count("/") != 1:
            errors.append(
                f"Invalid GITHUB_REPOSITORY '{self.github_repository}'. Must be in format 'owner/repo'"
            )

        for name in self._invalid_booleans:
            errors.append(f"{name} must be 'true' or 'false'")

        if not self.images:
            logger.warning("No images configured, no tags will be generated")

        return errors
