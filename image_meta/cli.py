#!/usr/bin/env python3

"""
Container Image Metadata Generator

Simplified CLI using the Functional Core, Imperative Shell pattern.
All business logic is in pure functions, all I/O is in the I/O layer.
"""

import os
import sys
import logging
import yaml
from github import Auth, Github

from .environment import EnvironmentConfig
from .exceptions import ConfigurationError, DirectiveError, GitContextError, RepoInfoError
from .git_context import get_context, open_repository
from .github_repo import fetch_repo_info, repo_info_from_remote_url
from .io_layer import IOLayer
from .models import RepoInfo
from .plan_builder import prepare_plan
from .plan_executor import execute_plan
from .utils import now_utc, print_dry_run_summary, setup_logging

logger = logging.getLogger(__name__)


def _load_file_config(config_file: str):
    """Read the optional YAML configuration file.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if not config_file:
        return None
    try:
        file_config = IOLayer(None, None).read_yaml(config_file)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"CONFIG_FILE '{config_file}' is not valid YAML: {e}") from e
    if file_config is not None and not isinstance(file_config, dict):
        raise ConfigurationError(f"CONFIG_FILE '{config_file}' must contain a mapping")
    return file_config


def _get_repo_info(config: EnvironmentConfig, io_layer: IOLayer) -> RepoInfo:
    """Fetch repository metadata, falling back to the git remote URL."""
    if config.github_token and config.github_repository:
        try:
            return fetch_repo_info(io_layer, config.github_repository)
        except RepoInfoError as e:
            logger.warning(f"{e}. Falling back to the git remote.")

    url = io_layer.remote_url()
    if not url and config.github_repository:
        url = f"{config.github_server_url}/{config.github_repository}"
    return repo_info_from_remote_url(url)


def main():
    """Main entry point - Clean planning/execution pipeline."""
    try:
        # Step 1: Parse environment
        file_config = _load_file_config(os.environ.get("CONFIG_FILE", "").strip())
        config = EnvironmentConfig.from_env(os.environ, file_config)
        setup_logging(logging.DEBUG if config.debug else logging.INFO)

        # Step 2: Validate configuration
        errors = config.validate()
        if errors:
            for error in errors:
                print(f"Error: {error}")
            sys.exit(1)

        # Print configuration
        print(f"Images: {', '.join(config.images) or '-'}")
        if config.tags:
            print("Tag rules:")
            for tag in config.tags:
                print(f"  - {tag}")
        print(f"Bake target: {config.bake_target}")
        print(f"Dry run: {config.dry_run}")

        # Step 3: Setup I/O layer
        repo = open_repository(config.target_path)
        github_client = Github(auth=Auth.Token(config.github_token)) if config.github_token else None
        io_layer = IOLayer(repo, github_client, config.dry_run)

        # Step 4: Gather repository metadata and event context
        now = now_utc()
        repo_info = _get_repo_info(config, io_layer)
        context = get_context(os.environ, io_layer, repo_info, now)

        # Step 5: Prepare plan (pure pipeline run)
        plan = prepare_plan(config, context, repo_info, now)

        # Step 6: Execute plan (writes files and outputs)
        result = execute_plan(plan, io_layer)

        # Handle execution results
        if not result.success:
            for error in result.errors:
                print(f"Error: {error}")
            sys.exit(1)

        if config.dry_run:
            print_dry_run_summary(plan.get_outputs())
        else:
            for path in result.files_written:
                print(f"Wrote {path}")

        print("Metadata generation completed")
    except (ConfigurationError, DirectiveError, GitContextError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
