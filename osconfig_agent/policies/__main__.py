"""CLI interface for applying the yum repository policy."""

import sys
from pathlib import Path
from typing import List

import yaml

from .base import RepositoryDescriptor, parse_repository_descriptors
from .yum import yum_repositories
from ..common.logger import setup_logger
from ..common.config import AgentConfig, DEFAULT_CONFIG_PATH, load_typed_config


def load_repositories(repos_path: str) -> List[RepositoryDescriptor]:
    """Load repository descriptors from a YAML policy file.

    The file holds either a bare list or a mapping with a
    ``yum_repositories`` list.
    """
    with Path(repos_path).open("r") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = []
    if isinstance(data, dict):
        data = data.get("yum_repositories", []) or []
    return parse_repository_descriptors(data)


def main(argv=None) -> int:
    """Main entry point for the yum policy CLI."""
    args = sys.argv[1:] if argv is None else argv
    if not args or len(args) > 2:
        print(
            "Usage: python -m osconfig_agent.policies <repos.yaml> [config.yaml]",
            file=sys.stderr,
        )
        return 1

    repos_path = args[0]
    config_path = args[1] if len(args) > 1 else DEFAULT_CONFIG_PATH

    try:
        config = load_typed_config(config_path)
    except FileNotFoundError:
        # Use defaults if config not found
        config = AgentConfig()
    except (ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration {config_path}: {e}", file=sys.stderr)
        return 1

    try:
        setup_logger(
            "osconfig_agent",
            log_dir=config.log_dir,
            level=config.log_level,
            file_logging=config.file_logging,
            max_bytes=config.log_max_bytes,
            backup_count=config.log_backup_count,
        )
    except ValueError as e:
        print(f"Error: invalid configuration {config_path}: {e}", file=sys.stderr)
        return 1

    try:
        repos = load_repositories(repos_path)
    except (OSError, yaml.YAMLError, TypeError) as e:
        print(f"Error: cannot load repositories from {repos_path}: {e}", file=sys.stderr)
        return 1

    result = yum_repositories(repos, config.yum_repo_file, mode=config.repo_file_mode)

    print(f"Repo file: {result.path}")
    print(f"Repositories: {result.repositories}")
    print(f"Status: {result.status.value}")

    if result.error_message:
        print(f"Stage: {result.stage.value}")
        print(f"Error: {result.error_message}")

    return 0 if result.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
