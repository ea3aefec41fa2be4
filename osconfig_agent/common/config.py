"""Configuration management for the OSConfig agent.

Handles loading of YAML configuration files and parsing them into typed
settings for the repository policies.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml


DEFAULT_CONFIG_PATH = "/etc/google-osconfig-agent/config.yaml"
DEFAULT_YUM_REPO_FILE = "/etc/yum.repos.d/google_osconfig_managed.repo"
DEFAULT_REPO_FILE_MODE = 0o644
DEFAULT_LOG_DIR = "/var/log/google-osconfig-agent"
DEFAULT_LOG_MAX_BYTES = 10485760  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5


@dataclass
class AgentConfig:
    """Top-level configuration for the agent's repository policies."""

    yum_repo_file: str = DEFAULT_YUM_REPO_FILE
    repo_file_mode: int = DEFAULT_REPO_FILE_MODE
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = "INFO"
    file_logging: bool = True
    log_max_bytes: int = DEFAULT_LOG_MAX_BYTES
    log_backup_count: int = DEFAULT_LOG_BACKUP_COUNT


def parse_file_mode(value: Union[int, str]) -> int:
    """Parse a permission mode given as an int or an octal string.

    Args:
        value: Mode such as 0o644, 420 or "0644"

    Returns:
        Integer permission bits

    Raises:
        ValueError: If the value is not a valid permission mode
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid file mode: {value!r}")
    if isinstance(value, int):
        mode = value
    else:
        try:
            mode = int(str(value).strip(), 8)
        except ValueError as e:
            raise ValueError(f"Invalid file mode: {value!r}") from e

    if not 0 <= mode <= 0o7777:
        raise ValueError(f"File mode out of range: {value!r}")
    return mode


def parse_config(config_dict: Dict[str, Any]) -> AgentConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        AgentConfig instance
    """
    policies = config_dict.get("policies", {}) or {}
    yum = policies.get("yum", {}) or {}
    logging_cfg = config_dict.get("logging", {}) or {}

    return AgentConfig(
        yum_repo_file=yum.get("repo_file", DEFAULT_YUM_REPO_FILE),
        repo_file_mode=parse_file_mode(yum.get("file_mode", DEFAULT_REPO_FILE_MODE)),
        log_dir=logging_cfg.get("dir", DEFAULT_LOG_DIR),
        log_level=logging_cfg.get("level", "INFO"),
        file_logging=logging_cfg.get("file_logging", True),
        log_max_bytes=int(logging_cfg.get("max_bytes", DEFAULT_LOG_MAX_BYTES)),
        log_backup_count=int(logging_cfg.get("backup_count", DEFAULT_LOG_BACKUP_COUNT)),
    )


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        TypeError: If the YAML root is not a mapping
        yaml.YAMLError: If config file is invalid YAML
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(config_path: str = DEFAULT_CONFIG_PATH) -> AgentConfig:
    """Load and parse configuration into typed dataclass.

    Args:
        config_path: Path to configuration file

    Returns:
        AgentConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    return parse_config(load_config(config_path))
