"""
Configuration loading - file discovery, pointer files, env overrides.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from ..utils.constants import (
    CONFIG_FILE_NAME,
    ENV_LOG_LEVEL,
    ENV_VIDEO_CODEC,
    USER_CONFIG_DIR,
)
from .schemas import ToolConfig, format_validation_error

logger = logging.getLogger(__name__)


def find_config_file(config_path: str | None = None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided)
    2. Current directory (vision_ops.yaml)
    3. ~/.config/vision-ops/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file, or None when no file exists and none was asked for

    Raises:
        ConfigurationError: If a specified path does not exist
    """
    if config_path:
        specified = Path(config_path)
        if specified.is_file():
            return specified
        raise ConfigurationError(f"Specified config file not found: {config_path}")

    search_paths = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / ".config" / USER_CONFIG_DIR / "config.yaml",
    ]

    for path in search_paths:
        if path.is_file():
            logger.debug(f"Using config: {path}")
            return path

    return None


def load_config(config_path: str | None = None) -> ToolConfig:
    """
    Load, override and validate the tool configuration.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead.

    Args:
        config_path: Optional explicit config path

    Returns:
        Validated configuration (defaults when no file is found)

    Raises:
        ConfigurationError: If the file is unreadable, invalid YAML, or invalid
    """
    config_file = find_config_file(config_path)
    raw: dict = {}

    if config_file is not None:
        raw = _read_yaml(config_file)

        # Support pointer files: { use: "path/to/actual/config.yaml" }
        if list(raw.keys()) == ["use"]:
            pointer_path = config_file.parent / raw["use"]
            logger.debug(f"Config pointer: {config_file} -> {pointer_path}")
            raw = _read_yaml(pointer_path)
            config_file = pointer_path

        logger.debug(f"Configuration loaded from {config_file}")

    raw = apply_env_overrides(raw)

    try:
        config = ToolConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {format_validation_error(e)}"
        ) from e

    _check_operation_defaults(config)
    return config


def apply_env_overrides(config: dict) -> dict:
    """
    Apply environment variable overrides.

    Args:
        config: Raw configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    config = dict(config)

    if ENV_LOG_LEVEL in os.environ:
        logger.debug(f"Using log level from environment: {ENV_LOG_LEVEL}")
        config["log_level"] = os.environ[ENV_LOG_LEVEL]

    if ENV_VIDEO_CODEC in os.environ:
        logger.debug(f"Using video codec from environment: {ENV_VIDEO_CODEC}")
        video = dict(config.get("video") or {})
        video["codec"] = os.environ[ENV_VIDEO_CODEC]
        config["video"] = video

    return config


def _read_yaml(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def _check_operation_defaults(config: ToolConfig) -> None:
    """Reject defaults for operations that do not exist."""
    from ..operations import OPERATION_REGISTRY, load_operations

    load_operations()
    unknown = sorted(set(config.operations) - set(OPERATION_REGISTRY))
    if unknown:
        raise ConfigurationError(
            f"Config defines defaults for unknown operation(s): {', '.join(unknown)}"
        )
