# chainloom/core/config.py
"""
Centralized configuration loading.

Config schemas live next to the code they configure (pydantic models);
this module only loads YAML and validates it against a schema.

Usage:
    from chainloom.core.config import load_config
    from chainloom.chains.config import RunConfig

    config = load_config("chainloom.yaml", RunConfig)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from chainloom.core.exceptions import ConfigurationError
from chainloom.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


# =============================================================================
# Errors
# =============================================================================


class ConfigError(ConfigurationError):
    """Base error for configuration file issues."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when config doesn't match schema."""

    pass


# =============================================================================
# Loading
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML file and return it as a dictionary.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid or the root is not a mapping
    """
    p = Path(path)

    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)

    if p.is_dir():
        raise ConfigError("Config path is a directory, not a file", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e

    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping (dict)", path=p)

    logger.debug(f"Loaded config from {p}")
    return data


def load_config(path: Union[str, Path], schema: Type[T]) -> T:
    """
    Load a YAML file and validate it against a pydantic schema.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid
        ConfigValidationError: If config doesn't match schema
    """
    p = Path(path)
    data = load_yaml(p)

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Config validation failed: {e}", path=p) from e


__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "load_yaml",
    "load_config",
]
