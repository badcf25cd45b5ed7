"""Configuration management for svglinter using Pydantic models."""

import importlib.util
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".svglintrc.py", ".svglintrc.json")


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class OutputFormat(str, Enum):
    """CLI output formats."""
    TABLE = "table"
    JSON = "json"


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO


class LintConfig(BaseModel):
    """User-provided lint configuration.

    ``rules`` maps a rule name to ``False`` (disabled), one rule config, or a
    list of rule configs. Unknown top-level keys are ignored.
    """
    rules: dict[str, Any] = Field(default_factory=dict)
    ignore: list[str] = Field(default_factory=list)
    fixtures: Callable[..., Any] | None = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    @field_validator("ignore", mode="before")
    @classmethod
    def validate_ignore(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


DEFAULT_RULES: dict[str, Any] = {"valid": True}


def coerce_config(config: "LintConfig | dict | None") -> LintConfig:
    """Accept a LintConfig, a plain mapping, or None.

    Raises:
        ConfigError: if the mapping does not describe a valid configuration
    """
    if config is None:
        return LintConfig()
    if isinstance(config, LintConfig):
        return config
    if not isinstance(config, dict):
        raise ConfigError(f"Config must be a mapping, got {type(config).__name__}")
    try:
        return LintConfig(**config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(config_path: str | Path | None = None, start_dir: Path | None = None) -> LintConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    the start directory and its parents for .svglintrc.py or
                    .svglintrc.json

    Returns:
        LintConfig: Loaded and validated configuration

    Raises:
        ConfigError: If the config file was given but not found, or is invalid
    """
    if config_path is None:
        config_path = find_config_file(start_dir)
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return LintConfig()
    else:
        config_path = Path(config_path)
        if not config_path.is_absolute() and start_dir is not None:
            config_path = start_dir / config_path
        if not config_path.exists():
            raise ConfigError(f"Config file not found at '{config_path}'")

    logger.debug(f"Loading config from {config_path}")
    if config_path.suffix == ".py":
        data = _load_python_config(config_path)
    else:
        try:
            with open(config_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file {config_path}: {e}") from e
    return coerce_config(data)


def _load_python_config(config_path: Path) -> dict:
    """Execute a Python config module and return its ``config`` mapping."""
    spec = importlib.util.spec_from_file_location(f"svglintrc_{abs(hash(config_path))}", config_path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot load Python config {config_path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Failed to execute config file {config_path}: {e}") from e
    data = getattr(module, "config", None)
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must define a 'config' dict")
    return data


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find a config file by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        for name in CONFIG_FILENAMES:
            config_file = current / name
            if config_file.exists():
                return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None
