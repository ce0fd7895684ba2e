"""Configuration management for Brother Exporter."""

import logging
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from brother_exporter.errors import ConfigError

logger = logging.getLogger(__name__)


DEFAULT_LISTEN = ":9055"
DEFAULT_CONFIG_FILE = "/etc/printers.yml"

LISTEN_PATTERN = re.compile(r"^(?P<host>\[[^\]]+\]|[^:\[\]]*):(?P<port>\d+)$")


def parse_listen(listen: str) -> tuple[str, int]:
    """Split a listen address into host and port.

    Args:
        listen: Address like ":9055", "0.0.0.0:9055" or "[::1]:9055"

    Returns:
        Tuple of (host, port); an empty host means all interfaces

    Raises:
        ValueError: If the address is not of the form [host]:port
    """
    match = LISTEN_PATTERN.match(listen.strip())
    if not match:
        raise ValueError(f"Invalid listen address: {listen}")
    port = int(match.group("port"))
    if not 0 <= port <= 65535:
        raise ValueError(f"Invalid listen port: {port}")
    return match.group("host").strip("[]"), port


class PrintersConfig(BaseModel):
    """Printers polled in static mode."""

    printers: list[str]

    @field_validator("printers", mode="before")
    @classmethod
    def coerce_printers(cls, v: Any) -> Any:
        """Accept bare numbers and drop blank entries."""
        if not isinstance(v, list):
            return v
        return [str(item).strip() for item in v if item is not None and str(item).strip()]

    @field_validator("printers")
    @classmethod
    def validate_printers(cls, v: list[str]) -> list[str]:
        """Require at least one printer."""
        if not v:
            raise ValueError("no printer addresses found")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return upper_v


class ServerConfig(BaseModel):
    """Process configuration, built from command-line flags."""

    listen: str = DEFAULT_LISTEN
    config_file: str = DEFAULT_CONFIG_FILE
    mode: Literal["static", "query"] = "static"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("listen")
    @classmethod
    def validate_listen(cls, v: str) -> str:
        """Validate listen address format."""
        parse_listen(v)
        return v


def load_printers_config(config_path: Path) -> PrintersConfig:
    """Load the printer list from a YAML file.

    Args:
        config_path: Path to a file with a top-level ``printers:`` list

    Returns:
        PrintersConfig object

    Raises:
        ConfigError: If the file cannot be read, is not YAML, lacks the
            printers section or lists no printers
    """
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"could not read {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict) or "printers" not in data:
        raise ConfigError(f"printers section not found in {config_path}")

    try:
        config = PrintersConfig(printers=data["printers"] or [])
    except ValidationError as e:
        raise ConfigError(f"invalid printers section in {config_path}: {e}") from e

    logger.debug(f"Loaded {len(config.printers)} printer(s) from {config_path}")
    return config
