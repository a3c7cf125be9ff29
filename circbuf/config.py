"""Resolve ring buffer configuration from a YAML file, environment and overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from circbuf.const import (
    CONFIG_ENCODING,
    DEFAULT_CAPACITY,
    DEFAULT_OFFSET,
    DEFAULT_WRAP_LOG_INTERVAL,
    ENV_CAPACITY,
    ENV_OFFSET,
    ENV_RESET_READ_CURSOR,
    ENV_WRAP_LOG_INTERVAL,
)
from circbuf.exceptions import ConfigLoadError, ConfigValidationError

logger = logging.getLogger(__name__)

_ENV_MAP: dict[str, str] = {
    "capacity": ENV_CAPACITY,
    "offset": ENV_OFFSET,
    "reset_read_cursor": ENV_RESET_READ_CURSOR,
    "wrap_log_interval": ENV_WRAP_LOG_INTERVAL,
}

YES_CONFIRMATION = {"1", "true", "yes", "y"}


def parse_bytes(value: int | str) -> int:
    """Parse a byte quantity from an integer or unit-suffixed string.

    Supported string units (case-insensitive):
        b, k, kb, m, mb, g, gb

    Args:
        value: Raw byte value as an ``int`` or string with an optional unit
            suffix.

    Returns:
        The parsed value in bytes.

    Raises:
        ValueError: If the input cannot be parsed or contains an unknown unit.
    """
    if isinstance(value, int):
        return value

    normalized_value = str(value).strip().lower().replace(" ", "")

    if normalized_value.isdigit():
        return int(normalized_value)

    numeric_part = ""
    unit_suffix = ""
    for character in normalized_value:
        if character.isdigit() and not unit_suffix:
            numeric_part += character
        else:
            unit_suffix += character

    if not numeric_part or not unit_suffix:
        raise ValueError(f"Invalid byte value: {value!r}")

    base_value = int(numeric_part)
    if unit_suffix == "b":
        multiplier = 1
    elif unit_suffix in {"k", "kb"}:
        multiplier = 1024
    elif unit_suffix in {"m", "mb"}:
        multiplier = 1024**2
    elif unit_suffix in {"g", "gb"}:
        multiplier = 1024**3
    else:
        raise ValueError(f"Unknown byte unit in value: {value!r}")

    return base_value * multiplier


class RingBufferConfig(BaseModel):
    """Configuration options for a ring buffer over a borrowed region.

    Attributes:
        capacity: size of the usable window, in bytes.
        offset: leading bytes of the region reserved for the caller.
        reset_read_cursor: whether ``reset()`` also rewinds the read cursor.
        wrap_log_interval: log the first write wraparound and every Nth one.
    """

    capacity: int = Field(default=DEFAULT_CAPACITY, gt=0)
    offset: int = Field(default=DEFAULT_OFFSET, ge=0)
    reset_read_cursor: bool = False
    wrap_log_interval: int = Field(default=DEFAULT_WRAP_LOG_INTERVAL, ge=1)

    @field_validator("capacity", "offset", mode="before")
    @classmethod
    def _parse_byte_size(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_bytes(value)
        return value

    @property
    def required_region_size(self) -> int:
        """Return the minimum region length able to hold offset and window."""
        return self.offset + self.capacity


class ConfigManager:
    """Build effective ring buffer configuration from file, env, and overrides."""

    def __init__(self, config_path: Path | str | None = None) -> None:
        """Initialise ConfigManager.

        Args:
            config_path: Optional YAML file to load as the base configuration.
        """
        self.config_path = Path(config_path) if config_path is not None else None

    def _read_config_file(self) -> dict[str, Any]:
        """Load the base configuration mapping from the YAML file.

        Returns:
            A dictionary of configuration field names to values. Empty when no
            config file was given.

        Raises:
            ConfigLoadError: If the file is missing, unreadable or not a mapping.
        """
        if self.config_path is None:
            return {}

        try:
            with self.config_path.open("r", encoding=CONFIG_ENCODING) as config_file:
                config_data = yaml.safe_load(config_file) or {}
        except FileNotFoundError as exc:
            raise ConfigLoadError(
                f"Config file {str(self.config_path)!r} not found."
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigLoadError(
                f"Config file {str(self.config_path)!r} is not valid YAML: {exc}"
            ) from exc

        if not isinstance(config_data, dict):
            raise ConfigLoadError(
                f"Config file {str(self.config_path)!r} must contain a mapping."
            )
        return config_data

    def _read_env_overrides(self) -> dict[str, Any]:
        """Read configuration overrides from environment variables.

        Returns:
            A dictionary of configuration field names to override values.
        """
        overrides: dict[str, Any] = {}

        for field_name, env_var_name in _ENV_MAP.items():
            env_value = os.getenv(env_var_name)
            if env_value is None:
                continue

            if field_name in {"capacity", "offset"}:
                try:
                    overrides[field_name] = parse_bytes(env_value)
                except ValueError:
                    logger.warning(
                        "Ignoring unparseable %s=%r", env_var_name, env_value
                    )
                    continue
            elif field_name == "wrap_log_interval":
                try:
                    overrides[field_name] = int(env_value)
                except ValueError:
                    logger.warning(
                        "Ignoring unparseable %s=%r", env_var_name, env_value
                    )
                    continue
            else:
                overrides[field_name] = env_value.lower() in YES_CONFIRMATION

        return overrides

    def resolve_effective_config(
        self, overrides: dict[str, Any] | None = None
    ) -> RingBufferConfig:
        """Resolve the effective ring buffer configuration.

        Later sources win: defaults, then the config file, then environment
        variables, then ``overrides``.

        Args:
            overrides: Optional explicit configuration overrides.

        Returns:
            The resolved ``RingBufferConfig``.

        Raises:
            ConfigLoadError: If the config file cannot be loaded.
            ConfigValidationError: If the merged values fail validation.
        """
        merged_config = self._read_config_file()
        merged_config.update(self._read_env_overrides())
        if overrides is not None:
            merged_config.update(overrides)

        try:
            return RingBufferConfig(**merged_config)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            ]
            raise ConfigValidationError(errors) from exc

    def save_config(self, config: RingBufferConfig) -> None:
        """Write a configuration to the manager's YAML file.

        Args:
            config: The configuration to persist.

        Raises:
            ConfigLoadError: If the manager has no config file path.
        """
        if self.config_path is None:
            raise ConfigLoadError("No config file path to save to.")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding=CONFIG_ENCODING) as config_file:
            yaml.safe_dump(config.model_dump(), config_file)
