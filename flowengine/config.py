"""Engine configuration: structure, schema, defaults and loading."""

from __future__ import annotations

import copy
import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from flowengine.schema import (
    AnySchema,
    ListSchema,
    MapSchema,
    ObjectSchema,
    PropertySchema,
    SchemaError,
    StringSchema,
)


class LogLevel(str, enum.Enum):
    """Minimum level of log messages."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogDestination(str, enum.Enum):
    """Where log messages are written."""

    STDOUT = "stdout"


class ConfigError(ValueError):
    """Raised when configuration data does not match the configuration schema."""


@dataclass
class LogConfig:
    """Logging configuration for workflow runs."""

    level: LogLevel = LogLevel.INFO
    destination: LogDestination = LogDestination.STDOUT


@dataclass
class StepOutputLogConfig:
    """Log level used when a matching step output is encountered."""

    level: LogLevel = LogLevel.INFO


def _default_deployers() -> dict[str, Any]:
    return {"image": {"deployer_name": "podman"}}


@dataclass
class Config:
    """Configuration of the engine itself, separate from the workflow being run."""

    type_hint_plugins: list[str] = field(default_factory=list)
    local_deployers: dict[str, Any] = field(default_factory=_default_deployers)
    log: LogConfig = field(default_factory=LogConfig)
    logged_output_configs: dict[str, StepOutputLogConfig] = field(default_factory=dict)


def _level_schema() -> StringSchema:
    values = "|".join(re.escape(level.value) for level in LogLevel)
    return StringSchema(pattern=f"^(?:{values})$")


def _destination_schema() -> StringSchema:
    values = "|".join(re.escape(dest.value) for dest in LogDestination)
    return StringSchema(pattern=f"^(?:{values})$")


def _config_schema() -> ObjectSchema:
    step_output_log_config = ObjectSchema(
        "StepOutputLogConfig",
        {
            "level": PropertySchema(
                _level_schema(),
                {"name": "Log level", "description": "The level to log matching step outputs."},
                default=LogLevel.INFO.value,
            ),
        },
    )
    log_config = ObjectSchema(
        "LogConfig",
        {
            "level": PropertySchema(
                _level_schema(),
                {"name": "Log level", "description": "Minimum level of log messages to write."},
                default=LogLevel.INFO.value,
            ),
            "destination": PropertySchema(
                _destination_schema(),
                {"name": "Log destination", "description": "Where the logs should be written to."},
                default=LogDestination.STDOUT.value,
            ),
        },
    )
    return ObjectSchema(
        "Config",
        {
            "log": PropertySchema(
                log_config,
                {"name": "Logging", "description": "Logging configuration"},
                default={},
            ),
            "plugins": PropertySchema(
                ListSchema(StringSchema(min_length=1)),
                {
                    "name": "Plugins",
                    "description": "Plugins to fetch schema from for JSON schema generation.",
                },
            ),
            "deployers": PropertySchema(
                MapSchema(StringSchema(), AnySchema()),
                {
                    "name": "Local deployers",
                    "description": "Default deployers for each plugin type.",
                },
                default=_default_deployers(),
            ),
            "logged_outputs": PropertySchema(
                MapSchema(
                    StringSchema(1, 255, r"^[$@a-zA-Z0-9-_]+$"),
                    step_output_log_config,
                ),
                {"name": "Logged Outputs", "description": "Step output types to log."},
                default={},
            ),
        },
    )


def load(config_data: Any) -> Config:
    """Validate configuration data and build a Config, applying defaults."""
    if config_data is None:
        config_data = {}
    if not isinstance(config_data, Mapping):
        raise ConfigError(f"expected a configuration mapping, got {type(config_data).__name__}")
    try:
        raw = copy.deepcopy(_config_schema().unserialize(config_data))
    except SchemaError as exc:
        raise ConfigError(f"invalid configuration ({exc})") from exc
    log_data = raw.get("log", {})
    return Config(
        type_hint_plugins=list(raw.get("plugins", [])),
        local_deployers=dict(raw.get("deployers", {})),
        log=LogConfig(
            level=LogLevel(log_data.get("level", LogLevel.INFO.value)),
            destination=LogDestination(log_data.get("destination", LogDestination.STDOUT.value)),
        ),
        logged_output_configs={
            key: StepOutputLogConfig(LogLevel(value.get("level", LogLevel.INFO.value)))
            for key, value in raw.get("logged_outputs", {}).items()
        },
    )


def default() -> Config:
    """Return the default configuration."""
    return load({})