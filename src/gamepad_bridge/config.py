"""Bridge configuration.

Values are resolved from, lowest to highest precedence:
1. Dataclass defaults
2. An optional YAML file
3. GAMEPAD_BRIDGE_* environment variables
4. Explicit overrides (CLI options)
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .taxonomy import TriggerRange
from .validation import ValidationPolicy

logger = logging.getLogger(__name__)

ENV_PREFIX = "GAMEPAD_BRIDGE_"

DEFAULT_ENDPOINT = "ws://127.0.0.1:13123"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass
class BridgeConfig:
    """Runtime configuration.

    Attributes:
        endpoint: WebSocket URL of the input-simulation service
        reconnect_interval: Seconds between reconnection attempts
        handshake_timeout: Seconds before a pending connection attempt is abandoned
        trigger_range: Accepted interval for trigger values
        allow_empty_batch: Treat an empty submission as a successful no-op
        log_level: Root log level name
    """

    endpoint: str = DEFAULT_ENDPOINT
    reconnect_interval: float = 5.0
    handshake_timeout: float = 5.0
    trigger_range: TriggerRange = TriggerRange.SYMMETRIC
    allow_empty_batch: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Coerce and validate field values."""
        if not isinstance(self.endpoint, str) or not self.endpoint.startswith(("ws://", "wss://")):
            raise ConfigError(f"endpoint must be a ws:// or wss:// URL, got {self.endpoint!r}")

        for name in ("reconnect_interval", "handshake_timeout"):
            value = _to_float(name, getattr(self, name))
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive finite number, got {value}")
            setattr(self, name, value)

        try:
            self.trigger_range = TriggerRange(self.trigger_range)
        except ValueError:
            choices = ", ".join(r.value for r in TriggerRange)
            raise ConfigError(
                f"trigger_range must be one of {choices}, got {self.trigger_range!r}"
            ) from None

        self.allow_empty_batch = _to_bool("allow_empty_batch", self.allow_empty_batch)

        level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown log level: {self.log_level}")
        self.log_level = level

    @property
    def validation_policy(self) -> ValidationPolicy:
        return ValidationPolicy(
            trigger_range=self.trigger_range,
            allow_empty_batch=self.allow_empty_batch,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["trigger_range"] = self.trigger_range.value
        return data


def _to_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _field_names() -> list[str]:
    return [f.name for f in fields(BridgeConfig)]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    # Accept both a flat mapping and one nested under "bridge"
    section = data.get("bridge", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'bridge' section of {path} must be a mapping")

    known = set(_field_names())
    unknown = sorted(set(section) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {path}: {', '.join(unknown)}")
    return {key: value for key, value in section.items() if key in known}


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in _field_names():
        env_key = f"{ENV_PREFIX}{name.upper()}"
        if env_key in environ:
            values[name] = environ[env_key]
    return values


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> BridgeConfig:
    """Build the effective configuration.

    Args:
        path: Optional YAML file
        environ: Environment mapping (default: os.environ)
        **overrides: Highest-precedence values; None entries are ignored

    Raises:
        ConfigError: If any source holds an invalid value
    """
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_yaml(Path(path)))
    values.update(_read_env(os.environ if environ is None else environ))
    values.update({key: value for key, value in overrides.items() if value is not None})
    return BridgeConfig(**values)
