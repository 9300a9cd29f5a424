"""Settings loaded from the TOML configuration file."""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import constants
from .models import ConfigError

if TYPE_CHECKING:
    import logging

__all__ = ["BOOL_FALSE_STRINGS", "Settings", "coerce_to_bool", "load_settings"]

BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})

# Suffix accepted for duration keys expressed in milliseconds, eg: debounce_delay_ms = 80
MS_SUFFIX = "_ms"


def coerce_to_bool(value: Any, default: bool = False) -> bool:  # noqa: ANN401
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


@dataclass
class Settings:
    """Timeouts, delays and reconnection policy. All durations are in seconds."""

    request_connect_timeout: float = constants.DEFAULT_REQUEST_CONNECT_TIMEOUT
    request_read_timeout: float = constants.DEFAULT_REQUEST_READ_TIMEOUT
    event_connect_timeout: float = constants.DEFAULT_EVENT_CONNECT_TIMEOUT
    dispatch_write_timeout: float = constants.DEFAULT_DISPATCH_WRITE_TIMEOUT
    debounce_delay: float = constants.DEFAULT_DEBOUNCE_DELAY
    dispatch_refresh_delay: float = constants.DEFAULT_DISPATCH_REFRESH_DELAY
    reconnect: bool = False
    reconnect_max_retries: int = constants.RECONNECT_MAX_RETRIES
    reconnect_base_delay: float = constants.RECONNECT_BASE_DELAY
    reconnect_max_delay: float = constants.RECONNECT_MAX_DELAY

    @classmethod
    def from_dict(cls, data: dict[str, Any], log: logging.Logger | None = None) -> Settings:
        """Build settings from the `[hyprmirror]` section of a config file.

        Unknown keys are reported and ignored.

        Args:
            data: the section content
            log: logger used to report unknown keys
        """
        fields = {f.name: f for f in dataclasses.fields(cls)}
        values: dict[str, Any] = {}
        for key, raw in data.items():
            name = key
            scale = 1.0
            if key.endswith(MS_SUFFIX) and key[: -len(MS_SUFFIX)] in fields:
                name = key[: -len(MS_SUFFIX)]
                scale = 0.001
            field = fields.get(name)
            if field is None:
                if log:
                    log.warning("Unknown setting ignored: %s", key)
                continue
            values[name] = _convert(name, field.type, raw, scale)
        return cls(**values)


def _convert(name: str, type_name: Any, raw: Any, scale: float) -> Any:  # noqa: ANN401
    """Convert a raw TOML value to the type declared by the `Settings` field."""
    # annotations are strings because of `from __future__ import annotations`
    type_name = getattr(type_name, "__name__", type_name)
    if type_name == "bool":
        return coerce_to_bool(raw)
    try:
        if type_name == "int":
            return int(raw)
        return float(raw) * scale
    except (TypeError, ValueError) as e:
        msg = f"Invalid value for {name}: {raw!r}"
        raise ConfigError(msg) from e


def load_settings(path: str | Path | None = None, log: logging.Logger | None = None) -> Settings:
    """Load settings from `path` (defaults to the user's config file).

    A missing file yields the default settings.

    Raises:
        ConfigError: the file is not valid TOML or holds invalid values
    """
    fname = Path(path).expanduser() if path else constants.CONFIG_FILE
    if not fname.exists():
        if log:
            log.debug("No config file at %s, using defaults", fname)
        return Settings()
    if log:
        log.info("Loading %s", fname)
    with fname.open("rb") as f:
        try:
            config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML syntax in {fname}: {e}"
            raise ConfigError(msg) from e
    return Settings.from_dict(config.get(constants.CONFIG_SECTION, {}), log=log)
