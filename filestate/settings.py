"""Runtime settings — optional YAML file overlaid with environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from filestate.codec.decoder import DEFAULT_MAX_DEPTH
from filestate.errors import ConfigError
from filestate.inspector import DEFAULT_CHUNK_SIZE

CONFIG_ENV_VAR = "FILESTATE_CONFIG"
LOG_FORMATS = {"json", "rich"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# The decoder recurses about twice per nesting level
MAX_DEPTH_LIMIT = 256

_ENV_OVERRIDES = {
    "log_level": "FILESTATE_LOG_LEVEL",
    "log_format": "FILESTATE_LOG_FORMAT",
    "chunk_size": "FILESTATE_CHUNK_SIZE",
    "max_depth": "FILESTATE_MAX_DEPTH",
}


@dataclass(frozen=True)
class Settings:
    # Logging (always to stderr)
    log_level: str = "WARNING"
    log_format: str = "json"

    # Content digests are computed over chunks of this many bytes
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Deepest object/array nesting accepted in a request
    max_depth: int = DEFAULT_MAX_DEPTH


def load_settings(path: str | Path | None = None) -> Settings:
    """Build Settings from an optional YAML file and the environment.

    The file is ``path`` if given, else ``$FILESTATE_CONFIG`` if set.
    Environment variables override values from the file.

    Raises:
        ConfigError: If the file cannot be read or a value is invalid.
    """
    raw: dict = {}

    path = path or os.getenv(CONFIG_ENV_VAR) or None
    if path:
        raw.update(_read_config_file(Path(path)))

    for key, env_var in _ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None and value.strip() != "":
            raw[key] = value.strip()

    return _build_settings(raw)


def _read_config_file(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in settings file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    unknown = set(data) - set(_ENV_OVERRIDES)
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {', '.join(sorted(unknown))}")
    return data


def _build_settings(raw: dict) -> Settings:
    defaults = Settings()

    log_level = str(raw.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log_level '{log_level}'. Must be one of: {sorted(LOG_LEVELS)}")

    log_format = str(raw.get("log_format", defaults.log_format)).lower()
    if log_format not in LOG_FORMATS:
        raise ConfigError(f"Invalid log_format '{log_format}'. Must be one of: {sorted(LOG_FORMATS)}")

    return Settings(
        log_level=log_level,
        log_format=log_format,
        chunk_size=_positive_int(raw, "chunk_size", defaults.chunk_size),
        max_depth=_positive_int(raw, "max_depth", defaults.max_depth, upper=MAX_DEPTH_LIMIT),
    )


def _positive_int(raw: dict, key: str, default: int, upper: int | None = None) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"Invalid {key} '{value}': expected a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {key} '{value}': expected a positive integer") from e
    if number <= 0:
        raise ConfigError(f"Invalid {key} '{value}': expected a positive integer")
    if upper is not None and number > upper:
        raise ConfigError(f"Invalid {key} '{value}': must not exceed {upper}")
    return number
