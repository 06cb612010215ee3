"""Configuration module — frozen dataclass loaded from environment variables and optional YAML."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

# YAML keys accepted for each field; camelCase names come from the legacy key:value config file
_YAML_KEYS = {
    "log_dir": ("log_dir", "logDir"),
    "max_retained_files": ("max_retained_files", "maxLogFiles"),
    "rotation_interval_seconds": ("rotation_interval_seconds", "logFrequencySeconds"),
}


class ConfigError(ValueError):
    """Raised when the rotation interval, retention cap, or log directory is invalid."""


@dataclass(frozen=True)
class Config:
    log_dir: str = "logs"
    max_retained_files: int = 10
    rotation_interval_seconds: int = 3600


def require_positive_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _parse_int(name: str, raw) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def validate_config(config: Config) -> Config:
    """Check every field and return the config unchanged. Raises ConfigError."""
    if not isinstance(config.log_dir, str) or not config.log_dir.strip():
        raise ConfigError("log_dir must be a non-empty path")
    require_positive_int("max_retained_files", config.max_retained_files)
    require_positive_int("rotation_interval_seconds", config.rotation_interval_seconds)
    return config


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or file is missing."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    settings = {}
    for field_name, keys in _YAML_KEYS.items():
        for key in keys:
            if key in data:
                settings[field_name] = data[key]
                break
    logger.info("Loaded YAML config from %s", path)
    return settings


def load_config(path: str | None = None) -> Config:
    """Build a validated Config. Precedence: env vars, then YAML file, then defaults."""
    yaml_data = load_yaml_config(path or os.environ.get("CONFIG_PATH"))

    log_dir = os.environ.get("LOG_DIR", yaml_data.get("log_dir", Config.log_dir))
    max_retained = os.environ.get(
        "MAX_RETAINED_FILES", yaml_data.get("max_retained_files", Config.max_retained_files)
    )
    interval = os.environ.get(
        "ROTATION_INTERVAL_SECONDS",
        yaml_data.get("rotation_interval_seconds", Config.rotation_interval_seconds),
    )

    return validate_config(Config(
        log_dir=log_dir,
        max_retained_files=_parse_int("max_retained_files", max_retained),
        rotation_interval_seconds=_parse_int("rotation_interval_seconds", interval),
    ))
