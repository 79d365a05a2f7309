"""Configuration loading from optional YAML file, env vars, and CLI overrides."""

import os
import logging
from dataclasses import dataclass, fields, replace

import yaml

from job_monitor.matcher import DuplicateStartPolicy, Thresholds

logger = logging.getLogger(__name__)

YAML_SECTION = "log_monitor"

ENV_VARS = {
    "logs_folder": "LOG_MONITOR_LOGS_FOLDER",
    "log_file_name": "LOG_MONITOR_LOG_FILE",
    "warning_minutes": "LOG_MONITOR_WARNING_MINUTES",
    "error_minutes": "LOG_MONITOR_ERROR_MINUTES",
    "interval_hours": "LOG_MONITOR_INTERVAL_HOURS",
    "duplicate_start_policy": "LOG_MONITOR_DUPLICATE_POLICY",
    "log_level": "LOG_MONITOR_LOG_LEVEL",
}

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class Config:
    logs_folder: str = "Logs"
    log_file_name: str = "logs.log"
    warning_minutes: float = 5.0
    error_minutes: float = 10.0
    interval_hours: float = 10.0
    duplicate_start_policy: str = DuplicateStartPolicy.LAST_WINS.value
    output_format: str = "text"
    log_level: str = "INFO"
    base_dir: str = "."

    @property
    def log_path(self) -> str:
        """Full path to the monitored log file. Relative folders resolve against base_dir."""
        folder = self.logs_folder
        if not os.path.isabs(folder):
            folder = os.path.join(self.base_dir, folder)
        return os.path.join(folder, self.log_file_name)

    @property
    def policy(self) -> DuplicateStartPolicy:
        return DuplicateStartPolicy(self.duplicate_start_policy)

    def thresholds(self) -> Thresholds:
        return Thresholds.from_minutes(self.warning_minutes, self.error_minutes)


def load_yaml_config(path: str | None) -> dict:
    """Load the log_monitor section of a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    section = data.get(YAML_SECTION, data) or {}
    if not isinstance(section, dict):
        logger.warning("Section %s in %s is not a mapping, using defaults", YAML_SECTION, path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return section


def _coerce(name: str, value):
    """Convert a raw YAML/env value to the type of the Config field."""
    default = getattr(Config, name)
    try:
        if isinstance(default, float):
            return float(value)
        return str(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name}: {value!r}")


def validate_config(config: Config) -> Config:
    """Raise ValueError if the config cannot drive a monitoring run."""
    if config.interval_hours <= 0:
        raise ValueError(f"interval_hours must be positive, got {config.interval_hours}")
    if config.duplicate_start_policy not in {p.value for p in DuplicateStartPolicy}:
        raise ValueError(f"Unknown duplicate_start_policy: {config.duplicate_start_policy}")
    if config.output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output_format: {config.output_format}")
    if not config.log_file_name:
        raise ValueError("log_file_name must not be empty")
    config.thresholds()
    return config


def load_config(yaml_data: dict | None = None, overrides: dict | None = None) -> Config:
    """Build Config from defaults, YAML data, env vars and CLI overrides (in that order)."""
    values = {}
    known = {f.name for f in fields(Config)}

    for key, value in (yaml_data or {}).items():
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        values[key] = _coerce(key, value)

    for key, env_name in ENV_VARS.items():
        raw = os.environ.get(env_name)
        if raw is not None and raw.strip():
            values[key] = _coerce(key, raw.strip())

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key not in known:
            raise ValueError(f"Unknown config override: {key}")
        values[key] = _coerce(key, value)

    if "duplicate_start_policy" in values:
        values["duplicate_start_policy"] = values["duplicate_start_policy"].lower()
    if "log_level" in values:
        values["log_level"] = values["log_level"].upper()

    return validate_config(replace(Config(), **values))
