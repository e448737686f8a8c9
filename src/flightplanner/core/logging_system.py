"""Logging setup for the flight planner.

This module configures the standard logging package from a YAML file:
console output, a combined log file in a platform-specific directory, and
per-component log levels.

Platform-specific log locations:
    - macOS: ~/Library/Logs/FlightPlanner/flightplanner.log
    - Linux: ~/.flightplanner/logs/flightplanner.log
    - Windows: %AppData%/FlightPlanner/Logs/flightplanner.log

Each start rotates the previous log files, keeping the last few runs.

Typical usage example:
    from flightplanner.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    log = get_logger("flightplanner.navigation")
    log.info("Loaded %d navaids", count)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

_logging_config: dict[str, Any] = {}
_initialized = False

DEFAULT_LOG_FILENAME = "flightplanner.log"


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get platform-specific log directory.

    Returns:
        Path to the platform-appropriate log directory.
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "FlightPlanner"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "FlightPlanner" / "Logs"
    else:
        return Path.home() / ".flightplanner" / "logs"


def rotate_logs(
    log_dir: Path, log_filename: str = DEFAULT_LOG_FILENAME, keep_count: int = 5
) -> None:
    """Rotate logs on startup, keeping the last N runs.

    flightplanner.log becomes flightplanner.log.1, older files shift up by
    one and anything past keep_count is deleted.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.
    """
    log_file = log_dir / log_filename
    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def _get_default_config() -> dict[str, Any]:
    return {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "file": {
            "enabled": True,
            "filename": DEFAULT_LOG_FILENAME,
            "level": "DEBUG",
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "WARNING",
        },
        "components": {},
    }


def initialize_logging(
    config_path: str | Path | None = None, use_platform_dir: bool = True
) -> None:
    """Initialize the logging system from YAML configuration.

    Call once at startup, before catalogs are loaded.

    Args:
        config_path: Path to logging configuration YAML file. Values in the
            file override the built-in defaults.
        use_platform_dir: If True, write logs to the platform directory
            instead of log_dir from the config.

    Raises:
        LoggingError: If the configuration file cannot be read.
    """
    global _logging_config, _initialized

    config = _get_default_config()
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")
        try:
            with config_path.open("r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e
        if not isinstance(loaded, dict):
            raise LoggingError(f"Logging config must be a mapping: {config_path}")
        for key, value in loaded.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

    if use_platform_dir:
        config["log_dir"] = str(get_platform_log_dir())

    _logging_config = config
    _configure_root_logger()
    _configure_components()
    _initialized = True


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise LoggingError(f"Unknown log level: {name}")
    return level


def _configure_root_logger() -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_config = _logging_config.get("console", {})
    if console_config.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(console_config.get("level", "WARNING")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    file_config = _logging_config.get("file", {})
    if file_config.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        filename = file_config.get("filename", DEFAULT_LOG_FILENAME)
        rotate_logs(log_dir, filename, file_config.get("backup_count", 5))

        # Rotation already happened above, so start a fresh file
        file_handler = logging.FileHandler(log_dir / filename, mode="w", encoding="utf-8")
        file_handler.setLevel(_level(file_config.get("level", "DEBUG")))
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


def _configure_components() -> None:
    for name, level in (_logging_config.get("components") or {}).items():
        logging.getLogger(name).setLevel(_level(level))


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds with a dot separator."""

    def formatTime(self, record, datefmt=None):
        """Format time with milliseconds using dot separator."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    return MillisecondFormatter(
        _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S"),
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Level overrides from the components section apply once
    initialize_logging() has run.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def is_initialized() -> bool:
    """Check whether initialize_logging() has configured the root logger."""
    return _initialized


def shutdown_logging() -> None:
    """Flush, detach and close the handlers installed on the root logger."""
    global _initialized
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.flush()
        root_logger.removeHandler(handler)
        handler.close()
    _initialized = False
