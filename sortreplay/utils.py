"""
Logging setup and configuration loading.

These helpers are shared by the command-line entry point and the viewer but
belong to neither the trace generator nor the playback scheduler.
"""
import json
import logging
import logging.handlers
import os
from typing import Any, Dict, Optional

from . import settings
from .algorithms import ALGORITHMS

logger = logging.getLogger(__name__)

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: dictionary with an optional "logging" key holding "level",
#       "format" and "log_file". A log_file of None disables the file handler.
#   - Side Effects: Configures the root logger with a console handler and a
#     rotating file handler. Creates the log directory if needed.
#
# load_config(path: Optional[str]) -> Dict[str, Any]:
#   - Outputs: the defaults from `settings`, overridden by the JSON file.
#   - Raises: FileNotFoundError when an explicit path does not exist,
#     json.JSONDecodeError on malformed JSON, ValueError on invalid values.

DEFAULTS: Dict[str, Any] = {
    "algorithm":  settings.DEFAULT_ALGORITHM,
    "array_size": settings.ARRAY_SIZE,
    "min_value":  settings.MIN_VALUE,
    "max_value":  settings.MAX_VALUE,
    "speed_ms":   settings.DEFAULT_SPEED_MS,
    "seed":       None,
    "logging": {
        "level":    settings.LOG_LEVEL,
        "format":   settings.LOG_FORMAT,
        "log_file": settings.LOG_FILE,
    },
}


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger from a configuration dictionary.

    Logs go to the console and, unless disabled, to a rotating file.
    """
    log_config = config.get("logging", {})
    log_level = str(log_config.get("level", settings.LOG_LEVEL)).upper()
    log_format = log_config.get("format", settings.LOG_FORMAT)
    log_file_path = log_config.get("log_file", settings.LOG_FILE)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if root.hasHandlers():
        root.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates at 1MB, keeps 5 backups.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logger.debug("Logging initialized at %s (file: %s)", log_level, log_file_path)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Loads the JSON config on top of the defaults.

    Without an explicit ``path`` the file ``sortreplay.json`` in the working
    directory is used if it exists.
    """
    config = dict(DEFAULTS)
    config["logging"] = dict(DEFAULTS["logging"])

    if path is None:
        path = os.path.join(os.getcwd(), settings.CONFIG_FILENAME)
        if not os.path.exists(path):
            return config

    logger.info("Loading configuration from %s", path)
    try:
        with open(path, "r") as f:
            overrides = json.load(f)
    except FileNotFoundError:
        logger.error("Configuration file not found at %s", path)
        raise
    except json.JSONDecodeError:
        logger.error("Error decoding JSON from %s", path)
        raise

    if not isinstance(overrides, dict):
        raise ValueError(f"{path}: top-level JSON value must be an object")

    for key, value in overrides.items():
        if key == "logging":
            if not isinstance(value, dict):
                raise ValueError(f"{path}: \"logging\" must be an object, got {value!r}")
            config["logging"].update(value)
        elif key in DEFAULTS:
            config[key] = value
        else:
            logger.warning("Ignoring unknown config key %r", key)

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    if config["algorithm"] not in ALGORITHMS:
        raise ValueError(f"unknown algorithm {config['algorithm']!r}; expected one of {', '.join(ALGORITHMS)}")
    size, lo, hi = config["array_size"], config["min_value"], config["max_value"]
    for name in ("array_size", "min_value", "max_value"):
        if not isinstance(config[name], int) or isinstance(config[name], bool):
            raise ValueError(f"{name} must be an integer, got {config[name]!r}")
    if size < 0:
        raise ValueError(f"array_size must be >= 0, got {size}")
    if lo > hi:
        raise ValueError(f"min_value ({lo}) must not exceed max_value ({hi})")
    speed = config["speed_ms"]
    if not isinstance(speed, (int, float)) or isinstance(speed, bool) or speed <= 0:
        raise ValueError(f"speed_ms must be a positive number, got {speed!r}")
    seed = config["seed"]
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ValueError(f"seed must be an integer or null, got {seed!r}")
    if not isinstance(config["logging"], dict):
        raise ValueError(f"logging must be an object, got {config['logging']!r}")
