"""
Loading of schema-forge settings.

Settings come from a JSON file named by the ``SCHEMA_FORGE_CONFIG``
environment variable (``.env`` files are honoured by the CLI), falling
back to ``schema_forge.json`` in the working directory. Keys found in the
file override ``DEFAULT_CONFIG``; a missing or unreadable file leaves the
defaults in place. Command line options override both.
"""

# --- Imports ---
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from .dialects import OutputFormat

# --- Module-level Constants ---
CONFIG_ENV_VAR = "SCHEMA_FORGE_CONFIG"
CONFIG_FILENAME = "schema_forge.json"

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "format": "openai",
    "pretty_print": False,
    "indent": 2,
    "sort_keys": True,
    "token_model": "gpt-4o",
}

OUTPUT_FORMATS = tuple(output_format.value for output_format in OutputFormat)

# --- Helper Functions ---


def _valid_overrides(overrides: Dict[str, Any], config_path: Path) -> Dict[str, Any]:
    """Drop known settings whose value has the wrong type; the default stays."""
    valid = {}
    for key, value in overrides.items():
        default = DEFAULT_CONFIG.get(key)
        # bool is an int subclass, so compare exact types
        if default is not None and type(value) is not type(default):
            logger.error(
                "Ignoring '%s' in %s: expected %s, got %r",
                key,
                config_path,
                type(default).__name__,
                value,
            )
            continue
        if key == "format" and value.lower() not in OUTPUT_FORMATS:
            logger.error("Ignoring unknown format %r in %s", value, config_path)
            continue
        if key == "indent" and value < 0:
            logger.error("Ignoring negative indent %r in %s", value, config_path)
            continue
        valid[key] = value
    return valid


def get_config_path() -> Path:
    return Path(os.getenv(CONFIG_ENV_VAR) or CONFIG_FILENAME)


def load_config() -> Dict[str, Any]:
    """
    Load settings, merged over the defaults.

    Returns
    -------
    dict
        ``DEFAULT_CONFIG`` updated with the keys of the configuration file.
        Unknown keys are kept but ignored by the CLI. A known key with a
        value of the wrong type (or an unknown format, or a negative
        indent) is logged and keeps its default.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = get_config_path()

    if not config_path.exists():
        logger.debug("No configuration file at %s, using defaults", config_path)
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            overrides = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in configuration file %s: %s", config_path, e)
        return config
    except OSError as e:
        logger.error("Error loading configuration %s: %s", config_path, e)
        return config

    if not isinstance(overrides, dict):
        logger.error("Configuration file %s must contain a JSON object", config_path)
        return config

    config.update(_valid_overrides(overrides, config_path))
    logger.info("Loaded configuration from %s", config_path)
    return config


def get_setting(key: str) -> Any:
    """
    Return a single setting.

    Parameters
    ----------
    key : str
        One of the ``DEFAULT_CONFIG`` keys.

    Returns
    -------
    Any
        The configured value, or the default when not configured.
    """
    return load_config().get(key, DEFAULT_CONFIG.get(key))
