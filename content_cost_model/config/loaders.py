# content_cost_model/config/loaders.py
"""
Loading of estimator settings from YAML.

The file is parsed with PyYAML, checked structurally with cerberus and then
validated into :class:`EstimatorSettings`. Every key is optional; anything
left out keeps its default.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from content_cost_model.config.models import EstimatorSettings
from content_cost_model.schema.columns import ContentColumns, EffortFields

logger = logging.getLogger(__name__)


class ConfigLoadError(Exception):
    """Custom exception for errors during config loading."""

    pass


SETTINGS_SCHEMA: Dict[str, Any] = {
    "canonical_rates": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string"},
        "valuesrules": {"type": "number", "min": 0},
    },
    "capacity_days_per_week": {"type": "integer", "required": False, "min": 1, "max": 7},
    "storage_key": {"type": "string", "required": False, "empty": False},
    "demand_mapping": {
        "type": "list",
        "required": False,
        "schema": {
            "type": "dict",
            "schema": {
                "effort_field": {
                    "type": "string",
                    "required": True,
                    "allowed": [f.value for f in EffortFields],
                },
                "role": {"type": "string", "required": True, "empty": False},
                "share": {"type": "number", "required": False, "min": 0},
                "complexity": {
                    "type": "integer",
                    "required": False,
                    "nullable": True,
                    "allowed": [1, 2, 3],
                },
            },
        },
    },
    "csv_fallbacks": {
        "type": "dict",
        "required": False,
        "keysrules": {"type": "string", "allowed": ContentColumns.ALL[3:]},
        "valuesrules": {"type": "number", "min": 0},
    },
}


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Loads configuration data from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        A dictionary containing the loaded configuration. An empty file yields ``{}``.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    config_path = Path(config_path)
    logger.info(f"Attempting to load configuration from: {config_path}")

    if not config_path.is_file():
        logger.error(f"Configuration file not found at path: {config_path}")
        raise ConfigLoadError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception(f"Error parsing YAML configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Error parsing YAML file {config_path}") from e
    except OSError as e:
        logger.exception(f"Could not read configuration file {config_path}: {e}")
        raise ConfigLoadError(f"Could not read configuration file {config_path}") from e

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        logger.error(f"Configuration file {config_path} did not parse into a dictionary.")
        raise ConfigLoadError(f"Invalid configuration format in {config_path}: Expected a dictionary.")

    logger.info(f"Successfully loaded configuration from {config_path}")
    return config_data


def settings_from_dict(config_data: Dict[str, Any]) -> EstimatorSettings:
    """Validate a raw settings mapping and build :class:`EstimatorSettings`.

    Raises:
        ConfigLoadError: On unknown keys, wrong types or out-of-range values.
    """
    v = Validator(SETTINGS_SCHEMA)
    if not v.validate(config_data):
        raise ConfigLoadError(f"Config validation failed: {v.errors}")

    try:
        settings = EstimatorSettings(**config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid estimator settings: {e}") from e

    logger.debug(f"Estimator settings: {settings}")
    return settings


def load_settings(config_path: Optional[Union[str, Path]] = None) -> EstimatorSettings:
    """Load settings from ``config_path``, or return the defaults when no path is given."""
    if config_path is None:
        return EstimatorSettings()
    return settings_from_dict(load_yaml_config(config_path))


__all__ = [
    "ConfigLoadError",
    "SETTINGS_SCHEMA",
    "load_settings",
    "load_yaml_config",
    "settings_from_dict",
]
