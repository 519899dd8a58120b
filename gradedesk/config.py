"""
Configuration loading for the GradeDesk core.

Configuration is a plain dict. Values come from ``DEFAULT_CONFIG``, then an
optional JSON file, then explicit overrides; ``GRADEDESK_LOG_LEVEL`` in the
environment wins over all three for the log level.
"""

import json
import os
from typing import Any, Dict, Optional

from .core.exceptions import ConfigurationError


DEFAULT_CONFIG: Dict[str, Any] = {
    'log_level': 'INFO',
    'max_error_logs': 100,
    'max_persisted_errors': 50,
    'error_log_storage_key': 'errorLogs',
}

_POSITIVE_INT_KEYS = ('max_error_logs', 'max_persisted_errors')


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the effective configuration."""
    config = dict(DEFAULT_CONFIG)

    if path:
        config.update(_read_config_file(path))

    if overrides:
        config.update(overrides)

    env_level = os.getenv('GRADEDESK_LOG_LEVEL')
    if env_level:
        config['log_level'] = env_level

    _validate(config)
    return config


def _read_config_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return data


def _validate(config: Dict[str, Any]) -> None:
    for key in _POSITIVE_INT_KEYS:
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError(f"{key} must be a positive integer", field=key)

    if not isinstance(config.get('error_log_storage_key'), str) or not config['error_log_storage_key']:
        raise ConfigurationError("error_log_storage_key must be a non-empty string",
                                 field='error_log_storage_key')
