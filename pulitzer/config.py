"""
Configuration loader for pulitzer.

Handles:
- Loading YAML configuration files
- Merging user configs over the packaged defaults
- Environment variable and config-reference substitution
- Validation of report, index, export and logging settings
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pulitzer.reporting.export import EXPORT_FORMATS

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'configs' / 'default.yaml'

_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing required parameters."""
    pass


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Parameters
    ----------
    file_path : Path
        Path to YAML file

    Returns
    -------
    dict
        Loaded configuration (empty dict for an empty file)

    Raises
    ------
    ConfigurationError
        If the file doesn't exist, isn't a mapping, or the YAML is invalid
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {file_path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Top level of {file_path} must be a mapping")
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two configuration dictionaries (override wins).
    """
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def substitute_variables(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Substitute ``${ENV_VAR}`` and ``${section.key}`` references in strings.

    Environment variables take precedence; unresolved references are left
    untouched. Chained references are resolved over a few passes.
    """
    def substitute_string(value: str, ctx: Dict[str, Any]) -> str:
        def replacer(match):
            var_path = match.group(1)
            if var_path in os.environ:
                return os.environ[var_path]
            val = get_config_value(ctx, var_path, default=None)
            if val is None or isinstance(val, (dict, list)):
                return match.group(0)
            return str(val)

        return _VAR_PATTERN.sub(replacer, value)

    def process_value(value: Any, ctx: Dict[str, Any]) -> Any:
        if isinstance(value, str):
            return substitute_string(value, ctx)
        elif isinstance(value, dict):
            return {k: process_value(v, ctx) for k, v in value.items()}
        elif isinstance(value, list):
            return [process_value(item, ctx) for item in value]
        return value

    result = config
    for _ in range(5):
        resolved = process_value(result, result)
        if resolved == result:
            break
        result = resolved
    return result


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check that the settings pulitzer reads have usable values.

    Raises
    ------
    ConfigurationError
        If a required value is missing or has the wrong type
    """
    reports = config.get('reports')
    if not isinstance(reports, dict):
        raise ConfigurationError("Missing required section: reports")

    for key in ('root', 'extension', 'index_name'):
        value = reports.get(key)
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"reports.{key} must be a non-empty string, got {value!r}")

    if not reports['extension'].startswith('.'):
        raise ConfigurationError(
            f"reports.extension must start with '.', got {reports['extension']!r}"
        )
    if '/' in reports['index_name'] or '\\' in reports['index_name']:
        raise ConfigurationError(
            f"reports.index_name must be a file name, got {reports['index_name']!r}"
        )

    title = get_config_value(config, 'index.title')
    if not isinstance(title, str):
        raise ConfigurationError(f"index.title must be a string, got {title!r}")

    fmt = get_config_value(config, 'export.default_format')
    if fmt not in EXPORT_FORMATS:
        raise ConfigurationError(
            f"export.default_format must be one of {EXPORT_FORMATS}, got {fmt!r}"
        )

    level = get_config_value(config, 'logging.level', 'INFO')
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
        raise ConfigurationError(f"logging.level is not a valid level name: {level!r}")


def load_config(config_path: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """
    Load and process configuration.

    This is the main entry point for loading configs. It:
    1. Loads the packaged defaults
    2. Merges the user config over them (if given)
    3. Substitutes variables
    4. Resolves a relative reports.root against the user config's directory
    5. Validates the result

    Parameters
    ----------
    config_path : Path, optional
        Path to a user configuration file
    validate : bool
        Whether to validate the configuration

    Returns
    -------
    dict
        Processed configuration

    Raises
    ------
    ConfigurationError
        If configuration is invalid
    """
    config = load_yaml(DEFAULT_CONFIG_PATH)

    if config_path is not None:
        config_path = Path(config_path)
        user_config = load_yaml(config_path)
        config = merge_configs(config, user_config)

    config = substitute_variables(config)

    if config_path is not None:
        root = get_config_value(config, 'reports.root')
        if isinstance(root, str) and root and get_config_value(user_config, 'reports.root') is not None:
            root_path = Path(root).expanduser()
            if not root_path.is_absolute():
                root_path = config_path.parent.resolve() / root_path
            config['reports']['root'] = str(root_path)

    if validate:
        validate_config(config)

    return config


def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a value from config using dot notation.

    Examples
    --------
    >>> get_config_value({'reports': {'root': 'reports'}}, 'reports.root')
    'reports'
    >>> get_config_value({}, 'missing.key', default='x')
    'x'
    """
    try:
        value = config
        for part in key_path.split('.'):
            value = value[part]
        return value
    except (KeyError, TypeError):
        return default
