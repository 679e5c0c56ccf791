#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file loading for the block2html CLI.

Configuration files hold the same keys as :meth:`ConversionOptions.from_dict`
(camelCase or snake_case, with an optional ``ssr`` table) in JSON, TOML or
YAML format. A ``pyproject.toml`` is read from its ``[tool.block2html]``
section.
"""

import json
import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Mapping, Optional

import yaml

from block2html.constants import CONFIG_ENV_VAR
from block2html.exceptions import ConfigError


def _require_mapping(config: Any, config_path: Path, kind: str) -> Dict[str, Any]:
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"{kind} config file must contain a mapping at root level, got {type(config).__name__}",
            config_path=str(config_path),
        )
    return config


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {config_path}: {e}", str(config_path), e) from e

    if config_path.name.lower() == "pyproject.toml":
        config = config.get("tool", {}).get("block2html", {})
        if not isinstance(config, dict):
            raise ConfigError(
                f"[tool.block2html] section in {config_path} must be a table, got {type(config).__name__}",
                config_path=str(config_path),
            )
    return _require_mapping(config, config_path, "TOML")


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}", str(config_path), e) from e
    return _require_mapping(config, config_path, "JSON")


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}", str(config_path), e) from e
    return _require_mapping(config, config_path, "YAML")


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML or pyproject.toml file.

    The format is chosen from the file extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file (empty for an empty file)

    Raises
    ------
    ConfigError
        If the file does not exist, cannot be read or parsed, or does not
        hold a mapping

    Examples
    --------
    >>> config = load_config_file("block2html.yaml")
    >>> config.get("cssFramework")
    'tailwind'

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))
    if not config_path.is_file():
        raise ConfigError(f"Configuration path is not a file: {config_path}", config_path=str(config_path))

    ext = config_path.suffix.lower()
    try:
        if ext == ".toml":
            return _load_toml_config(config_path)
        elif ext in (".yaml", ".yml"):
            return _load_yaml_config(config_path)
        elif ext == ".json":
            return _load_json_config(config_path)
        else:
            raise ConfigError(
                f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml", config_path=str(config_path)
            )
    except ConfigError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}", str(config_path), e) from e


def merge_configs(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries, ``override`` taking precedence.

    Nested dictionaries (the ``ssr`` table) are merged recursively rather than
    replaced.

    Examples
    --------
    >>> merge_configs({"ssr": {"level": "minimal"}, "strict": False}, {"ssr": {"minify": True}})
    {'ssr': {'level': 'minimal', 'minify': True}, 'strict': False}

    """
    result = dict(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config_with_priority(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the configuration selected by ``--config`` or the environment.

    Priority order (highest first):
    1. Explicit config file path (``--config``)
    2. The path in the ``BLOCK2HTML_CONFIG`` environment variable

    Parameters
    ----------
    explicit_path : str, optional
        Path given on the command line

    Returns
    -------
    dict
        Loaded configuration, or an empty dict when no file is selected

    Raises
    ------
    ConfigError
        If the selected file cannot be loaded

    """
    if explicit_path:
        return load_config_file(explicit_path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return load_config_file(env_path)

    return {}


__all__ = ["load_config_file", "load_config_with_priority", "merge_configs"]
