"""TOML configuration loader.

Layers config/default.toml and config/{RECORDKIT_ENV}.toml. Relative rule
file paths are resolved against the file that names them, so a layer can
ship its own rule overlay next to it.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from recordkit.errors import ConfigFileError
from recordkit.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FILE = "default.toml"

# (section, key) pairs holding filesystem paths
PATH_KEYS: tuple[tuple[str, str], ...] = (("rules", "extra_rules_path"),)


def get_config_dir() -> Path | None:
    """Locate the configuration directory.

    RECORDKIT_CONFIG_DIR wins when set and must exist. Otherwise the first
    `config/` holding a default.toml, searching from the working directory
    up to the filesystem root. Returns None when there is none, which is
    the normal case for recordkit embedded as a library.
    """
    config_dir_env = os.environ.get("RECORDKIT_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    for directory in (Path.cwd(), *Path.cwd().parents):
        candidate = directory / "config"
        if (candidate / DEFAULT_FILE).is_file():
            return candidate
    return None


def get_environment() -> str:
    """Get the current environment from RECORDKIT_ENV, 'development' if unset."""
    return os.environ.get("RECORDKIT_ENV", "development").strip() or "development"


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load one configuration layer.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigFileError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    try:
        with file_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(file_path, str(e)) from e
    return resolve_paths(data, file_path.parent)


def resolve_paths(data: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    """Anchor relative path settings at the directory of their file."""
    for section, key in PATH_KEYS:
        table = data.get(section)
        if not isinstance(table, dict) or not isinstance(table.get(key), str):
            continue
        path = Path(table[key]).expanduser()
        if not path.is_absolute():
            path = base_dir / path
        data[section] = {**table, key: str(path)}
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two layers recursively, override taking precedence.

    Tables merge key by key; any other value, arrays included, replaces
    the base value whole. Neither input is modified.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config() -> dict[str, Any]:
    """Load and merge the configuration layers.

    Loading order:
    1. config/default.toml
    2. config/{RECORDKIT_ENV}.toml (optional)

    Either file may be absent; model defaults fill the gaps.
    """
    config_dir = get_config_dir()
    if config_dir is None:
        logger.debug("config_dir_not_found", cwd=str(Path.cwd()))
        return {}

    env = get_environment()
    config: dict[str, Any] = {}
    for path in (config_dir / DEFAULT_FILE, config_dir / f"{env}.toml"):
        if path.exists():
            config = deep_merge(config, load_toml(path))
            logger.debug("config_layer_loaded", path=str(path))
        elif path.name == DEFAULT_FILE:
            logger.debug("default_config_missing", config_dir=str(config_dir))
    return config
