"""
Configuration loader.

Loads YAML config files and provides unified access.
Supports:
- Multiple config files merged together
- Environment variable substitution
- Default values
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from src.core.primitives.api_client import DEFAULT_BASE_URL, ApiConfig

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent.parent.parent.parent / "config"

CONFIG_FILES = ["api.example.yaml", "api.yaml"]

BASE_URL_ENV = "CATALOG_API_BASE_URL"
TIMEOUT_ENV = "CATALOG_API_TIMEOUT"


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute environment variables in config."""
    if isinstance(obj, str):
        if obj.startswith("${") and "}" in obj:
            var_part = obj[2:obj.index("}")]

            if ":-" in var_part:
                var_name, default = var_part.split(":-", 1)
            else:
                var_name, default = var_part, ""

            value = os.environ.get(var_name, default)

            if obj == f"${{{var_part}}}":
                return value

            return obj.replace(f"${{{var_part}}}", value)

        return obj

    elif isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}

    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]

    return obj


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a single YAML file."""
    if not path.exists():
        logger.warning(f"Config file not found: {path}")
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return _substitute_env_vars(data)


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries. Override takes precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


@lru_cache(maxsize=1)
def get_config(config_dir: str | None = None) -> dict[str, Any]:
    """Load and merge all config files."""
    base_dir = Path(config_dir) if config_dir else CONFIG_DIR

    config: dict[str, Any] = {}

    for filename in CONFIG_FILES:
        file_path = base_dir / filename
        if file_path.exists():
            file_config = load_yaml(file_path)
            config = deep_merge(config, file_config)
            logger.debug(f"Loaded config: {filename}")

    return config


def reload_config() -> dict[str, Any]:
    """Force reload config (clears cache)."""
    get_config.cache_clear()
    return get_config()


def load_api_config(config_dir: str | None = None) -> ApiConfig:
    """
    Build the ApiConfig for this process.

    Meant to be called once by the entry point. Precedence:
    environment variable, then config file, then built-in default.

    Args:
        config_dir: Optional directory to read YAML files from.

    Returns:
        API client configuration.
    """
    api_config = get_config(config_dir).get("api", {})

    base_url = (
        os.environ.get(BASE_URL_ENV)
        or api_config.get("base_url")
        or DEFAULT_BASE_URL
    )

    timeout_value = os.environ.get(TIMEOUT_ENV, api_config.get("timeout"))
    timeout = float(timeout_value) if timeout_value not in (None, "") else None

    config = ApiConfig(
        base_url=base_url,
        timeout=timeout,
        follow_redirects=bool(api_config.get("follow_redirects", True)),
        verify_ssl=bool(api_config.get("verify_ssl", True)),
    )
    config.default_headers.update(api_config.get("headers") or {})

    logger.debug(f"API base URL: {config.base_url}")
    return config
