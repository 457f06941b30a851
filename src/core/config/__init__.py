"""Config module — loading and managing configuration."""

from src.core.config.loader import (
    get_config,
    load_api_config,
    reload_config,
)

__all__ = [
    "get_config",
    "load_api_config",
    "reload_config",
]
