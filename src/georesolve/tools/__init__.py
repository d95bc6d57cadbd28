"""Deployment profile helpers."""

from .config_loader import (
    ConfigLoader,
    apply_env_overrides,
    get_config,
    DEFAULT_PROFILE,
)

__all__ = [
    "ConfigLoader",
    "apply_env_overrides",
    "get_config",
    "DEFAULT_PROFILE",
]
