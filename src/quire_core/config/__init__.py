"""Quire configuration."""

from .loader import (
    ConfigLoader,
    deep_merge,
    get_config_loader,
    load_config,
    resolve_env_vars,
    resolve_env_vars_deep,
)
from .models import BuildConfig, QuireConfig, TemplateConfig

__all__ = [
    "QuireConfig",
    "TemplateConfig",
    "BuildConfig",
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    "resolve_env_vars",
    "resolve_env_vars_deep",
    "deep_merge",
]
