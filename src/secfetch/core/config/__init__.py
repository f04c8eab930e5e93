"""Configuration models for secfetch.

This package provides dataconf-based configuration models. Settings are
read from an optional HOCON file and overridden from the environment.
"""

from secfetch.core.config.base import LogLevel, ProviderName
from secfetch.core.config.loader import load_config, load_from_file, load_from_string
from secfetch.core.config.retry import RetryConfig
from secfetch.core.config.settings import SecfetchConfig, apply_env_overrides

__all__ = [
    "LogLevel",
    "ProviderName",
    "RetryConfig",
    "SecfetchConfig",
    "apply_env_overrides",
    "load_config",
    "load_from_file",
    "load_from_string",
]
