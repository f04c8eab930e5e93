"""Configuration loading: HOCON files via dataconf, then environment overrides."""

from collections.abc import Mapping
from typing import TypeVar, cast

import dataconf

from .settings import SecfetchConfig, apply_env_overrides

T = TypeVar("T")


def load_from_file(path: str, config_class: type[T]) -> T:
    """Load configuration from a HOCON file.

    Args:
        path: Path to the HOCON configuration file
        config_class: The configuration dataclass type to load into

    Returns:
        Instance of config_class populated with configuration from the file
    """
    return cast(T, dataconf.file(path, config_class))


def load_from_string(hocon_str: str, config_class: type[T]) -> T:
    """Load configuration from a HOCON string.

    Example:
        >>> hocon = '''
        ... {
        ...   retries: 5
        ...   ssm_prefix: "param://"
        ... }
        ... '''
        >>> config = load_from_string(hocon, SecfetchConfig)
    """
    return cast(T, dataconf.string(hocon_str, config_class))


def load_config(
    path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> SecfetchConfig:
    """Build the effective configuration for a run.

    Starts from the HOCON file at *path* when given (dataclass defaults
    otherwise) and layers the ``SEC_*`` / ``RETRIES`` environment
    variables on top.

    Args:
        path: Optional HOCON configuration file.
        environ: Environment mapping. Defaults to ``os.environ``.
    """
    config = load_from_file(path, SecfetchConfig) if path else SecfetchConfig()
    return apply_env_overrides(config, environ)
