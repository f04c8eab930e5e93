"""Top-level secfetch configuration model and environment overrides."""

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .base import LogLevel, ProviderName
from .retry import RetryConfig

ENV_SSM_PREFIX = "SEC_SSM_PREFIX"
ENV_SECRETS_PREFIX = "SEC_SECRETS_PREFIX"
ENV_ENV_PREFIX = "SEC_ENV_PREFIX"
ENV_BASE64_PREFIX = "SEC_BASE64_PREFIX"
ENV_IGNORE_ERRORS = "SEC_IGNORE_ERR"
ENV_RETRIES = "RETRIES"
ENV_TIMEOUT = "SEC_TIMEOUT"


def _default_order() -> list[ProviderName]:
    return list(ProviderName)


@dataclass
class SecfetchConfig:
    """Configuration for a secfetch run.

    Values are layered: dataclass defaults, then an optional HOCON file,
    then the environment (see :func:`apply_env_overrides`), then CLI flags.
    """

    ssm_prefix: str = "ssm://"
    """Trigger for SSM Parameter Store placeholders (default: ssm://)"""

    secrets_prefix: str = "secrets://"
    """Trigger for Secrets Manager placeholders (default: secrets://)"""

    env_prefix: str = "env://"
    """Trigger for environment variable placeholders (default: env://)"""

    base64_prefix: str = "base64://"
    """Trigger for inline base-64 placeholders (default: base64://)"""

    retries: int = 3
    """Fetch attempts per placeholder (default: 3)"""

    timeout_seconds: float = 30.0
    """Deadline shared by every fetch on one input line (default: 30)"""

    ignore_errors: bool = False
    """Log failures but keep going and exit successfully (default: False)"""

    aws_region: str | None = None
    """AWS region for the SSM and Secrets Manager clients (optional)"""

    aws_profile: str | None = None
    """AWS shared-config profile name (optional)"""

    provider_order: list[ProviderName] = field(default_factory=_default_order)
    """Order in which provider passes run over each line"""

    log_level: LogLevel = LogLevel.INFO
    """Logging level for the stderr trace (default: INFO)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.retries < 1:
            raise ValueError("retries must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        prefixes = [self.ssm_prefix, self.secrets_prefix, self.env_prefix, self.base64_prefix]
        if any(not p for p in prefixes):
            raise ValueError("provider prefixes must be non-empty")

        self.provider_order = [ProviderName(p) for p in self.provider_order]
        if not self.provider_order:
            raise ValueError("provider_order must name at least one provider")
        if len(self.provider_order) != len(set(self.provider_order)):
            raise ValueError("provider_order must not repeat a provider")

    @property
    def prefixes(self) -> dict[ProviderName, str]:
        """Return the trigger prefix for each provider."""
        return {
            ProviderName.SSM: self.ssm_prefix,
            ProviderName.SECRETS: self.secrets_prefix,
            ProviderName.ENV: self.env_prefix,
            ProviderName.BASE64: self.base64_prefix,
        }

    def retry_config(self) -> RetryConfig:
        """Build the retry policy for provider fetches."""
        return RetryConfig(max_attempts=self.retries)


def apply_env_overrides(
    config: SecfetchConfig,
    environ: Mapping[str, str] | None = None,
) -> SecfetchConfig:
    """Return a copy of *config* with environment overrides applied.

    Recognized variables: ``SEC_SSM_PREFIX``, ``SEC_SECRETS_PREFIX``,
    ``SEC_ENV_PREFIX``, ``SEC_BASE64_PREFIX``, ``RETRIES``, ``SEC_TIMEOUT``
    and ``SEC_IGNORE_ERR`` (any non-empty value enables it).

    Args:
        config: Base configuration.
        environ: Environment mapping. Defaults to ``os.environ``.

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    env = os.environ if environ is None else environ
    changes: dict[str, object] = {}

    for var, attr in (
        (ENV_SSM_PREFIX, "ssm_prefix"),
        (ENV_SECRETS_PREFIX, "secrets_prefix"),
        (ENV_ENV_PREFIX, "env_prefix"),
        (ENV_BASE64_PREFIX, "base64_prefix"),
    ):
        if var in env:
            changes[attr] = env[var]

    if env.get(ENV_RETRIES):
        try:
            changes["retries"] = int(env[ENV_RETRIES])
        except ValueError:
            raise ValueError(f"{ENV_RETRIES} must be an integer, got {env[ENV_RETRIES]!r}") from None

    if env.get(ENV_TIMEOUT):
        try:
            changes["timeout_seconds"] = float(env[ENV_TIMEOUT])
        except ValueError:
            raise ValueError(f"{ENV_TIMEOUT} must be a number, got {env[ENV_TIMEOUT]!r}") from None

    if env.get(ENV_IGNORE_ERRORS):
        changes["ignore_errors"] = True

    if not changes:
        return config
    return dataclasses.replace(config, **changes)
