"""Fixed provider registry built once from configuration."""

from __future__ import annotations

from collections.abc import Callable

from secfetch.core.config.base import ProviderName
from secfetch.core.config.settings import SecfetchConfig
from secfetch.core.secrets.base import SecretsProvider
from secfetch.core.secrets.providers import (
    Base64Provider,
    EnvSecretsProvider,
    SecretsManagerProvider,
    SsmParameterProvider,
)

_FACTORIES: dict[ProviderName, Callable[[str, SecfetchConfig], SecretsProvider]] = {
    ProviderName.SSM: lambda prefix, cfg: SsmParameterProvider(
        prefix, region_name=cfg.aws_region, profile_name=cfg.aws_profile
    ),
    ProviderName.SECRETS: lambda prefix, cfg: SecretsManagerProvider(
        prefix, region_name=cfg.aws_region, profile_name=cfg.aws_profile
    ),
    ProviderName.ENV: lambda prefix, cfg: EnvSecretsProvider(prefix),
    ProviderName.BASE64: lambda prefix, cfg: Base64Provider(prefix),
}


def build_providers(config: SecfetchConfig) -> list[SecretsProvider]:
    """Instantiate providers in ``config.provider_order``.

    AWS clients are not created here; each AWS provider connects on its
    first fetch.

    Raises:
        ValueError: If the order names an unknown provider.
    """
    prefixes = config.prefixes
    providers: list[SecretsProvider] = []
    for name in config.provider_order:
        try:
            factory = _FACTORIES[ProviderName(name)]
        except (KeyError, ValueError):
            raise ValueError(f"Unknown provider: {name}") from None
        providers.append(factory(prefixes[ProviderName(name)], config))
    return providers
