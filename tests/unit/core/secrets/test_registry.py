"""Tests for build_providers."""

from __future__ import annotations

from secfetch.core.config.settings import SecfetchConfig
from secfetch.core.secrets.providers import (
    Base64Provider,
    EnvSecretsProvider,
    SecretsManagerProvider,
    SsmParameterProvider,
)
from secfetch.core.secrets.registry import build_providers


class TestBuildProviders:
    def test_default_order(self) -> None:
        providers = build_providers(SecfetchConfig())

        assert [type(p) for p in providers] == [
            SsmParameterProvider,
            SecretsManagerProvider,
            EnvSecretsProvider,
            Base64Provider,
        ]
        assert [p.prefix for p in providers] == ["ssm://", "secrets://", "env://", "base64://"]

    def test_custom_prefixes_and_order(self) -> None:
        config = SecfetchConfig(
            env_prefix="var://",
            base64_prefix="b64://",
            provider_order=["base64", "env"],  # type: ignore[list-item]
        )

        providers = build_providers(config)

        assert [p.provider_name for p in providers] == ["base64", "env"]
        assert [p.prefix for p in providers] == ["b64://", "var://"]

    def test_aws_settings_passed_through(self) -> None:
        config = SecfetchConfig(aws_region="us-west-2", aws_profile="ops")

        ssm = build_providers(config)[0]

        assert isinstance(ssm, SsmParameterProvider)
        assert ssm._region == "us-west-2"
        assert ssm._profile == "ops"
        assert ssm._client is None
