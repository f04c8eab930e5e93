"""Tests for HOCON configuration loading."""

from __future__ import annotations

from pathlib import Path

from secfetch.core.config.base import ProviderName
from secfetch.core.config.loader import load_config, load_from_file, load_from_string
from secfetch.core.config.settings import SecfetchConfig


class TestLoadFromString:
    def test_partial_config_keeps_defaults(self) -> None:
        config = load_from_string(
            """
            {
              retries: 5
              ssm_prefix: "param://"
            }
            """,
            SecfetchConfig,
        )

        assert config.retries == 5
        assert config.ssm_prefix == "param://"
        assert config.env_prefix == "env://"

    def test_provider_order(self) -> None:
        config = load_from_string(
            '{ provider_order: ["env", "ssm"] }',
            SecfetchConfig,
        )

        assert config.provider_order == [ProviderName.ENV, ProviderName.SSM]


class TestLoadFromFile:
    def test_loads_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "secfetch.conf"
        config_file.write_text(
            """
            {
              ignore_errors: true
              aws_region: "eu-west-1"
            }
            """
        )

        config = load_from_file(str(config_file), SecfetchConfig)

        assert config.ignore_errors is True
        assert config.aws_region == "eu-west-1"


class TestLoadConfig:
    def test_defaults_without_file(self) -> None:
        assert load_config(None, {}) == SecfetchConfig()

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "secfetch.conf"
        config_file.write_text("{ retries: 5 }")

        config = load_config(str(config_file), {"RETRIES": "2"})

        assert config.retries == 2
