"""Built-in secrets provider implementations."""

from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Any

from secfetch.core.secrets.base import SecretsProvider
from secfetch.core.secrets.exceptions import (
    DecodeFailedError,
    EmptyPayloadError,
    FetchFailedError,
    SecretNotFoundError,
)

logger = logging.getLogger(__name__)


class _AwsProvider(SecretsProvider):
    """Shared lazy boto3 client handling for the AWS-backed providers.

    Requires ``boto3`` to be installed. The client is created on the first
    call to :meth:`fetch` unless one is injected.

    Args:
        prefix: Trigger text.
        client: Pre-built boto3 client (optional).
        region_name: AWS region. Defaults to boto3's default region.
        profile_name: Shared-config profile. Defaults to boto3's default.
    """

    service_name: str = ""
    remote = True

    def __init__(
        self,
        prefix: str,
        client: Any = None,
        region_name: str | None = None,
        profile_name: str | None = None,
    ) -> None:
        super().__init__(prefix)
        self._client = client
        self._region = region_name
        self._profile = profile_name

    def _get_client(self) -> Any:
        if self._client is None:
            import boto3  # type: ignore[import-untyped]

            session = boto3.session.Session(
                profile_name=self._profile, region_name=self._region
            )
            self._client = session.client(self.service_name)
        return self._client


class SsmParameterProvider(_AwsProvider):
    """Resolve placeholders from AWS SSM Parameter Store.

    Identifiers are parameter paths; a leading ``/`` is added when missing.
    SecureString parameters are always decrypted.
    """

    charset = r"a-zA-Z0-9_.\-/"
    service_name = "ssm"

    def __init__(
        self,
        prefix: str = "ssm://",
        client: Any = None,
        region_name: str | None = None,
        profile_name: str | None = None,
    ) -> None:
        super().__init__(prefix, client, region_name, profile_name)

    @property
    def provider_name(self) -> str:
        return "ssm"

    def fetch(self, identifier: str) -> str:
        path = identifier if identifier.startswith("/") else f"/{identifier}"
        logger.info("> get ssm: %s", path)
        try:
            response = self._get_client().get_parameter(Name=path, WithDecryption=True)
        except Exception as exc:
            raise FetchFailedError(f"get parameter {path}: {exc}", cause=exc) from exc
        value = response.get("Parameter", {}).get("Value")
        if value is None:
            raise EmptyPayloadError(f"parameter {path} has no value")
        return value


class SecretsManagerProvider(_AwsProvider):
    """Resolve placeholders from AWS Secrets Manager.

    Identifiers are secret ids or ARNs and are passed through unchanged.
    Binary-only secrets are not supported.
    """

    charset = r"a-zA-Z0-9\-/_+=.@:"
    service_name = "secretsmanager"

    def __init__(
        self,
        prefix: str = "secrets://",
        client: Any = None,
        region_name: str | None = None,
        profile_name: str | None = None,
    ) -> None:
        super().__init__(prefix, client, region_name, profile_name)

    @property
    def provider_name(self) -> str:
        return "secrets"

    def fetch(self, identifier: str) -> str:
        logger.info("> get secrets: %s", identifier)
        try:
            response = self._get_client().get_secret_value(SecretId=identifier)
        except Exception as exc:
            raise FetchFailedError(f"get secret value {identifier}: {exc}", cause=exc) from exc
        value = response.get("SecretString")
        if value is None:
            raise EmptyPayloadError(f"secret {identifier} has no string value")
        return value


class EnvSecretsProvider(SecretsProvider):
    """Resolve placeholders from environment variables.

    An empty variable is treated the same as an unset one.
    """

    charset = r"a-zA-Z0-9_"

    def __init__(self, prefix: str = "env://") -> None:
        super().__init__(prefix)

    @property
    def provider_name(self) -> str:
        return "env"

    def fetch(self, identifier: str) -> str:
        value = os.environ.get(identifier)
        if not value:
            raise SecretNotFoundError(f"environment variable {identifier} not found")
        return value


class Base64Provider(SecretsProvider):
    """Decode inline base-64 payloads. No network call is made."""

    charset = r"a-zA-Z0-9+/="

    def __init__(self, prefix: str = "base64://") -> None:
        super().__init__(prefix)

    @property
    def provider_name(self) -> str:
        return "base64"

    def fetch(self, identifier: str) -> str:
        try:
            return base64.b64decode(identifier, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise DecodeFailedError(f"decode base64: {exc}") from exc
