"""Shared test factories for building providers and pipelines.

Import them directly::

    from tests.factories import ScriptedProvider, make_pipeline
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from secfetch.core.config.retry import RetryConfig
from secfetch.core.secrets.base import SecretsProvider
from secfetch.core.secrets.cache import SecretsCache
from secfetch.core.secrets.exceptions import FetchFailedError
from secfetch.core.secrets.pipeline import ResolutionPipeline


class ScriptedProvider(SecretsProvider):
    """In-memory provider with a fetch counter and scripted failures.

    Args:
        prefix: Trigger text.
        secrets: Identifier to body mapping.
        failures: Number of leading fetch calls that raise ``FetchFailedError``.
        charset: Identifier charset (defaults to the SSM charset).
    """

    def __init__(
        self,
        prefix: str = "mock://",
        secrets: dict[str, str] | None = None,
        failures: int = 0,
        charset: str = r"a-zA-Z0-9_.\-/",
        name: str = "mock",
    ) -> None:
        self.charset = charset
        super().__init__(prefix)
        self.secrets = dict(secrets or {})
        self.failures = failures
        self.calls: list[str] = []
        self._name = name
        self._lock = threading.Lock()

    @property
    def provider_name(self) -> str:
        return self._name

    def fetch(self, identifier: str) -> str:
        with self._lock:
            self.calls.append(identifier)
            if self.failures > 0:
                self.failures -= 1
                raise FetchFailedError(f"backend unavailable for {identifier}")
        if identifier not in self.secrets:
            raise FetchFailedError(f"no such secret {identifier}")
        return self.secrets[identifier]


def make_pipeline(
    providers: Sequence[SecretsProvider],
    *,
    max_attempts: int = 3,
    timeout_seconds: float = 30.0,
    cache: SecretsCache | None = None,
    clock: object = None,
) -> ResolutionPipeline:
    """Build a pipeline that never sleeps between retries."""
    return ResolutionPipeline(
        providers,
        cache=cache,
        retry_config=RetryConfig(max_attempts=max_attempts),
        timeout_seconds=timeout_seconds,
        clock=clock,  # type: ignore[arg-type]
        sleep_func=lambda _: None,
    )
