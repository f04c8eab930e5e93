"""Per-line placeholder resolution.

Each line is rewritten by running every provider's pass in the configured
order. A pass scans the output of the previous pass, so a value produced
by an earlier provider is visible (as plain text) to later ones.

For every placeholder a pass finds, in left-to-right order:

1. look up ``prefix + secret_path`` in the run's :class:`SecretsCache`;
2. on a miss, fetch through :class:`RetryExecutor` under the line's
   shared :class:`Deadline` and cache the raw body;
3. extract ``target_key`` from a JSON/YAML body if one was given;
4. base-64 encode the result if ``//base64`` was given;
5. splice the value in at the placeholder's own offsets.

A failure is logged once and leaves that placeholder's text in the line;
the rest of the line is still processed.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from secfetch.core.config.retry import RetryConfig
from secfetch.core.resilience.deadline import Deadline
from secfetch.core.resilience.retry import RetryExecutor
from secfetch.core.secrets.base import (
    Placeholder,
    ResolutionOutcome,
    ResolutionStatus,
    SecretsProvider,
)
from secfetch.core.secrets.cache import SecretsCache, fingerprint
from secfetch.core.secrets.exceptions import DeadlineExceededError, ResolutionError
from secfetch.core.secrets.grammar import find_placeholders
from secfetch.core.secrets.payload import extract_key

logger = logging.getLogger(__name__)


@dataclass
class LineResult:
    """Rewritten text of one line plus the outcome of each placeholder."""

    text: str
    outcomes: list[ResolutionOutcome] = field(default_factory=list)

    @property
    def failures(self) -> list[ResolutionOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


class ResolutionPipeline:
    """Resolves placeholders in lines of text against a fixed provider list.

    Args:
        providers: Providers in the order their passes run.
        cache: Cache shared across lines. A new one is created if omitted.
        retry_config: Fetch retry policy. Defaults to ``RetryConfig()``.
        timeout_seconds: Deadline shared by all fetches on one line.
        clock: Injectable monotonic clock for deadlines.
        sleep_func: Injectable sleep for retry backoff.
    """

    def __init__(
        self,
        providers: Sequence[SecretsProvider],
        cache: SecretsCache | None = None,
        retry_config: RetryConfig | None = None,
        timeout_seconds: float = 30.0,
        clock: Callable[[], float] | None = None,
        sleep_func: Callable[[float], None] | None = None,
    ) -> None:
        if not providers:
            raise ValueError("at least one provider is required")
        prefixes = [p.prefix for p in providers]
        if len(prefixes) != len(set(prefixes)):
            raise ValueError(f"provider prefixes must be unique: {prefixes}")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._providers = tuple(providers)
        self._cache = cache if cache is not None else SecretsCache()
        self._retry = RetryExecutor(retry_config or RetryConfig(), sleep_func=sleep_func)
        self._timeout = timeout_seconds
        self._clock = clock

    @property
    def providers(self) -> tuple[SecretsProvider, ...]:
        return self._providers

    @property
    def cache(self) -> SecretsCache:
        return self._cache

    def resolve_line(self, line: str) -> LineResult:
        """Run every provider pass over *line* under one shared deadline."""
        deadline = Deadline(self._timeout, clock=self._clock)
        outcomes: list[ResolutionOutcome] = []
        for provider in self._providers:
            line, provider_outcomes = self.replace_with_provider(line, provider, deadline)
            outcomes.extend(provider_outcomes)
        return LineResult(text=line, outcomes=outcomes)

    def replace_with_provider(
        self,
        line: str,
        provider: SecretsProvider,
        deadline: Deadline,
    ) -> tuple[str, list[ResolutionOutcome]]:
        """Resolve every placeholder of one provider in *line*.

        Placeholders are resolved left to right, then each value is spliced
        in at the placeholder's own offsets in *line*.
        """
        outcomes = [
            self.resolve_placeholder(provider, placeholder, deadline)
            for placeholder in find_placeholders(line, provider.pattern)
        ]
        for outcome in reversed(outcomes):
            if outcome.ok and outcome.value is not None:
                ph = outcome.placeholder
                line = line[: ph.start] + outcome.value + line[ph.end :]
        return line, outcomes

    def resolve_placeholder(
        self,
        provider: SecretsProvider,
        placeholder: Placeholder,
        deadline: Deadline,
    ) -> ResolutionOutcome:
        """Produce the replacement text for one placeholder, or a failure."""
        key = self._cache.make_key(provider.prefix, placeholder.secret_path)
        try:
            body, hit = self._cache.get_or_fetch(
                key, lambda: self._fetch(provider, placeholder.secret_path, deadline)
            )
            if hit:
                logger.info(
                    "> get cached: %s (checksum: %s)",
                    placeholder.secret_path,
                    fingerprint(body),
                )

            value = body
            if placeholder.target_key:
                value = extract_key(body, placeholder.target_key)
            if placeholder.wants_encoding:
                value = base64.b64encode(value.encode("utf-8")).decode("ascii")
        except ResolutionError as exc:
            exc.for_placeholder(placeholder.raw)
            logger.error("Error resolving %s secret: %s", provider.provider_name, exc)
            return ResolutionOutcome(
                placeholder=placeholder,
                provider=provider.provider_name,
                status=ResolutionStatus.ERROR,
                error=exc,
            )

        return ResolutionOutcome(
            placeholder=placeholder,
            provider=provider.provider_name,
            status=ResolutionStatus.CACHED if hit else ResolutionStatus.SUCCESS,
            value=value,
        )

    def _fetch(self, provider: SecretsProvider, identifier: str, deadline: Deadline) -> str:
        def fetch_once() -> str:
            if not provider.remote:
                if deadline.expired:
                    raise DeadlineExceededError(
                        f"deadline of {deadline.timeout_seconds:g}s exceeded before fetching {identifier}"
                    )
                return provider.fetch(identifier)
            try:
                return deadline.run(lambda: provider.fetch(identifier))
            except TimeoutError:
                raise DeadlineExceededError(
                    f"deadline of {deadline.timeout_seconds:g}s exceeded fetching {identifier}"
                ) from None

        attempts = 0

        def attempt() -> str:
            nonlocal attempts
            attempts += 1
            try:
                return fetch_once()
            except ResolutionError as exc:
                logger.warning(
                    "Error fetching secret %s (attempt %d): %s", identifier, attempts, exc
                )
                raise

        body = self._retry.execute(attempt, deadline=deadline)
        logger.info(
            "> fetched %s: %s (checksum: %s)",
            provider.provider_name,
            identifier,
            fingerprint(body),
        )
        return body
