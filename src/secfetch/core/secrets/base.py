"""Secret provider abstraction and resolution models."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class ResolutionStatus(str, Enum):
    """Outcome of resolving one placeholder."""

    SUCCESS = "success"
    CACHED = "cached"
    ERROR = "error"


@dataclass(frozen=True)
class Placeholder:
    """One placeholder occurrence parsed from an input line.

    Args:
        raw: Exact substring of the line to replace.
        secret_path: Identifier passed to the provider.
        target_key: Field to extract from a structured body (empty for none).
        wants_encoding: Re-encode the final value with base-64.
        start: Offset of ``raw`` in the scanned line.
        end: Offset just past ``raw`` in the scanned line.
    """

    raw: str
    secret_path: str
    target_key: str = ""
    wants_encoding: bool = False
    start: int = 0
    end: int = 0


@dataclass
class ResolutionOutcome:
    """Result of resolving a single placeholder.

    The ``value`` field is masked in ``__repr__`` to prevent accidental
    leakage in logs or tracebacks.

    Args:
        placeholder: The placeholder that was resolved.
        provider: Name of the provider that handled it.
        status: Outcome of the resolution.
        value: Final replacement text (only set on success).
        error: The failure (only set on error).
    """

    placeholder: Placeholder
    provider: str
    status: ResolutionStatus
    value: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is not ResolutionStatus.ERROR

    def __repr__(self) -> str:
        masked = "***" if self.value is not None else "None"
        return (
            f"ResolutionOutcome("
            f"placeholder={self.placeholder.raw!r}, "
            f"provider={self.provider!r}, "
            f"status={self.status!r}, "
            f"value={masked}, "
            f"error={self.error!r})"
        )


class SecretsProvider(ABC):
    """Base class for secrets providers.

    A provider owns a trigger ``prefix`` and a backend-specific identifier
    charset. The match pattern is always the escaped prefix followed by one
    capture group of that charset. Subclasses implement :meth:`fetch`.

    Args:
        prefix: Trigger text, e.g. ``"ssm://"``.
    """

    charset: str = r"\w"
    """Regex character-class body for identifiers."""

    remote: bool = False
    """Whether fetches make a network call and run under a deadline thread."""

    def __init__(self, prefix: str) -> None:
        if not prefix:
            raise ValueError("prefix is required")
        self._prefix = prefix
        self._pattern = re.compile(re.escape(prefix) + f"([{self.charset}]+)")

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short tag for logs (e.g. ``"ssm"``, ``"env"``)."""
        ...

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern

    @abstractmethod
    def fetch(self, identifier: str) -> str:
        """Return the raw secret body for *identifier*.

        Raises:
            FetchError: On any backend failure.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={self._prefix!r})"
