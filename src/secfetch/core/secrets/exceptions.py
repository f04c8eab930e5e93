"""Secret resolution exceptions."""

from __future__ import annotations


class SecfetchError(Exception):
    """Base exception for secfetch errors."""

    kind = "Error"


class ResolutionError(SecfetchError):
    """A single placeholder could not be resolved.

    Providers raise these without knowing which placeholder triggered the
    fetch; the pipeline attaches the raw placeholder text before reporting.

    Args:
        reason: Human-readable failure description.
        placeholder: Raw placeholder text the error applies to.
    """

    kind = "ResolutionError"

    def __init__(self, reason: str, placeholder: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.placeholder = placeholder

    def for_placeholder(self, placeholder: str) -> ResolutionError:
        """Attach the raw placeholder text and return ``self``."""
        self.placeholder = placeholder
        return self

    def __str__(self) -> str:
        if self.placeholder:
            return f"{self.kind}: {self.reason} (placeholder {self.placeholder})"
        return f"{self.kind}: {self.reason}"


class FetchError(ResolutionError):
    """Provider fetch failed. Retried by the default retry policy."""

    kind = "FetchError"


class FetchFailedError(FetchError):
    """Backend call raised an error."""

    kind = "FetchFailed"

    def __init__(self, reason: str, cause: Exception | None = None) -> None:
        super().__init__(reason)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class EmptyPayloadError(FetchError):
    """Backend returned no usable string body."""

    kind = "EmptyPayload"


class SecretNotFoundError(FetchError):
    """Environment variable is unset or empty."""

    kind = "NotFound"


class DecodeFailedError(FetchError):
    """Inline base-64 payload is malformed."""

    kind = "DecodeFailed"


class DeadlineExceededError(ResolutionError):
    """Per-line deadline expired before the fetch completed."""

    kind = "DeadlineExceeded"


class KeyNotFoundError(ResolutionError):
    """Structured body decoded but lacks the requested key."""

    kind = "KeyNotFound"


class UnparseableBodyError(ResolutionError):
    """Body is neither a JSON nor a YAML mapping."""

    kind = "UnparseableBody"


class InputReadError(SecfetchError):
    """Reading the input stream failed."""

    kind = "InputReadError"

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Error reading standard input: {cause}")
        self.cause = cause
        self.__cause__ = cause
