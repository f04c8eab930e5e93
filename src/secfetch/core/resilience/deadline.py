"""Wall-clock deadline shared by every fetch on one input line."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


class Deadline:
    """A monotonic deadline that bounds cumulative work.

    Args:
        timeout_seconds: Seconds from construction until expiry.
        clock: Injectable monotonic clock for testing.
            Defaults to ``time.monotonic``.
    """

    def __init__(
        self,
        timeout_seconds: float,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._clock = clock or time.monotonic
        self._timeout = timeout_seconds
        self._expires_at = self._clock() + timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def run(self, func: Callable[[], T]) -> T:
        """Run *func*, giving up once the deadline passes.

        The call runs on a daemon worker thread so that a hung backend call
        cannot block the caller or process exit. If the deadline passes
        first, the caller stops waiting and the worker's eventual result is
        discarded.

        Raises:
            TimeoutError: If the deadline has passed or passes mid-call.
            Exception: Whatever *func* raised.
        """
        remaining = self.remaining()
        if remaining <= 0.0:
            raise TimeoutError(f"deadline of {self._timeout:g}s exceeded")

        outcome: dict[str, object] = {}

        def target() -> None:
            try:
                outcome["value"] = func()
            except BaseException as exc:  # re-raised on the calling thread
                outcome["error"] = exc

        worker = threading.Thread(target=target, name="secfetch-fetch", daemon=True)
        worker.start()
        worker.join(remaining)

        if worker.is_alive():
            raise TimeoutError(f"deadline of {self._timeout:g}s exceeded")
        if "error" in outcome:
            raise outcome["error"]  # type: ignore[misc]
        return outcome["value"]  # type: ignore[return-value]
