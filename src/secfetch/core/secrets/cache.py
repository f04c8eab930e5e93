"""Run-scoped cache of raw secret bodies."""

from __future__ import annotations

import copy
import hashlib
import threading
from collections.abc import Callable

FINGERPRINT_BYTES = 8


def fingerprint(body: str) -> str:
    """Return the first 8 bytes of the body's SHA-256 digest as hex.

    For log output only; never used for lookup or comparison.
    """
    return hashlib.sha256(body.encode("utf-8")).digest()[:FINGERPRINT_BYTES].hex()


class _InFlight:
    """A first fetch that other threads can wait on."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value = ""
        self.error: BaseException | None = None


class SecretsCache:
    """Thread-safe cache of raw (pre-extraction) secret bodies.

    Keys are ``provider prefix + secret path`` so that the same path under
    two providers never collides. Entries live for the lifetime of the
    cache: no TTL, no eviction. Concurrent first fetches of one key are
    collapsed into a single loader call by :meth:`get_or_fetch`.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._in_flight: dict[str, _InFlight] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(prefix: str, secret_path: str) -> str:
        return prefix + secret_path

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, body: str) -> None:
        with self._lock:
            self._entries[key] = body

    def get_or_fetch(self, key: str, loader: Callable[[], str]) -> tuple[str, bool]:
        """Return the cached body for *key*, calling *loader* on a miss.

        Only one caller runs *loader* per key at a time; others wait for
        its outcome. A failed load stores nothing, so a later call tries
        again.

        Returns:
            ``(body, hit)`` where *hit* is False only for the caller that
            performed the fetch.

        Raises:
            Exception: Whatever *loader* raised. Waiting threads receive a
                copy chained to the loading thread's exception.
        """
        with self._lock:
            if key in self._entries:
                return self._entries[key], True
            flight = self._in_flight.get(key)
            leader = flight is None
            if flight is None:
                flight = self._in_flight[key] = _InFlight()

        if not leader:
            flight.done.wait()
            if flight.error is not None:
                # each waiter gets its own instance to annotate
                raise copy.copy(flight.error) from flight.error
            return flight.value, True

        try:
            body = loader()
        except BaseException as exc:
            flight.error = exc
            raise
        else:
            flight.value = body
            with self._lock:
                self._entries[key] = body
            return body, False
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            flight.done.set()

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
