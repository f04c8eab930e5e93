"""Concurrency tests for thread-safe components.

Validates that SecretsCache collapses concurrent first fetches and that a
shared ResolutionPipeline fetches each identifier once under contention.
"""

from __future__ import annotations

import threading
import time

import pytest

from secfetch.core.secrets.cache import SecretsCache
from secfetch.core.secrets.exceptions import FetchFailedError
from secfetch.core.secrets.pipeline import LineResult
from tests.factories import ScriptedProvider, make_pipeline

THREADS = 8
ITERATIONS = 200


class TestSecretsCacheConcurrency:
    """Concurrent access to SecretsCache under high contention."""

    def test_single_flight_per_key(self) -> None:
        """Threads racing on one cold key trigger exactly one loader call."""
        cache = SecretsCache()
        barrier = threading.Barrier(THREADS)
        calls: list[int] = []
        lock = threading.Lock()
        results: list[str] = []

        def loader() -> str:
            with lock:
                calls.append(1)
            time.sleep(0.05)
            return "body"

        def worker() -> None:
            barrier.wait()
            body, _ = cache.get_or_fetch("ssm://db", loader)
            with lock:
                results.append(body)

        threads = [threading.Thread(target=worker) for _ in range(THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert results == ["body"] * THREADS

    def test_waiters_see_leader_failure(self) -> None:
        cache = SecretsCache()
        barrier = threading.Barrier(THREADS)
        errors: list[BaseException] = []
        lock = threading.Lock()

        def loader() -> str:
            time.sleep(0.05)
            raise FetchFailedError("down")

        def worker() -> None:
            barrier.wait()
            try:
                cache.get_or_fetch("k", loader)
            except FetchFailedError as exc:
                with lock:
                    errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == THREADS
        assert len({id(e) for e in errors}) == THREADS
        assert all(str(e) == "FetchFailed: down" for e in errors)
        assert "k" not in cache

    def test_concurrent_distinct_keys(self) -> None:
        cache = SecretsCache()
        barrier = threading.Barrier(THREADS)

        def worker(tid: int) -> None:
            barrier.wait()
            for i in range(ITERATIONS):
                cache.get_or_fetch(f"{tid}:{i}", lambda i=i: str(i))

        threads = [threading.Thread(target=worker, args=(t,)) for t in range(THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == THREADS * ITERATIONS


class TestPipelineConcurrency:
    @pytest.mark.parametrize("lines_per_thread", [1, 20])
    def test_one_backend_fetch_per_identifier(self, lines_per_thread: int) -> None:
        provider = ScriptedProvider(secrets={"db": '{"user": "u", "pass": "p"}'})
        pipeline = make_pipeline([provider])
        barrier = threading.Barrier(THREADS)
        outputs: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            for _ in range(lines_per_thread):
                text = pipeline.resolve_line("mock://db//user:mock://db//pass").text
                with lock:
                    outputs.append(text)

        threads = [threading.Thread(target=worker) for _ in range(THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert provider.calls == ["db"]
        assert set(outputs) == {"u:p"}

    def test_failure_attributed_to_each_placeholder(self) -> None:
        class SlowFailing(ScriptedProvider):
            def fetch(self, identifier: str) -> str:
                time.sleep(0.05)
                return super().fetch(identifier)

        provider = SlowFailing(failures=100)
        pipeline = make_pipeline([provider], max_attempts=1)
        barrier = threading.Barrier(2)
        results: dict[str, LineResult] = {}

        def worker(line: str) -> None:
            barrier.wait()
            results[line] = pipeline.resolve_line(line)

        lines = ["mock://X//a", "mock://X//b"]
        threads = [threading.Thread(target=worker, args=(line,)) for line in lines]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        errors = [results[line].failures[0].error for line in lines]
        assert errors[0] is not errors[1]
        for line, error in zip(lines, errors):
            assert isinstance(error, FetchFailedError)
            assert error.placeholder == line
            assert str(error).endswith(f"(placeholder {line})")
