"""Tests for SecretsStreamRunner."""

from __future__ import annotations

import io
from collections.abc import Iterator

from secfetch.core.secrets.exceptions import InputReadError
from secfetch.core.secrets.providers import Base64Provider
from secfetch.runner.driver import SecretsStreamRunner
from secfetch.runner.result import RunResultStatus
from tests.factories import ScriptedProvider, make_pipeline


def _runner(ignore_errors: bool = False, **secrets: str) -> SecretsStreamRunner:
    provider = ScriptedProvider(secrets=secrets)
    return SecretsStreamRunner(make_pipeline([provider, Base64Provider()]), ignore_errors)


class TestRun:
    def test_rewrites_lines(self) -> None:
        out = io.StringIO()
        source = io.StringIO("user=mock://db//user\npass=base64://aHVudGVyMg==\n")

        result = _runner(db='{"user": "admin"}').run(source, out)

        assert out.getvalue() == "user=admin\npass=hunter2\n"
        assert result.status is RunResultStatus.SUCCESS
        assert result.lines_processed == 2
        assert result.exit_code == 0

    def test_passthrough_is_byte_identical(self) -> None:
        text = "plain line\n  indented\twith tab\n\nlast\n"
        out = io.StringIO()

        _runner().run(io.StringIO(text), out)

        assert out.getvalue() == text

    def test_final_line_gets_newline(self) -> None:
        out = io.StringIO()
        _runner().run(io.StringIO("no newline"), out)
        assert out.getvalue() == "no newline\n"

    def test_crlf_normalized(self) -> None:
        out = io.StringIO()
        _runner().run(io.StringIO("a\r\nb\r\n"), out)
        assert out.getvalue() == "a\nb\n"

    def test_stops_after_failing_line(self) -> None:
        out = io.StringIO()
        source = io.StringIO("ok\nbad=mock://missing\nnever read\n")

        result = _runner().run(source, out)

        assert out.getvalue() == "ok\nbad=mock://missing\n"
        assert result.status is RunResultStatus.FAILURE
        assert result.exit_code == 1
        assert result.lines_processed == 2
        assert len(result.failures) == 1

    def test_ignore_errors_continues(self) -> None:
        out = io.StringIO()
        source = io.StringIO("bad=mock://missing\nnext=mock://db\n")

        result = _runner(ignore_errors=True, db="v").run(source, out)

        assert out.getvalue() == "bad=mock://missing\nnext=v\n"
        assert result.status is RunResultStatus.SUCCESS
        assert result.exit_code == 0
        assert result.error_count == 1

    def test_cache_spans_lines(self) -> None:
        provider = ScriptedProvider(secrets={"db": "v"})
        runner = SecretsStreamRunner(make_pipeline([provider]))

        runner.run(io.StringIO("mock://db\nmock://db\n"), io.StringIO())

        assert provider.calls == ["db"]


class TestReadErrors:
    @staticmethod
    def _failing_source() -> Iterator[str]:
        yield "first\n"
        raise OSError("broken pipe")

    def test_read_error_fails_run(self) -> None:
        out = io.StringIO()

        result = _runner().run(self._failing_source(), out)

        assert out.getvalue() == "first\n"
        assert isinstance(result.read_error, InputReadError)
        assert result.exit_code == 1

    def test_read_error_ignored(self) -> None:
        result = _runner(ignore_errors=True).run(self._failing_source(), io.StringIO())

        assert result.exit_code == 0
        assert result.error_count == 1
