"""Line-by-line stream driver around :class:`ResolutionPipeline`."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TextIO

from secfetch.core.secrets.exceptions import InputReadError
from secfetch.core.secrets.pipeline import ResolutionPipeline
from secfetch.runner.result import RunResult, RunResultStatus

logger = logging.getLogger(__name__)


def _strip_newline(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


class SecretsStreamRunner:
    """Rewrites an input stream line by line.

    Every output line is written and flushed before the next input line is
    read. Without ``ignore_errors`` the run stops after flushing the first
    line that had an unresolved placeholder.

    Args:
        pipeline: Resolution pipeline (and its cache) used for every line.
        ignore_errors: Log failures but keep going and report success.
    """

    def __init__(self, pipeline: ResolutionPipeline, ignore_errors: bool = False) -> None:
        self._pipeline = pipeline
        self._ignore_errors = ignore_errors

    @property
    def pipeline(self) -> ResolutionPipeline:
        return self._pipeline

    def run(self, source: Iterable[str], sink: TextIO) -> RunResult:
        """Rewrite *source* into *sink*.

        Args:
            source: Input lines, e.g. ``sys.stdin``.
            sink: Output stream, e.g. ``sys.stdout``.
        """
        result = RunResult(status=RunResultStatus.SUCCESS)
        lines = iter(source)

        while True:
            try:
                raw_line = next(lines)
            except StopIteration:
                break
            except (OSError, UnicodeDecodeError) as exc:
                error = InputReadError(exc)
                logger.error("%s", error)
                result.read_error = error
                if not self._ignore_errors:
                    result.status = RunResultStatus.FAILURE
                break

            line_result = self._pipeline.resolve_line(_strip_newline(raw_line))
            sink.write(line_result.text + "\n")
            sink.flush()
            result.lines_processed += 1

            if line_result.failures:
                result.failures.extend(line_result.failures)
                if not self._ignore_errors:
                    result.status = RunResultStatus.FAILURE
                    break

        if result.error_count:
            logger.info(
                "Processed %d line(s) with %d error(s)",
                result.lines_processed,
                result.error_count,
            )
        return result
