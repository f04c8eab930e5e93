"""Stream run result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from secfetch.core.secrets.base import ResolutionOutcome


class RunResultStatus(str, Enum):
    """Overall outcome of a stream run."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class RunResult:
    """Aggregate result of rewriting one input stream."""

    status: RunResultStatus
    lines_processed: int = 0
    failures: list[ResolutionOutcome] = field(default_factory=list)
    read_error: Exception | None = None

    @property
    def error_count(self) -> int:
        return len(self.failures) + (1 if self.read_error is not None else 0)

    @property
    def exit_code(self) -> int:
        """0 for success, 1 for failure."""
        return 0 if self.status is RunResultStatus.SUCCESS else 1
