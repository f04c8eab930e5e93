"""Stream runner: line-by-line driver, results and the CLI."""

from secfetch.runner.driver import SecretsStreamRunner
from secfetch.runner.result import RunResult, RunResultStatus

__all__ = [
    "RunResult",
    "RunResultStatus",
    "SecretsStreamRunner",
]
