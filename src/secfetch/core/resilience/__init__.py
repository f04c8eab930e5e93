"""Resilience patterns: retry and deadlines."""

from secfetch.core.resilience.deadline import Deadline
from secfetch.core.resilience.retry import RetryExecutor

__all__ = [
    "Deadline",
    "RetryExecutor",
]
