"""Runner module - Test orchestration."""

from .executor import RunOutcome, TestRunner
from .result_collector import ResultCollector, summarize

__all__ = [
    "RunOutcome",
    "TestRunner",
    "ResultCollector",
    "summarize",
]
