"""Result collector for test runs.

Collects one TestResult per attempted test and derives summary statistics.
Writes come from the single orchestration thread; reads may come from any
thread while a run is in flight.
"""

import math
import threading
from typing import Optional

from ..suite.schema import TestResult, TestSummary


class ResultCollector:
    """Ordered, append-only store of test results."""

    def __init__(self, results: Optional[list[TestResult]] = None):
        self._lock = threading.Lock()
        self._results: list[TestResult] = list(results or [])

    def add(self, result: TestResult) -> None:
        """Append a result."""
        with self._lock:
            self._results.append(result)

    @property
    def results(self) -> list[TestResult]:
        """Snapshot of the results collected so far, in execution order."""
        with self._lock:
            return list(self._results)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def clear(self) -> None:
        """Drop all collected results."""
        with self._lock:
            self._results.clear()

    def summarize(self) -> TestSummary:
        """Compute summary counts from the current results.

        A result whose test is marked skip counts as skipped only, even
        though skipped results are recorded as successful.
        """
        with self._lock:
            results = list(self._results)
        return summarize(results)

    def failures(self) -> list[TestResult]:
        """Results of tests that ran and failed."""
        return [r for r in self.results if not r.skipped and not r.success]


def summarize(results: list[TestResult]) -> TestSummary:
    """Summarize an arbitrary list of results."""
    passed = failed = skipped = 0

    for result in results:
        if result.test.skip:
            skipped += 1
        elif result.success:
            passed += 1
        else:
            failed += 1

    return TestSummary(
        total=len(results),
        passed=passed,
        failed=failed,
        skipped=skipped,
        total_duration=math.fsum(r.duration for r in results),
    )
