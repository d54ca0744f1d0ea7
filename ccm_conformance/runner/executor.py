"""Test runner - orchestrates suite execution against a provider.

For each registered suite, in registration order:
1. Run suite setup
2. Run each test in order, recording one result per test
3. Run suite teardown

The first failing stage (setup, a test body, or teardown) aborts the whole
run. Results recorded before the abort stay available.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..conditions.deadline import Deadline, deadline_scope
from ..errors import (
    RunAbortedError,
    SuiteSetupError,
    SuiteTeardownError,
    TestFailedError,
)
from ..suite.schema import Test, TestResult, TestSuite, TestSummary
from .result_collector import ResultCollector

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """Complete outcome of a run, successful or aborted."""
    results: list[TestResult] = field(default_factory=list)
    summary: TestSummary = field(default_factory=TestSummary)
    error: Optional[RunAbortedError] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None and self.summary.failed == 0


class TestRunner:
    """Runs registered test suites sequentially against one provider handle.

    The provider handle is passed unchanged to every setup, teardown, run
    and cleanup function. Tests never run concurrently.
    """

    __test__ = False

    def __init__(
        self,
        provider: Any,
        collector: Optional[ResultCollector] = None,
        on_result: Optional[Callable[[TestResult], None]] = None,
    ):
        """Initialize test runner.

        Args:
            provider: Provider-under-test handle given to every callback.
            collector: Result store. A new one is created if not provided.
            on_result: Optional callback invoked after each recorded result.
        """
        self.provider = provider
        self.collector = collector if collector is not None else ResultCollector()
        self.on_result = on_result
        self._suites: list[TestSuite] = []
        self._suites_lock = threading.Lock()
        self._run_lock = threading.Lock()

    def register(self, suite: TestSuite) -> None:
        """Append a suite to the run plan."""
        with self._suites_lock:
            self._suites.append(suite)
        logger.debug("Registered suite %s with %d test(s)", suite.name, suite.total_tests)

    add_suite = register

    @property
    def suites(self) -> list[TestSuite]:
        with self._suites_lock:
            return list(self._suites)

    @property
    def results(self) -> list[TestResult]:
        """Results recorded so far; safe to read while a run is in flight."""
        return self.collector.results

    def summarize(self) -> TestSummary:
        return self.collector.summarize()

    def run(self, deadline: Optional[Deadline] = None) -> None:
        """Execute all registered suites in registration order.

        Args:
            deadline: Ambient deadline. Per-test deadlines derived from it
                are advisory and published via current_deadline().

        Raises:
            SuiteSetupError: A suite's setup raised.
            TestFailedError: A test body raised.
            SuiteTeardownError: A suite's teardown raised.
        """
        with self._run_lock:
            for suite in self.suites:
                self._run_suite(suite, deadline)

    def execute(self, deadline: Optional[Deadline] = None) -> RunOutcome:
        """Run all suites and capture the outcome instead of raising.

        Returns:
            RunOutcome with the results, summary and terminal error, if any.
        """
        start = time.monotonic()
        outcome = RunOutcome()

        try:
            self.run(deadline)
        except RunAbortedError as e:
            logger.error("Test execution aborted: %s", e)
            outcome.error = e
        finally:
            outcome.duration = time.monotonic() - start

        outcome.results = self.results
        outcome.summary = self.summarize()
        return outcome

    def reset(self) -> None:
        """Forget previously collected results; registered suites are kept."""
        self.collector.clear()

    def _run_suite(self, suite: TestSuite, deadline: Optional[Deadline]) -> None:
        """Run a single suite, raising on the first failing stage."""
        logger.info("Running suite %s (%d tests)", suite.name, suite.total_tests)

        if suite.setup is not None:
            try:
                suite.setup(self.provider)
            except Exception as e:
                raise SuiteSetupError(suite.name, e) from e

        for test in suite.tests:
            error = self._run_test(suite, test, deadline)
            if error is not None:
                raise TestFailedError(suite.name, error, test=test.name) from error

        if suite.teardown is not None:
            try:
                suite.teardown(self.provider)
            except Exception as e:
                raise SuiteTeardownError(suite.name, e) from e

    def _run_test(
        self,
        suite: TestSuite,
        test: Test,
        parent: Optional[Deadline],
    ) -> Optional[Exception]:
        """Run one test and record exactly one result for it.

        Returns:
            The exception raised by the test body, or None on success.
        """
        if test.skip:
            now = datetime.now(timezone.utc)
            self._record(TestResult(
                test=test,
                success=True,
                suite=suite.name,
                start_time=now,
                end_time=now,
            ))
            logger.info("  SKIPPED %s: %s", test.name, test.skip_reason or "skip requested")
            return None

        # Advisory only: the body may consult it, nothing enforces it
        deadline = Deadline(test.timeout, parent=parent)
        error: Optional[Exception] = None

        start_time = datetime.now(timezone.utc)
        started = time.monotonic()
        with deadline_scope(deadline):
            try:
                test.run(self.provider)
            except Exception as e:
                error = e
        duration = time.monotonic() - started
        end_time = datetime.now(timezone.utc)

        self._record(TestResult(
            test=test,
            success=error is None,
            suite=suite.name,
            error=error,
            start_time=start_time,
            end_time=end_time,
            duration=duration,
        ))

        if error is None:
            logger.info("  PASSED %s (%.3fs)", test.name, duration)
        else:
            logger.error("  FAILED %s (%.3fs): %s", test.name, duration, error)

        if test.cleanup is not None:
            try:
                test.cleanup(self.provider)
            except Exception as e:
                logger.warning("Cleanup failed for test %s: %s", test.name, e)

        return error

    def _record(self, result: TestResult) -> None:
        self.collector.add(result)
        if self.on_result is None:
            return
        try:
            self.on_result(result)
        except Exception as e:
            logger.warning("Result callback failed for test %s: %s", result.test.name, e)
