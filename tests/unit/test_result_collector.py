"""Unit tests for ResultCollector and summary computation."""

from __future__ import annotations

import itertools
import threading

from ccm_conformance.runner import ResultCollector, summarize
from ccm_conformance.suite.schema import Test, TestResult, TestSummary


def _noop(handle) -> None:
    pass


def _result(name: str, success: bool, skip: bool = False, duration: float = 0.0) -> TestResult:
    return TestResult(
        test=Test(name=name, run=_noop, skip=skip),
        success=success,
        duration=duration,
    )


PASS_A = _result("a", True, duration=0.1)
PASS_B = _result("b", True, duration=0.2)
FAIL_C = _result("c", False, duration=0.3)
SKIP_D = _result("d", True, skip=True)


class TestSummarize:
    """Tests for the summarize function."""

    def test_counts_pass_fail_skip(self) -> None:
        """Test {pass, pass, fail, skip} yields 4/2/1/1."""
        summary = summarize([PASS_A, PASS_B, FAIL_C, SKIP_D])
        assert summary.total == 4
        assert summary.passed == 2
        assert summary.failed == 1
        assert summary.skipped == 1
        assert abs(summary.total_duration - 0.6) < 1e-9

    def test_empty(self) -> None:
        """Test summarizing no results yields zeros."""
        assert summarize([]) == TestSummary()

    def test_skip_checked_before_success(self) -> None:
        """Test a skipped result counts as skipped even though success is True."""
        summary = summarize([SKIP_D])
        assert summary.skipped == 1
        assert summary.passed == 0

    def test_skipped_failure_still_counts_as_skipped(self) -> None:
        """Test skip takes precedence over a False success flag."""
        summary = summarize([_result("x", False, skip=True)])
        assert (summary.passed, summary.failed, summary.skipped) == (0, 0, 1)

    def test_independent_of_order(self) -> None:
        """Test every permutation of the results gives the same summary."""
        results = [PASS_A, PASS_B, FAIL_C, SKIP_D]
        expected = summarize(results)
        for perm in itertools.permutations(results):
            assert summarize(list(perm)) == expected

    def test_counts_add_up(self) -> None:
        """Test passed + failed + skipped always equals total."""
        summary = summarize([PASS_A, FAIL_C, FAIL_C, SKIP_D, SKIP_D])
        assert summary.passed + summary.failed + summary.skipped == summary.total


class TestResultCollector:
    """Tests for the thread-safe result store."""

    def test_preserves_insertion_order(self) -> None:
        """Test results are returned in the order added."""
        collector = ResultCollector()
        for r in (FAIL_C, PASS_A, SKIP_D):
            collector.add(r)
        assert [r.test.name for r in collector.results] == ["c", "a", "d"]
        assert len(collector) == 3

    def test_results_is_a_snapshot(self) -> None:
        """Test mutating the returned list does not affect the collector."""
        collector = ResultCollector([PASS_A])
        snapshot = collector.results
        snapshot.append(FAIL_C)
        assert len(collector) == 1

    def test_summarize_is_idempotent(self) -> None:
        """Test summarizing twice without changes gives equal summaries."""
        collector = ResultCollector([PASS_A, FAIL_C, SKIP_D])
        assert collector.summarize() == collector.summarize()

    def test_failures(self) -> None:
        """Test failures lists only executed, failed tests."""
        collector = ResultCollector([PASS_A, FAIL_C, SKIP_D, _result("x", False, skip=True)])
        assert [r.test.name for r in collector.failures()] == ["c"]

    def test_clear(self) -> None:
        """Test clear drops all results."""
        collector = ResultCollector([PASS_A])
        collector.clear()
        assert collector.results == []
        assert collector.summarize().total == 0

    def test_concurrent_adds_and_reads(self) -> None:
        """Test concurrent writers and readers never lose results."""
        collector = ResultCollector()

        def writer() -> None:
            for _ in range(200):
                collector.add(PASS_A)

        def reader() -> None:
            for _ in range(200):
                summary = collector.summarize()
                assert summary.passed == summary.total

        threads = [threading.Thread(target=writer) for _ in range(4)]
        threads.append(threading.Thread(target=reader))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert collector.summarize().total == 800


class TestSummaryModel:
    """Tests for TestSummary and TestResult helpers."""

    def test_to_dict(self) -> None:
        """Test summary serialization uses milliseconds."""
        summary = TestSummary(total=2, passed=1, failed=1, total_duration=1.5)
        assert summary.to_dict() == {
            "total": 2,
            "passed": 1,
            "failed": 1,
            "skipped": 0,
            "duration_ms": 1500,
        }
        assert summary.all_passed is False

    def test_status(self) -> None:
        """Test result status labels."""
        assert PASS_A.status == "PASSED"
        assert FAIL_C.status == "FAILED"
        assert SKIP_D.status == "SKIPPED"
