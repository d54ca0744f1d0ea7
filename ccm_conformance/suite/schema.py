"""Test suite data models.

Suites and tests are plain data created by the caller before a run; the
runner never mutates them. Every callback receives the provider handle and
signals failure by raising.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Optional

# Setup, teardown, run and cleanup all share this shape
TestFunc = Callable[[Any], None]


@dataclass(frozen=True)
class Test:
    """A single named unit of work run against the provider."""

    __test__ = False

    name: str
    run: TestFunc
    description: str = ""
    skip: bool = False
    skip_reason: str = ""
    timeout: float = 0.0  # seconds, advisory
    cleanup: Optional[TestFunc] = None
    dependencies: tuple[str, ...] = ()

    def skipped(self, reason: str) -> "Test":
        """Return a copy of this test marked as skipped."""
        return replace(self, skip=True, skip_reason=reason)


@dataclass(frozen=True)
class TestSuite:
    """An ordered group of tests sharing one setup/teardown pair."""

    __test__ = False

    name: str
    tests: tuple[Test, ...] = ()
    description: str = ""
    setup: Optional[TestFunc] = None
    teardown: Optional[TestFunc] = None
    dependencies: tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any iterable of tests, store an immutable sequence
        object.__setattr__(self, "tests", tuple(self.tests))

    @property
    def total_tests(self) -> int:
        return len(self.tests)

    def test_names(self) -> list[str]:
        return [t.name for t in self.tests]

    def with_tests(self, tests: list[Test]) -> "TestSuite":
        return replace(self, tests=tuple(tests))


@dataclass(frozen=True)
class TestResult:
    """Outcome of one attempted test."""

    __test__ = False

    test: Test
    success: bool
    suite: str = ""
    error: Optional[BaseException] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: float = 0.0  # seconds

    @property
    def skipped(self) -> bool:
        return self.test.skip

    @property
    def status(self) -> str:
        """PASSED, FAILED or SKIPPED; skip takes precedence."""
        if self.test.skip:
            return "SKIPPED"
        return "PASSED" if self.success else "FAILED"


@dataclass(frozen=True)
class TestSummary:
    """Aggregate counts over a list of results."""

    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    total_duration: float = 0.0

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration_ms": int(self.total_duration * 1000),
        }
