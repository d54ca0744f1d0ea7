"""Cloud-agnostic conformance test runner for cloud controller providers."""

__version__ = "0.1.0"

from .conditions import ConditionPoller, Deadline, current_deadline, wait_for_condition
from .errors import (
    CapabilityNotSupportedError,
    ConditionTimeoutError,
    ConformanceError,
    PlanError,
    RunAbortedError,
    SuiteSetupError,
    SuiteTeardownError,
    TestFailedError,
)
from .runner import ResultCollector, RunOutcome, TestRunner
from .suite import Test, TestResult, TestSuite, TestSummary

__all__ = [
    "__version__",
    "ConditionPoller",
    "Deadline",
    "current_deadline",
    "wait_for_condition",
    "CapabilityNotSupportedError",
    "ConditionTimeoutError",
    "ConformanceError",
    "PlanError",
    "RunAbortedError",
    "SuiteSetupError",
    "SuiteTeardownError",
    "TestFailedError",
    "ResultCollector",
    "RunOutcome",
    "TestRunner",
    "Test",
    "TestResult",
    "TestSuite",
    "TestSummary",
]
