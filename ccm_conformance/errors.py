"""Exception types for ccm-conformance.

Exception hierarchy:
    ConformanceError (base)
    ├── RunAbortedError - a run stopped before finishing its plan
    │   ├── SuiteSetupError - suite setup raised
    │   ├── TestFailedError - a test body raised
    │   └── SuiteTeardownError - suite teardown raised
    ├── ConditionTimeoutError - a polled condition was not met in time
    ├── CapabilityNotSupportedError - provider lacks a capability
    └── PlanError - run plan could not be loaded
"""

from typing import Any, Optional


class ConformanceError(Exception):
    """Base exception for all ccm-conformance errors.

    Attributes:
        message: Human-readable error description.
        details: Additional error context.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class RunAbortedError(ConformanceError):
    """A run was terminated by a failing stage.

    Attributes:
        stage: Which stage aborted the run ("setup", "test" or "teardown").
        suite: Name of the suite being executed.
        test: Name of the failing test, for the "test" stage.
        cause: The exception raised by the stage callback.
    """

    stage = "run"

    def __init__(
        self,
        suite: str,
        cause: BaseException,
        test: Optional[str] = None,
    ):
        self.suite = suite
        self.test = test
        self.cause = cause
        super().__init__(self._describe(), details={"stage": self.stage})

    def _describe(self) -> str:
        return f"suite {self.suite} aborted: {self.cause}"


class SuiteSetupError(RunAbortedError):
    """Suite setup raised; none of the suite's tests were run."""

    stage = "setup"

    def _describe(self) -> str:
        return f"failed to setup test suite {self.suite}: {self.cause}"


class TestFailedError(RunAbortedError):
    """A test body raised; the run stopped after recording its result."""

    __test__ = False
    stage = "test"

    def _describe(self) -> str:
        return f"failed to run test {self.test} in suite {self.suite}: {self.cause}"


class SuiteTeardownError(RunAbortedError):
    """Suite teardown raised after all of its tests completed."""

    stage = "teardown"

    def _describe(self) -> str:
        return f"failed to teardown test suite {self.suite}: {self.cause}"


class ConditionTimeoutError(ConformanceError, TimeoutError):
    """A polled condition was not met before its deadline."""

    def __init__(self, description: str, timeout: float, attempts: int = 0):
        self.description = description
        self.timeout = timeout
        self.attempts = attempts
        super().__init__(
            f"condition wait timed out: {description}",
            details={"timeout": f"{timeout:g}s", "attempts": attempts},
        )


class CapabilityNotSupportedError(ConformanceError):
    """The provider under test does not implement a capability."""

    def __init__(self, capability: str, provider: str = ""):
        self.capability = capability
        self.provider = provider
        message = f"cloud provider does not support {capability} functionality"
        details = {"provider": provider} if provider else None
        super().__init__(message, details=details)


class PlanError(ConformanceError):
    """A run plan file is missing, malformed or invalid."""
