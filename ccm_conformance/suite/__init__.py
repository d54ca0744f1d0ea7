"""Suite module - test suite definitions."""

from .schema import Test, TestFunc, TestResult, TestSuite, TestSummary

__all__ = [
    "Test",
    "TestFunc",
    "TestResult",
    "TestSuite",
    "TestSummary",
]
