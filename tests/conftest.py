"""Shared fixtures for ccm-conformance tests.

Note:
    No __init__.py files in test directories; fixtures here are discovered
    by pytest automatically.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from ccm_conformance.providers import EnvironmentConfig, MockCloudProvider, TestEnvironment
from ccm_conformance.suite.schema import Test


class CallRecorder:
    """Records the order in which suite and test callbacks are invoked."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.handles: list[Any] = []

    def ok(self, label: str) -> Callable[[Any], None]:
        """Callback that records its label and succeeds."""

        def callback(handle: Any) -> None:
            self.calls.append(label)
            self.handles.append(handle)

        return callback

    def fail(self, label: str, message: str = "boom") -> Callable[[Any], None]:
        """Callback that records its label and raises RuntimeError."""

        def callback(handle: Any) -> None:
            self.calls.append(label)
            self.handles.append(handle)
            raise RuntimeError(message)

        return callback

    def passing_test(self, name: str, **kwargs: Any) -> Test:
        return Test(name=name, run=self.ok(f"run:{name}"), **kwargs)

    def failing_test(self, name: str, message: str = "boom", **kwargs: Any) -> Test:
        return Test(name=name, run=self.fail(f"run:{name}", message), **kwargs)


@pytest.fixture
def recorder() -> CallRecorder:
    """Fresh call recorder for one test."""
    return CallRecorder()


@pytest.fixture
def mock_provider() -> MockCloudProvider:
    """Mock cloud provider with every capability enabled."""
    return MockCloudProvider()


@pytest.fixture
def env(mock_provider: MockCloudProvider) -> TestEnvironment:
    """Test environment wrapping the mock provider."""
    environment = TestEnvironment(mock_provider, EnvironmentConfig())
    environment.setup()
    return environment
