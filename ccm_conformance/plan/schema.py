"""Run plan data models.

A run plan selects the provider, the suites and the tests of a run. It is
loaded from YAML and then overridden by command line options.
"""

from dataclasses import dataclass, field
from typing import Any

from ..providers.environment import EnvironmentConfig

VALID_OUTPUT_FORMATS = {"text", "json"}


@dataclass
class RunPlan:
    """What to run, against which provider."""
    provider: str = "mock"
    cluster: str = "test-cluster"
    region: str = "test-region"
    zone: str = "test-zone"
    timeout: float = 600.0
    cleanup: bool = True
    mock_external: bool = True
    suites: list[str] = field(default_factory=lambda: ["all"])
    tests: list[str] = field(default_factory=list)
    skip: list[str] = field(default_factory=list)
    output: str = "text"
    verbose: bool = False

    def __post_init__(self):
        self.provider = self.provider.lower()
        self.output = self.output.lower()
        self.suites = [s.lower() for s in self.suites]

    def environment_config(self) -> EnvironmentConfig:
        """Environment configuration for the provider handle."""
        return EnvironmentConfig(
            provider_name=self.provider,
            cluster_name=self.cluster,
            region=self.region,
            zone=self.zone,
            test_timeout=self.timeout,
            cleanup_resources=self.cleanup,
            mock_external_services=self.mock_external,
            test_data={"output-format": self.output, "verbose": self.verbose},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "cluster": self.cluster,
            "region": self.region,
            "zone": self.zone,
            "timeout": self.timeout,
            "cleanup": self.cleanup,
            "mock_external": self.mock_external,
            "suites": list(self.suites),
            "tests": list(self.tests),
            "skip": list(self.skip),
            "output": self.output,
            "verbose": self.verbose,
        }


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"


@dataclass
class ValidationResult:
    """Result of run plan validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def __str__(self) -> str:
        if self.valid:
            msg = "Valid"
            if self.warnings:
                msg += f" ({self.warning_count} warnings)"
            return msg
        return f"Invalid: {self.error_count} errors, {self.warning_count} warnings"
