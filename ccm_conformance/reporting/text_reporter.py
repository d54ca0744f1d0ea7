"""Plain text report for conformance runs."""

from typing import Optional

from ..suite.schema import TestResult, TestSummary


class TextReporter:
    """Renders results as a human readable summary."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def render(
        self,
        results: list[TestResult],
        summary: TestSummary,
        duration: float = 0.0,
        error: Optional[BaseException] = None,
        logs: Optional[list[str]] = None,
        resource_counts: Optional[dict[str, int]] = None,
    ) -> str:
        lines = [
            "",
            "=== CCM Cloud-Agnostic Test Results ===",
            f"Total Duration: {duration:.3f}s",
            (
                f"Test Summary: {summary.total} total, {summary.passed} passed, "
                f"{summary.failed} failed, {summary.skipped} skipped"
            ),
            f"Test Suite Duration: {summary.total_duration:.3f}s",
        ]

        if self.verbose and results:
            lines.append("")
            lines.append("Detailed Results:")
            for result in results:
                name = f"{result.suite}/{result.test.name}" if result.suite else result.test.name
                lines.append(f"  {result.status}: {name} ({result.duration:.3f}s)")
                if result.error is not None:
                    lines.append(f"    Error: {result.error}")
                elif result.skipped and result.test.skip_reason:
                    lines.append(f"    Reason: {result.test.skip_reason}")

        if self.verbose and resource_counts:
            lines.append("")
            counts = ", ".join(f"{kind}={count}" for kind, count in sorted(resource_counts.items()))
            lines.append(f"Resources Created: {counts}")

        if self.verbose and logs:
            lines.append("")
            lines.append("Environment Logs:")
            for message in logs:
                lines.append(f"  {message}")

        lines.append("")
        if error is not None:
            lines.append(f"Run aborted during {getattr(error, 'stage', 'run')}: {error}")
        if summary.failed > 0:
            lines.append(f"Some tests failed: {summary.failed} failed out of {summary.total} total")
        elif error is None:
            lines.append(f"All tests passed: {summary.passed} passed out of {summary.total} total")

        return "\n".join(lines)
