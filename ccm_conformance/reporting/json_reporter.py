"""JSON report generator for conformance runs.

Generates structured JSON reports from test results.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..suite.schema import TestResult, TestSummary


class JsonReporter:
    """Generates JSON reports from conformance test results."""

    def generate(
        self,
        results: list[TestResult],
        summary: TestSummary,
        duration: float = 0.0,
        provider: str = "",
        error: Optional[BaseException] = None,
        logs: Optional[list[str]] = None,
        resource_counts: Optional[dict[str, int]] = None,
        metrics: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Generate a JSON report from test results.

        Args:
            results: Recorded results, in execution order.
            summary: Summary computed from ``results``.
            duration: Wall-clock duration of the run in seconds.
            provider: Name of the provider under test.
            error: Terminal error that aborted the run, if any.
            logs: Environment log lines recorded during the run.
            resource_counts: Resources created during the run, by kind.
            metrics: Metrics recorded by tests.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        all_passed = error is None and summary.failed == 0

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": provider,
            "status": "passed" if all_passed else "failed",
            "total_duration_ms": int(duration * 1000),
            "summary": summary.to_dict(),
            "tests": [self._result_entry(r) for r in results],
            "error": str(error) if error is not None else None,
            "aborted_stage": getattr(error, "stage", None),
            "logs": list(logs or []),
            "resource_counts": dict(resource_counts or {}),
            "metrics": dict(metrics or {}),
        }

    def _result_entry(self, result: TestResult) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "suite": result.suite,
            "name": result.test.name,
            "description": result.test.description,
            "status": result.status,
            "duration_ms": int(result.duration * 1000),
            "start_time": result.start_time.isoformat() if result.start_time else None,
            "end_time": result.end_time.isoformat() if result.end_time else None,
            "error": str(result.error) if result.error is not None else None,
        }
        if result.skipped:
            entry["skip_reason"] = result.test.skip_reason
        return entry

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        if pretty:
            return json.dumps(report, indent=2, ensure_ascii=False)
        return json.dumps(report, ensure_ascii=False)
