"""Unit tests for run plan parsing, validation and test filters."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccm_conformance.errors import PlanError
from ccm_conformance.plan import (
    RunPlan,
    apply_filters,
    parse_plan,
    parse_plan_data,
    split_names,
    validate_plan,
)
from ccm_conformance.plan.filters import NOT_SELECTED_REASON, SKIP_REQUESTED_REASON
from ccm_conformance.suite.schema import Test, TestSuite

VALID_PLAN = """\
provider: mock
cluster: prod-cluster
region: eu-west
timeout: 120
cleanup: false
suites: [zones, clusters]
tests: GetZone, Master
output: json
"""


def _noop(handle) -> None:
    pass


# =============================================================================
# Parser Tests
# =============================================================================


class TestParsePlan:
    """Tests for YAML run plan loading."""

    def test_parse_valid_file(self, tmp_path: Path) -> None:
        """Test a complete plan file is parsed into a RunPlan."""
        path = tmp_path / "plan.yaml"
        path.write_text(VALID_PLAN)

        plan = parse_plan(path)

        assert plan.provider == "mock"
        assert plan.cluster == "prod-cluster"
        assert plan.region == "eu-west"
        assert plan.zone == "test-zone"
        assert plan.timeout == 120.0
        assert plan.cleanup is False
        assert plan.suites == ["zones", "clusters"]
        assert plan.tests == ["GetZone", "Master"]
        assert plan.output == "json"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises PlanError."""
        with pytest.raises(PlanError, match="not found"):
            parse_plan(tmp_path / "missing.yaml")

    def test_wrong_suffix(self, tmp_path: Path) -> None:
        """Test non-YAML file suffixes are rejected."""
        path = tmp_path / "plan.json"
        path.write_text("{}")
        with pytest.raises(PlanError, match="Expected .yaml"):
            parse_plan(path)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        """Test YAML syntax errors become PlanError."""
        path = tmp_path / "plan.yml"
        path.write_text("suites: [zones\n")
        with pytest.raises(PlanError, match="Malformed YAML"):
            parse_plan(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file is rejected."""
        path = tmp_path / "plan.yaml"
        path.write_text("")
        with pytest.raises(PlanError, match="Empty"):
            parse_plan(path)

    def test_unknown_field(self) -> None:
        """Test unknown keys are reported."""
        with pytest.raises(PlanError, match="Unknown field"):
            parse_plan_data({"provider": "mock", "parallel": True})

    def test_not_a_mapping(self) -> None:
        """Test a top-level list is rejected."""
        with pytest.raises(PlanError, match="mapping"):
            parse_plan_data(["zones"])

    def test_bad_timeout(self) -> None:
        """Test a non-numeric timeout is rejected."""
        with pytest.raises(PlanError, match="timeout"):
            parse_plan_data({"timeout": "soon"})

    def test_bad_string_field(self) -> None:
        """Test string fields must be strings."""
        with pytest.raises(PlanError, match="'cluster' must be a string"):
            parse_plan_data({"cluster": 42})

    def test_provider_and_suites_lowercased(self) -> None:
        """Test names are normalized to lower case."""
        plan = parse_plan_data({"provider": "Mock", "suites": "Zones"})
        assert plan.provider == "mock"
        assert plan.suites == ["zones"]


class TestSplitNames:
    """Tests for split_names."""

    def test_comma_string(self) -> None:
        assert split_names(" a, b ,,c ") == ["a", "b", "c"]

    def test_list(self) -> None:
        assert split_names(["a ", "b"]) == ["a", "b"]

    def test_none(self) -> None:
        assert split_names(None) == []

    def test_invalid(self) -> None:
        with pytest.raises(PlanError):
            split_names([1, 2], "tests")


# =============================================================================
# Validator Tests
# =============================================================================


class TestValidatePlan:
    """Tests for validate_plan."""

    def test_default_plan_is_valid(self) -> None:
        """Test the default plan validates cleanly."""
        result = validate_plan(RunPlan())
        assert result.valid
        assert result.errors == []
        assert result.warnings == []
        assert str(result) == "Valid"

    def test_unsupported_provider(self) -> None:
        """Test unknown providers are errors."""
        result = validate_plan(RunPlan(provider="aws"))
        assert not result.valid
        assert result.errors[0].path == "provider"

    def test_unknown_suite(self) -> None:
        """Test unknown suite names are errors."""
        result = validate_plan(RunPlan(suites=["zones", "storage"]))
        assert not result.valid
        assert [e.path for e in result.errors] == ["suites[1]"]

    def test_no_suites(self) -> None:
        """Test an empty suite list is an error."""
        result = validate_plan(RunPlan(suites=[]))
        assert [e.path for e in result.errors] == ["suites"]

    def test_invalid_settings(self) -> None:
        """Test several invalid settings are all reported."""
        plan = RunPlan(output="xml", timeout=0, cluster="")
        plan.cleanup = "yes"
        result = validate_plan(plan)
        paths = {e.path for e in result.errors}
        assert {"output", "timeout", "cluster", "cleanup"} <= paths
        assert str(result).startswith("Invalid:")

    def test_unmatched_test_names_warn(self) -> None:
        """Test test names outside the selected suites are warnings."""
        result = validate_plan(RunPlan(suites=["zones"], tests=["GetZone", "Master"]))
        assert result.valid
        assert [w.path for w in result.warnings] == ["tests[1]"]
        assert result.warnings[0].severity == "warning"

    def test_selected_and_skipped_warns(self) -> None:
        """Test a test both selected and skipped produces a warning."""
        result = validate_plan(RunPlan(tests=["GetZone"], skip=["GetZone"]))
        assert result.valid
        assert any("skip wins" in w.message for w in result.warnings)


# =============================================================================
# Filter Tests
# =============================================================================


class TestApplyFilters:
    """Tests for apply_filters."""

    def _suite(self) -> TestSuite:
        return TestSuite(name="S", tests=[
            Test(name="a", run=_noop),
            Test(name="b", run=_noop),
            Test(name="c", run=_noop, skip=True, skip_reason="flaky"),
        ])

    def test_no_filters(self) -> None:
        """Test suites are unchanged without filters."""
        (suite,) = apply_filters([self._suite()])
        assert [t.skip for t in suite.tests] == [False, False, True]

    def test_only_marks_others_skipped(self) -> None:
        """Test unselected tests are kept but marked skipped."""
        (suite,) = apply_filters([self._suite()], only=["a"])
        assert suite.test_names() == ["a", "b", "c"]
        assert suite.tests[0].skip is False
        assert suite.tests[1].skip_reason == NOT_SELECTED_REASON
        assert suite.tests[2].skip_reason == "flaky"

    def test_skip_takes_precedence(self) -> None:
        """Test a name in both lists is skipped."""
        (suite,) = apply_filters([self._suite()], only=["a"], skip=["a"])
        assert suite.tests[0].skip_reason == SKIP_REQUESTED_REASON

    def test_original_suite_not_mutated(self) -> None:
        """Test filtering returns copies."""
        original = self._suite()
        apply_filters([original], skip=["a"])
        assert original.tests[0].skip is False
