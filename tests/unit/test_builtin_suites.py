"""Unit tests for the built-in conformance suites against the mock provider."""

from __future__ import annotations

import pytest

from ccm_conformance.errors import CapabilityNotSupportedError, TestFailedError
from ccm_conformance.providers import EnvironmentConfig, MockCloudProvider, TestEnvironment, Zone
from ccm_conformance.runner import TestRunner
from ccm_conformance.suite import builtin
from ccm_conformance.suite.builtin import SUITE_FACTORIES, build_suites

EXPECTED_SUITES = {
    "loadbalancer": (
        "LoadBalancer",
        [
            "CreateLoadBalancer",
            "UpdateLoadBalancer",
            "DeleteLoadBalancer",
            "LoadBalancerStatus",
            "LoadBalancerHealthCheck",
        ],
    ),
    "nodes": (
        "NodeManagement",
        ["NodeInitialization", "NodeAddresses", "NodeProviderID", "NodeInstanceType", "NodeZones"],
    ),
    "routes": ("RouteManagement", ["CreateRoute", "DeleteRoute", "ListRoutes"]),
    "instances": ("Instances", ["InstanceExists", "InstanceShutdown", "InstanceMetadata"]),
    "zones": ("Zones", ["GetZone", "GetZoneByProviderID"]),
    "clusters": ("Clusters", ["ListClusters", "Master"]),
}


class TestSuiteCatalog:
    """Tests for suite construction."""

    @pytest.mark.parametrize("key", sorted(EXPECTED_SUITES))
    def test_suite_contents(self, key: str) -> None:
        """Test each factory builds the expected suite and tests."""
        name, tests = EXPECTED_SUITES[key]
        (suite,) = build_suites(key)
        assert suite.name == name
        assert suite.test_names() == tests
        assert all(t.timeout > 0 for t in suite.tests)

    def test_all_builds_every_suite(self) -> None:
        """Test "all" builds every suite in catalog order."""
        suites = build_suites("all")
        assert [s.name for s in suites] == [EXPECTED_SUITES[k][0] for k in SUITE_FACTORIES]

    def test_name_is_case_insensitive(self) -> None:
        """Test suite names are matched case-insensitively."""
        assert build_suites("Zones")[0].name == "Zones"

    def test_unknown_suite(self) -> None:
        """Test an unknown suite name is rejected."""
        with pytest.raises(ValueError, match="unknown test suite: storage"):
            build_suites("storage")

    def test_factories_build_fresh_suites(self) -> None:
        """Test each call returns a new suite definition."""
        assert build_suites("zones")[0] is not build_suites("zones")[0]


class TestSuitesAgainstMock:
    """Tests running the built-in suites end to end against the mock."""

    def test_all_suites_pass(self, env: TestEnvironment) -> None:
        """Test every built-in test passes against the mock provider."""
        runner = TestRunner(env)
        for suite in build_suites("all"):
            runner.register(suite)

        outcome = runner.execute()

        assert outcome.error is None
        assert outcome.summary.total == 20
        assert outcome.summary.passed == 20

    def test_suites_leave_no_services_behind(self, env: TestEnvironment) -> None:
        """Test per-test cleanup and suite teardown remove created resources."""
        runner = TestRunner(env)
        for name in ("loadbalancer", "routes", "nodes"):
            runner.register(build_suites(name)[0])

        runner.run()

        assert env.created_resources() == {"nodes": [], "services": [], "routes": []}

    def test_missing_capability_fails_the_run(self) -> None:
        """Test a suite fails cleanly when the provider lacks a capability."""
        env = TestEnvironment(MockCloudProvider(disabled=["zones"]), EnvironmentConfig())
        runner = TestRunner(env)
        runner.register(build_suites("zones")[0])

        with pytest.raises(TestFailedError) as exc_info:
            runner.run()

        assert exc_info.value.test == "GetZone"
        assert isinstance(exc_info.value.cause, CapabilityNotSupportedError)
        assert len(runner.results) == 1
        assert runner.results[0].success is False

    def test_environment_log_records_progress(self, env: TestEnvironment) -> None:
        """Test tests write progress messages to the environment log."""
        runner = TestRunner(env)
        runner.register(build_suites("clusters")[0])

        runner.run()

        assert "Listed 2 clusters" in env.logs
        assert "Master node: mock-master.example.com" in env.logs

    def test_failed_node_check_untracks_its_node(self, env: TestEnvironment) -> None:
        """Test a failing node check removes its node so a rerun fails the same way."""
        zones, _ = env.provider.zones()
        zones.get_zone = lambda: Zone(failure_domain="", region="")

        for _ in range(2):
            with pytest.raises(AssertionError, match="zone region is empty"):
                builtin.check_node_zones(env)
            assert env.created_resources()["nodes"] == []

    def test_load_balancer_status_records_metric(self, env: TestEnvironment) -> None:
        """Test the status check records how long ingress took."""
        builtin.check_load_balancer_status(env)
        assert env.metrics["load_balancer_ready_seconds"] >= 0.0


class TestExternalServices:
    """Tests for checking real load balancer endpoints."""

    def test_mocked_external_services_skip_http_check(
        self, env: TestEnvironment, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test no HTTP request is made while external services are mocked."""
        requested: list[str] = []
        monkeypatch.setattr(builtin, "wait_for_http_endpoint", lambda url, **kw: requested.append(url))

        builtin.check_load_balancer_status(env)

        assert requested == []

    def test_unmocked_external_services_check_ingress(
        self, mock_provider: MockCloudProvider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the ingress address is checked over HTTP when not mocked."""
        requested: list[str] = []

        def fake_wait(url: str, **kwargs) -> int:
            requested.append(url)
            return 200

        monkeypatch.setattr(builtin, "wait_for_http_endpoint", fake_wait)
        env = TestEnvironment(mock_provider, EnvironmentConfig(mock_external_services=False))

        builtin.check_load_balancer_status(env)

        assert requested == ["http://192.168.1.100:80/"]
        assert "Load balancer endpoint http://192.168.1.100:80/ answered with HTTP 200" in env.logs
