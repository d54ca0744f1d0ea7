"""Mock cloud provider returning canned data.

Useful for exercising the test framework itself and as a reference for
provider authors. Individual capabilities can be disabled to exercise the
"not supported" paths of the built-in suites.
"""

import logging
import threading
from typing import Iterable, Optional

from .interface import (
    CAPABILITIES,
    LoadBalancerIngress,
    LoadBalancerStatus,
    Node,
    NodeAddress,
    NodeAddressType,
    Route,
    Service,
    Zone,
)

logger = logging.getLogger(__name__)

MOCK_PROVIDER_NAME = "mock-cloud-provider"
MOCK_ZONE = Zone(failure_domain="mock-zone", region="mock-region")


class MockLoadBalancer:
    def __init__(self):
        self._lock = threading.Lock()
        self._balancers: dict[str, LoadBalancerStatus] = {}

    def get_load_balancer_name(self, cluster_name: str, service: Service) -> str:
        return f"mock-lb-{service.name}"

    def get_load_balancer(
        self, cluster_name: str, service: Service
    ) -> tuple[Optional[LoadBalancerStatus], bool]:
        with self._lock:
            status = self._balancers.get(self.get_load_balancer_name(cluster_name, service))
        return status, status is not None

    def ensure_load_balancer(
        self, cluster_name: str, service: Service, nodes: list[Node]
    ) -> LoadBalancerStatus:
        status = LoadBalancerStatus(ingress=[
            LoadBalancerIngress(ip="192.168.1.100"),
            LoadBalancerIngress(hostname="mock-lb.example.com"),
        ])
        with self._lock:
            self._balancers[self.get_load_balancer_name(cluster_name, service)] = status
        return status

    def update_load_balancer(
        self, cluster_name: str, service: Service, nodes: list[Node]
    ) -> None:
        pass

    def ensure_load_balancer_deleted(self, cluster_name: str, service: Service) -> None:
        with self._lock:
            self._balancers.pop(self.get_load_balancer_name(cluster_name, service), None)


class MockInstances:
    def node_addresses(self, node_name: str) -> list[NodeAddress]:
        return [
            NodeAddress(NodeAddressType.INTERNAL_IP, "10.0.0.1"),
            NodeAddress(NodeAddressType.EXTERNAL_IP, "192.168.1.1"),
            NodeAddress(NodeAddressType.HOSTNAME, node_name),
        ]

    def node_addresses_by_provider_id(self, provider_id: str) -> list[NodeAddress]:
        return self.node_addresses("mock-node")

    def instance_id(self, node_name: str) -> str:
        return f"mock-provider://{node_name}"

    def instance_type(self, node_name: str) -> str:
        return "mock-instance-type"

    def instance_type_by_provider_id(self, provider_id: str) -> str:
        return "mock-instance-type"

    def instance_exists_by_provider_id(self, provider_id: str) -> bool:
        return True

    def instance_shutdown_by_provider_id(self, provider_id: str) -> bool:
        return False


class MockZones:
    def get_zone(self) -> Zone:
        return MOCK_ZONE

    def get_zone_by_provider_id(self, provider_id: str) -> Zone:
        return MOCK_ZONE

    def get_zone_by_node_name(self, node_name: str) -> Zone:
        return MOCK_ZONE


class MockRoutes:
    def __init__(self):
        self._lock = threading.Lock()
        self._routes: dict[str, Route] = {
            "mock-route-1": Route(
                name="mock-route-1",
                target_node="mock-node-1",
                destination_cidr="10.0.0.0/24",
            ),
        }

    def list_routes(self, cluster_name: str) -> list[Route]:
        with self._lock:
            return list(self._routes.values())

    def create_route(self, cluster_name: str, name_hint: str, route: Route) -> None:
        with self._lock:
            self._routes[route.name or name_hint] = route

    def delete_route(self, cluster_name: str, route: Route) -> None:
        with self._lock:
            self._routes.pop(route.name, None)


class MockClusters:
    def list_clusters(self) -> list[str]:
        return ["mock-cluster-1", "mock-cluster-2"]

    def master(self, cluster_name: str) -> str:
        return "mock-master.example.com"


class MockCloudProvider:
    """Cloud provider whose capabilities all return canned data."""

    def __init__(self, disabled: Iterable[str] = ()):
        """Initialize mock provider.

        Args:
            disabled: Capability names to report as unsupported.
        """
        self.disabled = frozenset(disabled)
        unknown = self.disabled - set(CAPABILITIES)
        if unknown:
            raise ValueError(f"Unknown capabilities: {', '.join(sorted(unknown))}")

        self._load_balancer = MockLoadBalancer()
        self._instances = MockInstances()
        self._zones = MockZones()
        self._routes = MockRoutes()
        self._clusters = MockClusters()
        logger.info("Mock cloud provider initialized")

    def _lookup(self, name: str, impl):
        if name in self.disabled:
            return None, False
        return impl, True

    def provider_name(self) -> str:
        return MOCK_PROVIDER_NAME

    def load_balancer(self) -> tuple[Optional[MockLoadBalancer], bool]:
        return self._lookup("load_balancer", self._load_balancer)

    def instances(self) -> tuple[Optional[MockInstances], bool]:
        return self._lookup("instances", self._instances)

    def zones(self) -> tuple[Optional[MockZones], bool]:
        return self._lookup("zones", self._zones)

    def routes(self) -> tuple[Optional[MockRoutes], bool]:
        return self._lookup("routes", self._routes)

    def clusters(self) -> tuple[Optional[MockClusters], bool]:
        return self._lookup("clusters", self._clusters)
