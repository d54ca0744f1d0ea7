"""Test environment handle passed to every suite and test callback.

Wraps the provider under test and tracks the nodes, services and routes
created during a run so they can be cleaned up at teardown.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from ..conditions.poller import DEFAULT_INTERVAL, DEFAULT_TIMEOUT, CheckFunction, ConditionPoller
from .interface import (
    CloudProvider,
    Node,
    NodeAddress,
    NodeCondition,
    Route,
    Service,
    ServicePort,
)

logger = logging.getLogger(__name__)

ZONE_LABEL = "topology.kubernetes.io/zone"
REGION_LABEL = "topology.kubernetes.io/region"
INSTANCE_TYPE_LABEL = "node.kubernetes.io/instance-type"


@dataclass
class EnvironmentConfig:
    """Configuration for a test environment."""
    provider_name: str = "mock"
    cluster_name: str = "test-cluster"
    region: str = "test-region"
    zone: str = "test-zone"
    test_timeout: float = 600.0
    cleanup_resources: bool = True
    mock_external_services: bool = True
    test_data: dict[str, Any] = field(default_factory=dict)


@dataclass
class NodeConfig:
    name: str
    provider_id: str = ""
    instance_type: str = ""
    zone: str = ""
    region: str = ""
    addresses: list[NodeAddress] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    conditions: list[NodeCondition] = field(default_factory=list)


@dataclass
class ServiceConfig:
    name: str
    namespace: str = "default"
    type: str = "ClusterIP"
    ports: list[ServicePort] = field(default_factory=list)
    load_balancer_ip: str = ""
    external_traffic_policy: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class RouteConfig:
    name: str
    cluster_name: str
    target_node: str
    destination_cidr: str
    blackhole: bool = False


class TestEnvironment:
    """Provider-under-test handle shared by all callbacks of one run."""

    __test__ = False

    def __init__(self, provider: CloudProvider, config: Optional[EnvironmentConfig] = None):
        self.provider = provider
        self.config = config or EnvironmentConfig()
        self._lock = threading.Lock()
        self._nodes: dict[str, Node] = {}
        self._services: dict[str, Service] = {}
        self._routes: dict[str, Route] = {}
        self.logs: list[str] = []
        self.resource_counts: dict[str, int] = {}
        self.metrics: dict[str, Any] = {}

    @property
    def cluster_name(self) -> str:
        return self.config.cluster_name

    def setup(self) -> None:
        """Prepare the environment before any suite runs."""
        self.add_log(
            f"Test environment setup completed for provider: {self.config.provider_name}"
        )

    def teardown(self) -> None:
        """Remove tracked resources if cleanup is enabled."""
        if self.config.cleanup_resources:
            for kind, names in self.created_resources().items():
                for name in names:
                    self.add_log(f"Cleaning up {kind}: {name}")
            with self._lock:
                self._nodes.clear()
                self._services.clear()
                self._routes.clear()
        self.add_log("Test environment teardown completed")

    def reset(self) -> None:
        """Forget all tracked resources, logs and counters."""
        with self._lock:
            self._nodes.clear()
            self._services.clear()
            self._routes.clear()
            self.logs = []
            self.resource_counts = {}
            self.metrics = {}
        self.add_log("Test state reset completed")

    def add_log(self, message: str) -> None:
        logger.debug(message)
        with self._lock:
            self.logs.append(message)

    def set_metric(self, key: str, value: Any) -> None:
        with self._lock:
            self.metrics[key] = value

    def _track(self, kind: str) -> None:
        self.resource_counts[kind] = self.resource_counts.get(kind, 0) + 1

    def created_resources(self) -> dict[str, list[str]]:
        """Names of currently tracked resources, by kind."""
        with self._lock:
            return {
                "nodes": list(self._nodes),
                "services": list(self._services),
                "routes": list(self._routes),
            }

    def create_node(self, node_config: NodeConfig) -> Node:
        """Create and track a node, deriving topology labels from its config."""
        labels = dict(node_config.labels)
        if node_config.zone:
            labels[ZONE_LABEL] = node_config.zone
        if node_config.region:
            labels[REGION_LABEL] = node_config.region
        if node_config.instance_type:
            labels[INSTANCE_TYPE_LABEL] = node_config.instance_type

        node = Node(
            name=node_config.name,
            provider_id=node_config.provider_id,
            labels=labels,
            annotations=dict(node_config.annotations),
            addresses=list(node_config.addresses),
            conditions=list(node_config.conditions),
        )

        with self._lock:
            if node.name in self._nodes:
                raise ValueError(f"Test node already exists: {node.name}")
            self._nodes[node.name] = node
            self._track("nodes")

        self.add_log(f"Created test node: {node.name}")
        return node

    def get_node(self, name: str) -> Optional[Node]:
        with self._lock:
            return self._nodes.get(name)

    def delete_node(self, name: str) -> None:
        with self._lock:
            if self._nodes.pop(name, None) is None:
                raise KeyError(f"Test node not found: {name}")
        self.add_log(f"Deleted test node: {name}")

    def create_service(self, service_config: ServiceConfig) -> Service:
        service = Service(
            name=service_config.name,
            namespace=service_config.namespace,
            type=service_config.type,
            ports=list(service_config.ports),
            load_balancer_ip=service_config.load_balancer_ip,
            external_traffic_policy=service_config.external_traffic_policy,
            labels=dict(service_config.labels),
            annotations=dict(service_config.annotations),
        )

        with self._lock:
            if service.key in self._services:
                raise ValueError(f"Test service already exists: {service.key}")
            self._services[service.key] = service
            self._track("services")

        self.add_log(f"Created test service: {service.key}")
        return service

    def get_service(self, name: str, namespace: str = "default") -> Optional[Service]:
        with self._lock:
            return self._services.get(f"{namespace}/{name}")

    def delete_service(self, name: str, namespace: str = "default") -> None:
        key = f"{namespace}/{name}"
        with self._lock:
            if self._services.pop(key, None) is None:
                raise KeyError(f"Test service not found: {key}")
        self.add_log(f"Deleted test service: {key}")

    def create_route(self, route_config: RouteConfig) -> Route:
        route = Route(
            name=route_config.name,
            target_node=route_config.target_node,
            destination_cidr=route_config.destination_cidr,
            blackhole=route_config.blackhole,
        )

        with self._lock:
            self._routes[route.name] = route
            self._track("routes")

        self.add_log(f"Created test route: {route.name}")
        return route

    def delete_route(self, name: str) -> None:
        with self._lock:
            self._routes.pop(name, None)
        self.add_log(f"Deleted test route: {name}")

    def wait_for_condition(
        self,
        check: CheckFunction,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
        description: str = "condition",
    ) -> None:
        """Poll ``check`` until met; see ConditionPoller.wait."""
        ConditionPoller(interval=interval, timeout=timeout).wait(check, description)
        self.add_log(f"Condition met: {description}")
