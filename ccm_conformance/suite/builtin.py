"""Built-in conformance suites for the cloud provider capability set.

Every test receives a TestEnvironment and raises on failure. Suites are
built by factories so each run gets fresh, unshared definitions.
"""

import time
from typing import Callable

from ..conditions.waiters import wait_for_http_endpoint, wait_for_load_balancer_ingress
from ..providers.environment import NodeConfig, RouteConfig, ServiceConfig, TestEnvironment
from ..providers.interface import (
    Node,
    NodeAddress,
    NodeAddressType,
    Route,
    Service,
    ServicePort,
    require_capability,
)
from .schema import Test, TestSuite

MINUTE = 60.0

HTTP_PORT = ServicePort(name="http", port=80, target_port=8080)
HTTPS_PORT = ServicePort(name="https", port=443, target_port=8443)


def _mock_nodes() -> list[Node]:
    return [
        Node(
            name="mock-node-1",
            addresses=[NodeAddress(NodeAddressType.INTERNAL_IP, "10.0.0.1")],
        )
    ]


def _node_config(name: str, *addresses: NodeAddress) -> NodeConfig:
    return NodeConfig(
        name=name,
        provider_id=f"test-provider://{name}",
        instance_type="test-instance-type",
        zone="test-zone",
        region="test-region",
        addresses=list(addresses),
    )


def _with_test_node(env: TestEnvironment, config: NodeConfig, check: Callable[[Node], None]) -> None:
    node = env.create_node(config)
    try:
        check(node)
    finally:
        env.delete_node(node.name)


# -- LoadBalancer -----------------------------------------------------------

def setup_load_balancer_suite(env: TestEnvironment) -> None:
    env.create_node(_node_config(
        "test-node-1",
        NodeAddress(NodeAddressType.INTERNAL_IP, "10.0.0.1"),
        NodeAddress(NodeAddressType.EXTERNAL_IP, "192.168.1.1"),
    ))


def teardown_load_balancer_suite(env: TestEnvironment) -> None:
    env.delete_node("test-node-1")


def check_create_load_balancer(env: TestEnvironment) -> None:
    lb = require_capability(env.provider, "load_balancer")
    service = env.create_service(ServiceConfig(
        name="test-loadbalancer",
        type="LoadBalancer",
        ports=[HTTP_PORT],
        external_traffic_policy="Cluster",
    ))

    status = lb.ensure_load_balancer(env.cluster_name, service, _mock_nodes())
    if status is None or not status.ingress:
        raise AssertionError("load balancer status is empty")

    env.add_log(f"Load balancer created successfully with {len(status.ingress)} ingress addresses")


def check_update_load_balancer(env: TestEnvironment) -> None:
    lb = require_capability(env.provider, "load_balancer")
    service = Service(
        name="test-loadbalancer",
        type="LoadBalancer",
        ports=[HTTP_PORT, HTTPS_PORT],
    )

    lb.ensure_load_balancer(env.cluster_name, service, _mock_nodes())
    lb.update_load_balancer(env.cluster_name, service, _mock_nodes())
    env.add_log("Load balancer updated successfully")


def check_delete_load_balancer(env: TestEnvironment) -> None:
    lb = require_capability(env.provider, "load_balancer")
    service = Service(name="test-loadbalancer", type="LoadBalancer")

    lb.ensure_load_balancer_deleted(env.cluster_name, service)
    env.add_log("Load balancer deleted successfully")


def check_load_balancer_status(env: TestEnvironment) -> None:
    lb = require_capability(env.provider, "load_balancer")
    service = env.create_service(ServiceConfig(
        name="status-test-lb",
        type="LoadBalancer",
        ports=[HTTP_PORT],
    ))

    lb.ensure_load_balancer(env.cluster_name, service, _mock_nodes())

    def fetch_status():
        status, exists = lb.get_load_balancer(env.cluster_name, service)
        return status if exists else None

    started = time.monotonic()
    status = wait_for_load_balancer_ingress(fetch_status, timeout=2 * MINUTE)
    env.set_metric("load_balancer_ready_seconds", time.monotonic() - started)

    if not env.config.mock_external_services:
        ingress = next(i for i in status.ingress if i.ip or i.hostname)
        url = f"http://{ingress.ip or ingress.hostname}:{HTTP_PORT.port}/"
        code = wait_for_http_endpoint(url, timeout=MINUTE)
        env.add_log(f"Load balancer endpoint {url} answered with HTTP {code}")

    lb.ensure_load_balancer_deleted(env.cluster_name, service)
    env.add_log("Load balancer status test completed successfully")


def check_load_balancer_health_check(env: TestEnvironment) -> None:
    # Health check semantics are provider specific
    env.add_log("Load balancer health check test completed")


def cleanup_load_balancer_service(env: TestEnvironment) -> None:
    if env.get_service("test-loadbalancer") is not None:
        env.delete_service("test-loadbalancer")


def cleanup_status_service(env: TestEnvironment) -> None:
    if env.get_service("status-test-lb") is not None:
        env.delete_service("status-test-lb")


def create_load_balancer_suite() -> TestSuite:
    return TestSuite(
        name="LoadBalancer",
        description="Tests for cloud provider load balancer functionality",
        setup=setup_load_balancer_suite,
        teardown=teardown_load_balancer_suite,
        tests=[
            Test(
                name="CreateLoadBalancer",
                description="Test creating a load balancer",
                run=check_create_load_balancer,
                cleanup=cleanup_load_balancer_service,
                timeout=5 * MINUTE,
            ),
            Test(
                name="UpdateLoadBalancer",
                description="Test updating a load balancer",
                run=check_update_load_balancer,
                timeout=5 * MINUTE,
            ),
            Test(
                name="DeleteLoadBalancer",
                description="Test deleting a load balancer",
                run=check_delete_load_balancer,
                timeout=5 * MINUTE,
            ),
            Test(
                name="LoadBalancerStatus",
                description="Test load balancer status updates",
                run=check_load_balancer_status,
                cleanup=cleanup_status_service,
                timeout=3 * MINUTE,
            ),
            Test(
                name="LoadBalancerHealthCheck",
                description="Test load balancer health check functionality",
                run=check_load_balancer_health_check,
                timeout=3 * MINUTE,
            ),
        ],
    )


# -- NodeManagement ---------------------------------------------------------

def check_node_initialization(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")

    def check(node: Node) -> None:
        provider_id = instances.instance_id(node.name)
        if not provider_id:
            raise AssertionError("provider ID is empty")
        env.add_log(f"Node initialization test completed. Provider ID: {provider_id}")

    _with_test_node(env, _node_config(
        "init-test-node",
        NodeAddress(NodeAddressType.INTERNAL_IP, "10.0.0.3"),
        NodeAddress(NodeAddressType.EXTERNAL_IP, "192.168.1.3"),
    ), check)


def check_node_addresses(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")

    def check(node: Node) -> None:
        addresses = instances.node_addresses(node.name)
        if not addresses:
            raise AssertionError("no addresses returned for node")
        env.add_log(f"Node addresses test completed. Found {len(addresses)} addresses")

    _with_test_node(env, _node_config(
        "address-test-node",
        NodeAddress(NodeAddressType.INTERNAL_IP, "10.0.0.4"),
        NodeAddress(NodeAddressType.EXTERNAL_IP, "192.168.1.4"),
    ), check)


def check_node_provider_id(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")

    def check(node: Node) -> None:
        provider_id = instances.instance_id(node.name)
        if not provider_id:
            raise AssertionError("provider ID is empty")
        env.add_log(f"Provider ID test completed. Provider ID: {provider_id}")

    _with_test_node(env, _node_config("providerid-test-node"), check)


def check_node_instance_type(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")

    def check(node: Node) -> None:
        instance_type = instances.instance_type(node.name)
        if not instance_type:
            raise AssertionError("instance type is empty")
        env.add_log(f"Instance type test completed. Instance type: {instance_type}")

    _with_test_node(env, _node_config("instancetype-test-node"), check)


def check_node_zones(env: TestEnvironment) -> None:
    zones = require_capability(env.provider, "zones")

    def check(node: Node) -> None:
        zone = zones.get_zone()
        if not zone.region:
            raise AssertionError("zone region is empty")
        env.add_log(f"Zones test completed. Region: {zone.region}, Zone: {zone.failure_domain}")

    _with_test_node(env, _node_config("zones-test-node"), check)


def create_node_suite() -> TestSuite:
    return TestSuite(
        name="NodeManagement",
        description="Tests for cloud provider node management functionality",
        tests=[
            Test(
                name="NodeInitialization",
                description="Test node initialization and registration",
                run=check_node_initialization,
                timeout=3 * MINUTE,
            ),
            Test(
                name="NodeAddresses",
                description="Test node address management",
                run=check_node_addresses,
                timeout=2 * MINUTE,
            ),
            Test(
                name="NodeProviderID",
                description="Test node provider ID management",
                run=check_node_provider_id,
                timeout=2 * MINUTE,
            ),
            Test(
                name="NodeInstanceType",
                description="Test node instance type detection",
                run=check_node_instance_type,
                timeout=2 * MINUTE,
            ),
            Test(
                name="NodeZones",
                description="Test node zone management",
                run=check_node_zones,
                timeout=2 * MINUTE,
            ),
        ],
    )


# -- RouteManagement --------------------------------------------------------

TEST_ROUTE = RouteConfig(
    name="test-route",
    cluster_name="test-cluster",
    target_node="route-test-node",
    destination_cidr="10.0.0.0/24",
)


def setup_route_suite(env: TestEnvironment) -> None:
    env.create_node(_node_config(
        "route-test-node",
        NodeAddress(NodeAddressType.INTERNAL_IP, "10.0.0.2"),
    ))


def teardown_route_suite(env: TestEnvironment) -> None:
    env.delete_node("route-test-node")


def check_create_route(env: TestEnvironment) -> None:
    routes = require_capability(env.provider, "routes")
    route = env.create_route(TEST_ROUTE)
    routes.create_route(env.cluster_name, route.name, route)
    env.add_log("Route created successfully")


def check_delete_route(env: TestEnvironment) -> None:
    routes = require_capability(env.provider, "routes")
    route = Route(
        name=TEST_ROUTE.name,
        target_node=TEST_ROUTE.target_node,
        destination_cidr=TEST_ROUTE.destination_cidr,
    )
    routes.delete_route(env.cluster_name, route)
    env.delete_route(route.name)
    env.add_log("Route deleted successfully")


def check_list_routes(env: TestEnvironment) -> None:
    routes = require_capability(env.provider, "routes")
    route_list = routes.list_routes(env.cluster_name)
    env.add_log(f"Listed {len(route_list)} routes")


def create_route_suite() -> TestSuite:
    return TestSuite(
        name="RouteManagement",
        description="Tests for cloud provider route management functionality",
        setup=setup_route_suite,
        teardown=teardown_route_suite,
        tests=[
            Test(
                name="CreateRoute",
                description="Test creating a route",
                run=check_create_route,
                timeout=3 * MINUTE,
            ),
            Test(
                name="DeleteRoute",
                description="Test deleting a route",
                run=check_delete_route,
                timeout=3 * MINUTE,
            ),
            Test(
                name="ListRoutes",
                description="Test listing routes",
                run=check_list_routes,
                timeout=2 * MINUTE,
            ),
        ],
    )


# -- Instances --------------------------------------------------------------

def check_instance_exists(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")
    exists = instances.instance_exists_by_provider_id("test-provider://test-node")
    env.add_log(f"Instance exists check completed. Exists: {exists}")


def check_instance_shutdown(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")
    shutdown = instances.instance_shutdown_by_provider_id("test-provider://test-node")
    env.add_log(f"Instance shutdown check completed. Shutdown: {shutdown}")


def check_instance_metadata(env: TestEnvironment) -> None:
    instances = require_capability(env.provider, "instances")
    instance_id = instances.instance_id("test-node")
    env.add_log(f"Instance ID retrieved: {instance_id}")


def create_instances_suite() -> TestSuite:
    return TestSuite(
        name="Instances",
        description="Tests for cloud provider instances functionality",
        tests=[
            Test(
                name="InstanceExists",
                description="Test instance existence check",
                run=check_instance_exists,
                timeout=2 * MINUTE,
            ),
            Test(
                name="InstanceShutdown",
                description="Test instance shutdown detection",
                run=check_instance_shutdown,
                timeout=2 * MINUTE,
            ),
            Test(
                name="InstanceMetadata",
                description="Test instance metadata retrieval",
                run=check_instance_metadata,
                timeout=2 * MINUTE,
            ),
        ],
    )


# -- Zones ------------------------------------------------------------------

def check_get_zone(env: TestEnvironment) -> None:
    zones = require_capability(env.provider, "zones")
    zone = zones.get_zone()
    env.add_log(f"Zone retrieved. Region: {zone.region}, Zone: {zone.failure_domain}")


def check_get_zone_by_provider_id(env: TestEnvironment) -> None:
    zones = require_capability(env.provider, "zones")
    zone = zones.get_zone_by_provider_id("test-provider://test-node")
    env.add_log(
        f"Zone by provider ID retrieved. Region: {zone.region}, Zone: {zone.failure_domain}"
    )


def create_zones_suite() -> TestSuite:
    return TestSuite(
        name="Zones",
        description="Tests for cloud provider zones functionality",
        tests=[
            Test(
                name="GetZone",
                description="Test zone information retrieval",
                run=check_get_zone,
                timeout=2 * MINUTE,
            ),
            Test(
                name="GetZoneByProviderID",
                description="Test zone retrieval by provider ID",
                run=check_get_zone_by_provider_id,
                timeout=2 * MINUTE,
            ),
        ],
    )


# -- Clusters ---------------------------------------------------------------

def check_list_clusters(env: TestEnvironment) -> None:
    clusters = require_capability(env.provider, "clusters")
    cluster_list = clusters.list_clusters()
    env.add_log(f"Listed {len(cluster_list)} clusters")


def check_master(env: TestEnvironment) -> None:
    clusters = require_capability(env.provider, "clusters")
    master = clusters.master(env.cluster_name)
    env.add_log(f"Master node: {master}")


def create_clusters_suite() -> TestSuite:
    return TestSuite(
        name="Clusters",
        description="Tests for cloud provider clusters functionality",
        tests=[
            Test(
                name="ListClusters",
                description="Test listing clusters",
                run=check_list_clusters,
                timeout=2 * MINUTE,
            ),
            Test(
                name="Master",
                description="Test master node detection",
                run=check_master,
                timeout=2 * MINUTE,
            ),
        ],
    )


SUITE_FACTORIES: dict[str, Callable[[], TestSuite]] = {
    "loadbalancer": create_load_balancer_suite,
    "nodes": create_node_suite,
    "routes": create_route_suite,
    "instances": create_instances_suite,
    "zones": create_zones_suite,
    "clusters": create_clusters_suite,
}


def build_suites(name: str = "all") -> list[TestSuite]:
    """Build the suites selected by name, or every suite for "all".

    Raises:
        ValueError: If the suite name is unknown.
    """
    key = name.lower()
    if key == "all":
        return [factory() for factory in SUITE_FACTORIES.values()]

    factory = SUITE_FACTORIES.get(key)
    if factory is None:
        raise ValueError(f"unknown test suite: {name}")
    return [factory()]
