"""Cloud provider capability model.

Plain data types for the resources exchanged with a provider, and the
capability protocols a provider under test may implement. Capability lookups
return ``(capability, supported)`` tuples so tests can skip or fail cleanly
when a provider lacks a feature.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from ..errors import CapabilityNotSupportedError


class NodeAddressType(str, Enum):
    """Kinds of node addresses."""
    INTERNAL_IP = "InternalIP"
    EXTERNAL_IP = "ExternalIP"
    HOSTNAME = "Hostname"


@dataclass
class NodeAddress:
    type: NodeAddressType
    address: str


@dataclass
class NodeCondition:
    """A node status condition such as Ready=True."""
    type: str
    status: str
    reason: str = ""
    message: str = ""


@dataclass
class Node:
    name: str
    provider_id: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    addresses: list[NodeAddress] = field(default_factory=list)
    conditions: list[NodeCondition] = field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        return any(
            c.type == "Ready" and c.status == "True" for c in self.conditions
        )


@dataclass
class ServicePort:
    name: str
    port: int
    target_port: int
    protocol: str = "TCP"


@dataclass
class LoadBalancerIngress:
    ip: str = ""
    hostname: str = ""


@dataclass
class LoadBalancerStatus:
    ingress: list[LoadBalancerIngress] = field(default_factory=list)

    @property
    def has_ingress(self) -> bool:
        """Whether any ingress point has a usable IP or hostname."""
        return any(i.ip or i.hostname for i in self.ingress)


@dataclass
class Service:
    name: str
    namespace: str = "default"
    type: str = "ClusterIP"
    ports: list[ServicePort] = field(default_factory=list)
    load_balancer_ip: str = ""
    external_traffic_policy: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    load_balancer: LoadBalancerStatus = field(default_factory=LoadBalancerStatus)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class Route:
    name: str
    target_node: str
    destination_cidr: str
    blackhole: bool = False


@dataclass
class Zone:
    failure_domain: str
    region: str


class LoadBalancer(Protocol):
    def get_load_balancer(
        self, cluster_name: str, service: Service
    ) -> tuple[Optional[LoadBalancerStatus], bool]: ...

    def get_load_balancer_name(self, cluster_name: str, service: Service) -> str: ...

    def ensure_load_balancer(
        self, cluster_name: str, service: Service, nodes: list[Node]
    ) -> LoadBalancerStatus: ...

    def update_load_balancer(
        self, cluster_name: str, service: Service, nodes: list[Node]
    ) -> None: ...

    def ensure_load_balancer_deleted(self, cluster_name: str, service: Service) -> None: ...


class Instances(Protocol):
    def node_addresses(self, node_name: str) -> list[NodeAddress]: ...

    def node_addresses_by_provider_id(self, provider_id: str) -> list[NodeAddress]: ...

    def instance_id(self, node_name: str) -> str: ...

    def instance_type(self, node_name: str) -> str: ...

    def instance_type_by_provider_id(self, provider_id: str) -> str: ...

    def instance_exists_by_provider_id(self, provider_id: str) -> bool: ...

    def instance_shutdown_by_provider_id(self, provider_id: str) -> bool: ...


class Zones(Protocol):
    def get_zone(self) -> Zone: ...

    def get_zone_by_provider_id(self, provider_id: str) -> Zone: ...

    def get_zone_by_node_name(self, node_name: str) -> Zone: ...


class Routes(Protocol):
    def list_routes(self, cluster_name: str) -> list[Route]: ...

    def create_route(self, cluster_name: str, name_hint: str, route: Route) -> None: ...

    def delete_route(self, cluster_name: str, route: Route) -> None: ...


class Clusters(Protocol):
    def list_clusters(self) -> list[str]: ...

    def master(self, cluster_name: str) -> str: ...


@runtime_checkable
class CloudProvider(Protocol):
    """The provider under test."""

    def provider_name(self) -> str: ...

    def load_balancer(self) -> tuple[Optional[LoadBalancer], bool]: ...

    def instances(self) -> tuple[Optional[Instances], bool]: ...

    def zones(self) -> tuple[Optional[Zones], bool]: ...

    def routes(self) -> tuple[Optional[Routes], bool]: ...

    def clusters(self) -> tuple[Optional[Clusters], bool]: ...


CAPABILITIES = ("load_balancer", "instances", "zones", "routes", "clusters")


def require_capability(provider: CloudProvider, capability: str):
    """Look up a capability, raising if the provider does not support it.

    Args:
        provider: Provider under test.
        capability: One of CAPABILITIES.

    Returns:
        The capability implementation.

    Raises:
        CapabilityNotSupportedError: If the provider reports it unsupported.
        ValueError: If ``capability`` is not a known capability name.
    """
    if capability not in CAPABILITIES:
        raise ValueError(f"Unknown capability '{capability}'")

    impl, supported = getattr(provider, capability)()
    if not supported or impl is None:
        raise CapabilityNotSupportedError(
            capability.replace("_", " "), provider=provider.provider_name()
        )
    return impl
