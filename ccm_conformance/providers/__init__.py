"""Providers module - provider capability model, test environment, mock."""

from .environment import (
    EnvironmentConfig,
    NodeConfig,
    RouteConfig,
    ServiceConfig,
    TestEnvironment,
)
from .interface import (
    CAPABILITIES,
    CloudProvider,
    LoadBalancerIngress,
    LoadBalancerStatus,
    Node,
    NodeAddress,
    NodeAddressType,
    NodeCondition,
    Route,
    Service,
    ServicePort,
    Zone,
    require_capability,
)
from .mock import MockCloudProvider

PROVIDERS = {
    "mock": MockCloudProvider,
}


def create_provider(name: str) -> CloudProvider:
    """Create a provider by its CLI name.

    Raises:
        ValueError: If the provider is not supported.
    """
    factory = PROVIDERS.get(name.lower())
    if factory is None:
        raise ValueError(f"unsupported cloud provider: {name}")
    return factory()


__all__ = [
    "EnvironmentConfig",
    "NodeConfig",
    "RouteConfig",
    "ServiceConfig",
    "TestEnvironment",
    "CAPABILITIES",
    "CloudProvider",
    "LoadBalancerIngress",
    "LoadBalancerStatus",
    "Node",
    "NodeAddress",
    "NodeAddressType",
    "NodeCondition",
    "Route",
    "Service",
    "ServicePort",
    "Zone",
    "require_capability",
    "MockCloudProvider",
    "PROVIDERS",
    "create_provider",
]
