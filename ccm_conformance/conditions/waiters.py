"""Specialized waits built on the condition poller.

Each waiter only decides what its check inspects; polling, deadline and
error semantics are those of ConditionPoller.
"""

import logging
from typing import Callable, Optional

import requests

from ..providers.interface import LoadBalancerStatus, Node
from .poller import ConditionPoller

logger = logging.getLogger(__name__)

DEFAULT_LB_TIMEOUT = 300.0
DEFAULT_NODE_TIMEOUT = 300.0
DEFAULT_HTTP_TIMEOUT = 60.0


def wait_for_load_balancer_ingress(
    fetch_status: Callable[[], Optional[LoadBalancerStatus]],
    timeout: float = DEFAULT_LB_TIMEOUT,
    interval: float = 5.0,
    description: str = "LoadBalancerReady",
) -> LoadBalancerStatus:
    """Wait until a load balancer exposes an ingress IP or hostname.

    Args:
        fetch_status: Returns the current status, or None if not provisioned.
        timeout: Maximum wait time in seconds.
        interval: Interval between checks in seconds.
        description: Condition name for logs and errors.

    Returns:
        The first status that had a usable ingress point.
    """
    found: list[LoadBalancerStatus] = []

    def check() -> bool:
        status = fetch_status()
        if status is not None and status.has_ingress:
            found.append(status)
            return True
        return False

    ConditionPoller(interval=interval, timeout=timeout).wait(check, description)
    return found[-1]


def wait_for_node_ready(
    fetch_node: Callable[[], Optional[Node]],
    timeout: float = DEFAULT_NODE_TIMEOUT,
    interval: float = 5.0,
    description: str = "NodeReady",
) -> Node:
    """Wait until a node reports a Ready=True condition.

    Args:
        fetch_node: Returns the current node, or None if it does not exist yet.
        timeout: Maximum wait time in seconds.
        interval: Interval between checks in seconds.
        description: Condition name for logs and errors.

    Returns:
        The node once it is ready.
    """
    found: list[Node] = []

    def check() -> bool:
        node = fetch_node()
        if node is not None and node.is_ready:
            found.append(node)
            return True
        return False

    ConditionPoller(interval=interval, timeout=timeout).wait(check, description)
    return found[-1]


def wait_for_http_endpoint(
    url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    interval: float = 2.0,
    request_timeout: float = 5.0,
    session: Optional[requests.Session] = None,
) -> int:
    """Wait until an HTTP endpoint answers with a non-5xx status.

    Connection failures and request timeouts mean "not reachable yet";
    any other request error is terminal.

    Args:
        url: Endpoint to check, e.g. the load balancer ingress address.
        timeout: Maximum wait time in seconds.
        interval: Interval between checks in seconds.
        request_timeout: Per-request timeout in seconds.
        session: HTTP session to reuse. A private one is created otherwise.

    Returns:
        The HTTP status code of the first successful response.
    """
    own_session = session is None
    http = session or requests.Session()
    codes: list[int] = []

    def check() -> bool:
        try:
            response = http.get(url, timeout=request_timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.debug("Endpoint %s not reachable yet: %s", url, e)
            return False

        if response.status_code < 500:
            codes.append(response.status_code)
            return True
        return False

    try:
        ConditionPoller(interval=interval, timeout=timeout).wait(
            check, description=f"HTTPEndpointReachable {url}"
        )
    finally:
        if own_session:
            http.close()

    return codes[-1]
