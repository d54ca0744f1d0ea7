"""Conditions module - deadline tracking and condition polling."""

from .deadline import Deadline, current_deadline, deadline_scope
from .poller import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEOUT,
    ConditionPoller,
    PollConfig,
    wait_for_condition,
)
from .waiters import (
    wait_for_http_endpoint,
    wait_for_load_balancer_ingress,
    wait_for_node_ready,
)

__all__ = [
    "Deadline",
    "current_deadline",
    "deadline_scope",
    "DEFAULT_INTERVAL",
    "DEFAULT_TIMEOUT",
    "ConditionPoller",
    "PollConfig",
    "wait_for_condition",
    "wait_for_http_endpoint",
    "wait_for_load_balancer_ingress",
    "wait_for_node_ready",
]
