"""
Status derivation

Pure functions that turn replica counts, pods and nodes into health values:

- derive_workload_status: (ready, desired) -> healthy / degraded / unhealthy
- calculate_overall_status: roll-up over many statuses
- format_pod_status / node_status_from_resource: display records
"""

from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Union

from ..utils.parsers import format_age
from .models import (
    ComponentHealth,
    HealthStatus,
    NodeReadiness,
    NodeStatus,
    PodStatus,
)
from .resources import Node, NodeAddress, Pod


# Node role labels, checked in this order
ROLE_LABELS = (
    ("node-role.kubernetes.io/master", "master"),
    ("node-role.kubernetes.io/control-plane", "control-plane"),
    ("node-role.kubernetes.io/worker", "worker"),
)
HOSTNAME_LABEL = "kubernetes.io/hostname"
DEFAULT_ROLES = ["worker"]

STARTING = "Starting"


def derive_workload_status(ready: int, desired: int) -> HealthStatus:
    """Health of a workload from its replica counts

    Every registered component is expected to run at least one instance, so
    ``desired == 0`` counts as unhealthy.
    """
    if desired == 0:
        return HealthStatus.UNHEALTHY
    if ready == desired:
        return HealthStatus.HEALTHY
    if ready > 0:
        return HealthStatus.DEGRADED
    return HealthStatus.UNHEALTHY


def degraded_message(ready: int, desired: int) -> str:
    return f"{ready}/{desired} replicas ready"


StatusLike = Union[HealthStatus, ComponentHealth]


def calculate_overall_status(
    statuses: Union[Iterable[StatusLike], Mapping[str, ComponentHealth]]
) -> HealthStatus:
    """Roll several statuses up into one

    - nothing to roll up -> unhealthy
    - any unhealthy -> unhealthy
    - any degraded, or anything not healthy -> degraded
    - otherwise healthy

    Args:
        statuses: HealthStatus values, ComponentHealth objects, or a
            name -> ComponentHealth mapping
    """
    if isinstance(statuses, Mapping):
        statuses = statuses.values()

    values = [
        s.status if isinstance(s, ComponentHealth) else HealthStatus(s)
        for s in statuses
    ]
    if not values:
        return HealthStatus.UNHEALTHY

    if HealthStatus.UNHEALTHY in values:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in values or not all(
        v == HealthStatus.HEALTHY for v in values
    ):
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


def format_pod_status(pod: Pod, now: Optional[datetime] = None) -> PodStatus:
    """Display record for one pod

    ``ready`` is the ready/total container ratio ("0/0" without container
    statuses). A Running pod with no ready container is shown as Starting.
    """
    containers = pod.status.container_statuses
    ready_count = sum(1 for c in containers if c.ready)
    ready = f"{ready_count}/{len(containers)}"
    restarts = sum(c.restart_count for c in containers)

    phase = pod.status.phase
    status = phase
    if phase == "Running" and ready.startswith("0/"):
        status = STARTING

    return PodStatus(
        name=pod.metadata.name or "unknown",
        ready=ready,
        status=status,
        restarts=restarts,
        age=format_age(pod.metadata.creation_timestamp, now),
    )


def extract_roles(labels: Mapping[str, str]) -> List[str]:
    roles = [role for label, role in ROLE_LABELS if labels.get(label) == "true"]
    hostname = labels.get(HOSTNAME_LABEL)
    if hostname:
        roles.append(hostname)
    return roles or list(DEFAULT_ROLES)


def get_node_ip(addresses: Iterable[NodeAddress]) -> str:
    for address in addresses:
        if address.type == "InternalIP":
            return address.address or "unknown"
    return "unknown"


def is_node_ready(node: Node) -> bool:
    return any(
        c.type == "Ready" and c.status == "True" for c in node.status.conditions
    )


def node_status_from_resource(node: Node, now: Optional[datetime] = None) -> NodeStatus:
    info = node.status.node_info
    return NodeStatus(
        name=node.metadata.name or "unknown",
        status=NodeReadiness.READY if is_node_ready(node) else NodeReadiness.NOT_READY,
        roles=extract_roles(node.metadata.labels),
        internal_ip=get_node_ip(node.status.addresses),
        os_image=info.os_image,
        kernel_version=info.kernel_version,
        age=format_age(node.metadata.creation_timestamp, now),
    )
