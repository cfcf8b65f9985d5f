"""
Collectors - cluster health aggregation

Fetches cluster state through kubectl, joins it with the component registry
and derives one health verdict per component and for the cluster.
"""

from .k8s_client import KubectlClient
from .cache import HealthCache
from .fetcher import ClusterDataFetcher
from .registry import ComponentRegistry, DEFAULT_COMPONENTS, load_registry
from .aggregator import HealthAggregator, aggregate_components, build_component_health
from .status import (
    calculate_overall_status,
    derive_workload_status,
    format_pod_status,
)
from .models import (
    ApiResponse,
    ClusterHealth,
    ComponentConfig,
    ComponentHealth,
    HealthStatus,
    NodeStatus,
    PodStatus,
    WorkloadKind,
    WorkloadRef,
)

__all__ = [
    # K8s client
    "KubectlClient",
    "ClusterDataFetcher",
    # Cache
    "HealthCache",
    # Registry
    "ComponentRegistry",
    "DEFAULT_COMPONENTS",
    "load_registry",
    # Aggregation
    "HealthAggregator",
    "aggregate_components",
    "build_component_health",
    "calculate_overall_status",
    "derive_workload_status",
    "format_pod_status",
    # Models
    "ApiResponse",
    "ClusterHealth",
    "ComponentConfig",
    "ComponentHealth",
    "HealthStatus",
    "NodeStatus",
    "PodStatus",
    "WorkloadKind",
    "WorkloadRef",
]
