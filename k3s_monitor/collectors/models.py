"""
Health monitor data models

Component configuration and the health results handed to the API layer.
JSON field names are camelCase (``readyReplicas``, ``internalIP``, ...) so
the payloads stay compatible with existing dashboard consumers.
"""

from enum import Enum
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..utils.parsers import parse_label_selector


class HealthStatus(str, Enum):
    """Three-valued health status"""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class WorkloadKind(str, Enum):
    """Workload kinds a component can be mapped to"""
    DEPLOYMENT = "deployment"
    DAEMONSET = "daemonset"
    STATEFULSET = "statefulset"


class NodeReadiness(str, Enum):
    READY = "Ready"
    NOT_READY = "NotReady"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Registry ===

class WorkloadRef(BaseModel):
    """The single workload resource that backs a component"""

    model_config = ConfigDict(frozen=True)

    kind: WorkloadKind
    name: str = Field(min_length=1)


class ComponentConfig(_CamelModel):
    """Static description of one monitored component

    Exactly one workload kind per component; ``pod_label`` is an optional
    ``key=value`` selector used to list the component's pods.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    namespace: str = Field(min_length=1)
    workload: WorkloadRef
    helm_release: Optional[str] = None
    pod_label: Optional[str] = None

    @field_validator("pod_label")
    @classmethod
    def _check_pod_label(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_label_selector(value)
        return value

    @property
    def deployment_name(self) -> Optional[str]:
        return self._name_for(WorkloadKind.DEPLOYMENT)

    @property
    def daemon_set_name(self) -> Optional[str]:
        return self._name_for(WorkloadKind.DAEMONSET)

    @property
    def stateful_set_name(self) -> Optional[str]:
        return self._name_for(WorkloadKind.STATEFULSET)

    def _name_for(self, kind: WorkloadKind) -> Optional[str]:
        return self.workload.name if self.workload.kind == kind else None

    def label_selector(self) -> Optional[Tuple[str, str]]:
        """``(key, value)`` of the pod label, or None when not configured"""
        if not self.pod_label:
            return None
        return parse_label_selector(self.pod_label)


# === Results ===

class PodStatus(_CamelModel):
    name: str
    ready: str
    status: str
    restarts: int = 0
    age: str = "unknown"


class ComponentHealth(_CamelModel):
    name: str
    status: HealthStatus
    namespace: str
    helm_release: Optional[str] = None
    ready_replicas: int = 0
    desired_replicas: int = 0
    pods: List[PodStatus] = []
    message: Optional[str] = None

    @model_validator(mode="after")
    def _message_only_when_degraded(self) -> "ComponentHealth":
        if self.status != HealthStatus.DEGRADED and self.message is not None:
            raise ValueError("message is only set for degraded components")
        return self


class NodeStatus(_CamelModel):
    name: str
    status: NodeReadiness
    roles: List[str] = []
    internal_ip: str = Field(default="unknown", alias="internalIP")
    os_image: str = "unknown"
    kernel_version: str = "unknown"
    age: str = "unknown"

    @property
    def is_ready(self) -> bool:
        return self.status == NodeReadiness.READY


class ClusterSummary(_CamelModel):
    nodes: List[NodeStatus] = []
    total_nodes: int = 0
    ready_nodes: int = 0

    @classmethod
    def from_nodes(cls, nodes: List[NodeStatus]) -> "ClusterSummary":
        return cls(
            nodes=nodes,
            total_nodes=len(nodes),
            ready_nodes=sum(1 for n in nodes if n.is_ready),
        )


class ClusterHealth(_CamelModel):
    """Top-level snapshot: fresh nodes plus cached components"""

    timestamp: str
    status: HealthStatus
    cluster: ClusterSummary
    components: Dict[str, ComponentHealth] = {}

    @property
    def healthy_components(self) -> int:
        return sum(
            1 for c in self.components.values() if c.status == HealthStatus.HEALTHY
        )


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """JSON envelope of every API response"""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    timestamp: str

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
