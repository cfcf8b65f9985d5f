"""
Typed Kubernetes resource structs

Decodes the JSON returned by ``kubectl get <kind> -o json`` into pydantic
models. Only the fields the health checks read are modelled; missing, null
or wrong-typed fields fall back to zero / empty / "unknown" one by one, so a
partially filled object keeps its valid fields.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="K8sObject")


class K8sObject(BaseModel):
    """Base for all wire structs: camelCase keys, unknown keys ignored"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null behaves like an absent key so the field default applies
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_error(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        # a wrong-typed field falls back to its own default, the rest of the
        # object is kept
        try:
            return handler(value)
        except ValidationError:
            logger.debug("Defaulting malformed field %s.%s", cls.__name__, info.field_name)
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class ObjectMeta(K8sObject):
    name: str = ""
    namespace: Optional[str] = None
    labels: Dict[str, str] = {}
    creation_timestamp: Optional[datetime] = None


# === Pods ===

class ContainerStatus(K8sObject):
    name: str = ""
    ready: bool = False
    restart_count: int = 0


class PodResourceStatus(K8sObject):
    phase: str = "Unknown"
    container_statuses: List[ContainerStatus] = []


class Pod(K8sObject):
    metadata: ObjectMeta = ObjectMeta()
    status: PodResourceStatus = PodResourceStatus()


# === Workloads ===

class ReplicaSpec(K8sObject):
    replicas: int = 0


class ReplicaStatus(K8sObject):
    ready_replicas: int = 0


class Deployment(K8sObject):
    metadata: ObjectMeta = ObjectMeta()
    spec: ReplicaSpec = ReplicaSpec()
    status: ReplicaStatus = ReplicaStatus()

    @property
    def ready_count(self) -> int:
        return self.status.ready_replicas

    @property
    def desired_count(self) -> int:
        return self.spec.replicas


class StatefulSet(Deployment):
    """Same replica field mapping as a Deployment"""


class DaemonSetStatus(K8sObject):
    number_ready: int = 0
    desired_number_scheduled: int = 0


class DaemonSet(K8sObject):
    metadata: ObjectMeta = ObjectMeta()
    status: DaemonSetStatus = DaemonSetStatus()

    @property
    def ready_count(self) -> int:
        return self.status.number_ready

    @property
    def desired_count(self) -> int:
        return self.status.desired_number_scheduled


# === Nodes ===

class NodeCondition(K8sObject):
    type: str = ""
    status: str = "Unknown"


class NodeAddress(K8sObject):
    type: str = ""
    address: str = ""


class NodeSystemInfo(K8sObject):
    os_image: str = "unknown"
    kernel_version: str = "unknown"


class NodeResourceStatus(K8sObject):
    conditions: List[NodeCondition] = []
    addresses: List[NodeAddress] = []
    node_info: NodeSystemInfo = NodeSystemInfo()


class Node(K8sObject):
    metadata: ObjectMeta = ObjectMeta()
    status: NodeResourceStatus = NodeResourceStatus()


@dataclass
class RawWorkloadSnapshot:
    """All workloads and pods of one fetch cycle, across all namespaces"""

    deployments: List[Deployment] = field(default_factory=list)
    daemon_sets: List[DaemonSet] = field(default_factory=list)
    stateful_sets: List[StatefulSet] = field(default_factory=list)
    pods: List[Pod] = field(default_factory=list)


def decode_items(model: Type[T], items: Iterable[Any]) -> List[T]:
    """Decode raw list items, skipping the ones that are not objects

    Args:
        model: target struct
        items: ``items`` array of a kubectl list response

    Returns:
        decoded objects, in input order
    """
    decoded: List[T] = []
    for item in items:
        try:
            decoded.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed %s: %s", model.__name__, e.error_count()
            )
    return decoded
