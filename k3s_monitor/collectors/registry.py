"""
Component registry

Ordered, read-only list of the components the monitor checks. Adding a
component means adding an entry here (or to a YAML registry file), the
aggregation logic stays generic over the workload kind.

YAML format (keys match the JSON field names)::

    components:
      - name: traefik
        namespace: kube-system
        deploymentName: traefik
        helmRelease: traefik
        podLabel: app.kubernetes.io/name=traefik
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..utils.errors import ConfigurationError
from .models import ComponentConfig, WorkloadKind, WorkloadRef

logger = logging.getLogger(__name__)


# Registry keys naming the workload resource, per kind
WORKLOAD_KEYS: Dict[str, WorkloadKind] = {
    "deploymentName": WorkloadKind.DEPLOYMENT,
    "daemonSetName": WorkloadKind.DAEMONSET,
    "statefulSetName": WorkloadKind.STATEFULSET,
}


def _component(
    name: str,
    namespace: str,
    kind: WorkloadKind,
    workload: str,
    helm_release: Optional[str] = None,
    pod_label: Optional[str] = None,
) -> ComponentConfig:
    return ComponentConfig(
        name=name,
        namespace=namespace,
        workload=WorkloadRef(kind=kind, name=workload),
        helm_release=helm_release,
        pod_label=pod_label,
    )


DEFAULT_COMPONENTS: Tuple[ComponentConfig, ...] = (
    _component("hetzner-csi", "kube-system", WorkloadKind.DAEMONSET,
               "hcloud-csi-node", helm_release="hcloud-csi"),
    _component("juicefs", "kube-system", WorkloadKind.DAEMONSET,
               "juicefs-csi-node", helm_release="juicefs-csi-driver"),
    _component("traefik", "kube-system", WorkloadKind.DEPLOYMENT,
               "traefik", helm_release="traefik",
               pod_label="app.kubernetes.io/name=traefik"),
    _component("cert-manager", "cert-manager", WorkloadKind.DEPLOYMENT,
               "cert-manager", helm_release="cert-manager",
               pod_label="app.kubernetes.io/name=cert-manager"),
    _component("mongodb", "database", WorkloadKind.STATEFULSET,
               "mongodb-ha", helm_release="mongodb-ha",
               pod_label="app.kubernetes.io/component=mongodb"),
    _component("valkey", "database", WorkloadKind.STATEFULSET,
               "valkey-ha-node", helm_release="valkey-ha",
               pod_label="app.kubernetes.io/name=valkey"),
)


class ComponentRegistry:
    """Ordered collection of component configs

    Registration order is the iteration and display order. Names are unique.
    """

    def __init__(self, components: Iterable[ComponentConfig] = DEFAULT_COMPONENTS):
        self._components: Tuple[ComponentConfig, ...] = tuple(components)
        self._by_name: Dict[str, ComponentConfig] = {}

        for config in self._components:
            if config.name in self._by_name:
                raise ConfigurationError(
                    f"Duplicate component name: {config.name}",
                    field="name",
                    value=config.name,
                )
            self._by_name[config.name] = config

    @property
    def components(self) -> Tuple[ComponentConfig, ...]:
        return self._components

    def get(self, name: str) -> Optional[ComponentConfig]:
        return self._by_name.get(name)

    def get_component_names(self) -> List[str]:
        """Component names in registration order"""
        return [c.name for c in self._components]

    def __iter__(self) -> Iterator[ComponentConfig]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"ComponentRegistry({', '.join(self.get_component_names())})"


def component_from_dict(entry: Dict) -> ComponentConfig:
    """Build a ComponentConfig from a registry entry

    Raises:
        ConfigurationError: entry is not a mapping, names zero or several
            workload kinds, or fails validation
    """
    if not isinstance(entry, dict):
        raise ConfigurationError("Component entry must be a mapping", value=entry)

    name = entry.get("name")
    workload_keys = [key for key in WORKLOAD_KEYS if entry.get(key)]
    if len(workload_keys) != 1:
        raise ConfigurationError(
            "Component must name exactly one of "
            f"{', '.join(WORKLOAD_KEYS)}",
            field="name",
            value=name,
        )

    key = workload_keys[0]
    try:
        return ComponentConfig(
            name=name,
            namespace=entry.get("namespace"),
            workload=WorkloadRef(kind=WORKLOAD_KEYS[key], name=entry[key]),
            helm_release=entry.get("helmRelease"),
            pod_label=entry.get("podLabel"),
        )
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid component entry: {e.errors()[0]['msg']}",
            field="name",
            value=name,
        ) from e


def load_registry(path: Optional[Union[str, Path]] = None) -> ComponentRegistry:
    """Load the registry from a YAML file, or the built-in defaults

    Args:
        path: YAML file with a top-level ``components`` list (optional)

    Raises:
        ConfigurationError: unreadable file or invalid entries
    """
    if path is None:
        return ComponentRegistry(DEFAULT_COMPONENTS)

    path = Path(path)
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot read component registry: {e}",
            details={"path": str(path)},
        ) from e

    entries = document.get("components") if isinstance(document, dict) else None
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(
            "Component registry needs a non-empty 'components' list",
            details={"path": str(path)},
        )

    registry = ComponentRegistry(component_from_dict(entry) for entry in entries)
    logger.info("Loaded %d components from %s", len(registry), path)
    return registry
