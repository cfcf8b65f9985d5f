"""
Health aggregator

Joins one fetch cycle against the component registry and produces a
ComponentHealth per registered component.

Per component:
1. find the configured Deployment / DaemonSet / StatefulSet by (name, namespace)
2. read (ready, desired) with the kind specific field mapping; a missing
   Deployment or StatefulSet counts as one expected instance, a missing
   DaemonSet as zero
3. list member pods by the component's pod label within its namespace
4. label-only fallback: with pods but no desired count, desired = pod count
   and ready = pod count only if every pod is Running
5. derive the status, with a message for degraded components

Component results are cached for the cache TTL; nodes are always fetched
fresh.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple, Union

from ..utils.parsers import format_timestamp, utc_now
from .cache import HealthCache
from .fetcher import ClusterDataFetcher
from .models import (
    ClusterHealth,
    ClusterSummary,
    ComponentConfig,
    ComponentHealth,
    HealthStatus,
    NodeStatus,
    PodStatus,
    WorkloadKind,
)
from .k8s_client import KubectlClient
from .registry import ComponentRegistry, load_registry
from .resources import DaemonSet, Deployment, Pod, RawWorkloadSnapshot, StatefulSet
from .status import (
    calculate_overall_status,
    degraded_message,
    derive_workload_status,
    format_pod_status,
)

if TYPE_CHECKING:
    from ..config import MonitorSettings

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"

Workload = Union[Deployment, DaemonSet, StatefulSet]

# Kinds whose absence still means "one instance expected"
MISSING_WORKLOAD_DESIRED = {
    WorkloadKind.DEPLOYMENT: 1,
    WorkloadKind.STATEFULSET: 1,
    WorkloadKind.DAEMONSET: 0,
}


def group_pods_by_namespace(pods: Sequence[Pod]) -> Dict[str, List[Pod]]:
    grouped: Dict[str, List[Pod]] = defaultdict(list)
    for pod in pods:
        grouped[pod.metadata.namespace or DEFAULT_NAMESPACE].append(pod)
    return dict(grouped)


def filter_pods_by_label(pods: Sequence[Pod], key: str, value: str) -> List[Pod]:
    return [pod for pod in pods if pod.metadata.labels.get(key) == value]


def find_workload(
    snapshot: RawWorkloadSnapshot,
    config: ComponentConfig,
) -> Optional[Workload]:
    """Workload object matching the component by exact (name, namespace)"""
    candidates: Tuple[Tuple[Optional[str], Sequence[Workload]], ...] = (
        (config.deployment_name, snapshot.deployments),
        (config.daemon_set_name, snapshot.daemon_sets),
        (config.stateful_set_name, snapshot.stateful_sets),
    )
    for name, workloads in candidates:
        if name is None:
            continue
        for workload in workloads:
            if (
                workload.metadata.name == name
                and workload.metadata.namespace == config.namespace
            ):
                return workload
    return None


def replica_counts(
    snapshot: RawWorkloadSnapshot,
    config: ComponentConfig,
) -> Tuple[int, int]:
    """(ready, desired) for the component's workload"""
    workload = find_workload(snapshot, config)
    if workload is None:
        return 0, MISSING_WORKLOAD_DESIRED[config.workload.kind]
    return workload.ready_count, workload.desired_count


def build_component_health(
    config: ComponentConfig,
    snapshot: RawWorkloadSnapshot,
    pods_by_namespace: Dict[str, List[Pod]],
    now: Optional[datetime] = None,
) -> ComponentHealth:
    """Health of one component from a fetch snapshot"""
    ready_replicas, desired_replicas = replica_counts(snapshot, config)

    pods: List[PodStatus] = []
    selector = config.label_selector()
    if selector:
        key, value = selector
        namespace_pods = pods_by_namespace.get(config.namespace, [])
        pods = [
            format_pod_status(pod, now)
            for pod in filter_pods_by_label(namespace_pods, key, value)
        ]

    # Only a zero desired count is replaced by pod data
    if pods and desired_replicas == 0:
        desired_replicas = len(pods)
        if all(p.status == "Running" for p in pods):
            ready_replicas = len(pods)

    status = derive_workload_status(ready_replicas, desired_replicas)
    message = None
    if status == HealthStatus.DEGRADED:
        message = degraded_message(ready_replicas, desired_replicas)

    return ComponentHealth(
        name=config.name,
        status=status,
        namespace=config.namespace,
        helm_release=config.helm_release,
        ready_replicas=ready_replicas,
        desired_replicas=desired_replicas,
        pods=pods,
        message=message,
    )


def aggregate_components(
    registry: ComponentRegistry,
    snapshot: RawWorkloadSnapshot,
    now: Optional[datetime] = None,
) -> Dict[str, ComponentHealth]:
    """ComponentHealth per registered component, in registry order"""
    pods_by_namespace = group_pods_by_namespace(snapshot.pods)
    return {
        config.name: build_component_health(config, snapshot, pods_by_namespace, now)
        for config in registry
    }


class HealthAggregator:
    """Cluster health service

    Owns the component cache. Concurrent refreshes are collapsed into one:
    callers that waited for a running refresh reuse its result.
    """

    def __init__(
        self,
        fetcher: ClusterDataFetcher,
        registry: Optional[ComponentRegistry] = None,
        cache: Optional[HealthCache] = None,
    ):
        self.fetcher = fetcher
        self.registry = registry or ComponentRegistry()
        self.cache = cache or HealthCache()
        self._refresh_lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _lock(self) -> asyncio.Lock:
        # an asyncio.Lock belongs to one event loop; a new loop gets a new lock
        loop = asyncio.get_running_loop()
        if self._refresh_lock is None or self._lock_loop is not loop:
            self._refresh_lock = asyncio.Lock()
            self._lock_loop = loop
        return self._refresh_lock

    def get_component_names(self) -> List[str]:
        return self.registry.get_component_names()

    async def check_all_components(self) -> Dict[str, ComponentHealth]:
        """Health of every registered component, cached for the cache TTL"""
        cached = self.cache.get()
        if cached is not None:
            return cached

        async with self._lock():
            # another caller may have refreshed while we waited
            cached = self.cache.get()
            if cached is not None:
                return cached

            # the entry ages from the moment the cluster was read
            captured_at = self.cache.now()
            snapshot = await self.fetcher.fetch_all_workloads_and_pods()
            results = aggregate_components(self.registry, snapshot)
            self.cache.put(results, timestamp=captured_at)

            unhealthy = [
                name for name, health in results.items()
                if health.status != HealthStatus.HEALTHY
            ]
            logger.info(
                "Refreshed %d components (%d not healthy%s)",
                len(results),
                len(unhealthy),
                f": {', '.join(unhealthy)}" if unhealthy else "",
            )
            logger.debug("Cache stats: %s", self.cache.get_stats())
            return results

    async def check_component_by_name(self, name: str) -> Optional[ComponentHealth]:
        """Health of one component, or None when the name is not registered"""
        if name not in self.registry:
            return None
        components = await self.check_all_components()
        return components.get(name)

    async def get_nodes(self) -> List[NodeStatus]:
        """Fresh node status, never cached"""
        return await self.fetcher.fetch_nodes()

    async def get_cluster_health(self) -> ClusterHealth:
        """Fresh nodes combined with the cached component results"""
        nodes, components = await asyncio.gather(
            self.get_nodes(),
            self.check_all_components(),
        )
        return ClusterHealth(
            timestamp=format_timestamp(utc_now()),
            status=calculate_overall_status(components),
            cluster=ClusterSummary.from_nodes(nodes),
            components=components,
        )


def build_aggregator(settings: "MonitorSettings") -> HealthAggregator:
    """Wire client, fetcher, registry and cache from MonitorSettings"""
    client = KubectlClient(
        kubeconfig=settings.kubeconfig,
        context=settings.kubectl_context,
        timeout=settings.kubectl_timeout,
    )
    return HealthAggregator(
        fetcher=ClusterDataFetcher(client),
        registry=load_registry(settings.components_file),
        cache=HealthCache(ttl_seconds=settings.cache_ttl),
    )
