"""
Cluster data fetcher

Issues the read-only list calls and decodes them into typed structs.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .k8s_client import KubectlClient
from .models import NodeStatus
from .resources import (
    DaemonSet,
    Deployment,
    Node,
    Pod,
    RawWorkloadSnapshot,
    StatefulSet,
    decode_items,
)
from .status import node_status_from_resource

logger = logging.getLogger(__name__)


def _items_or_empty(result: Any, resource: str) -> List[Dict]:
    """Replace a failed list call (exception or junk) with an empty list"""
    if isinstance(result, Exception):
        logger.warning("Fetching %s failed, treating as empty: %s", resource, result)
        return []
    if not isinstance(result, list):
        logger.warning("Unexpected %s result type %s, treating as empty",
                       resource, type(result).__name__)
        return []
    return result


class ClusterDataFetcher:
    """Fetches nodes and workloads from the cluster

    Failed list calls come back as empty collections; callers treat "no
    data" the same as "resource not found".
    """

    def __init__(self, client: KubectlClient):
        self.client = client

    async def fetch_nodes(self, now: Optional[datetime] = None) -> List[NodeStatus]:
        """Node status records for every cluster node"""
        try:
            result = await self.client.get_nodes()
        except Exception as e:
            result = e
        nodes = decode_items(Node, _items_or_empty(result, "nodes"))
        return [node_status_from_resource(node, now) for node in nodes]

    async def fetch_all_workloads_and_pods(self) -> RawWorkloadSnapshot:
        """Pods, deployments, daemonsets and statefulsets of all namespaces

        The four list calls run concurrently; the snapshot is built once all
        of them have completed.
        """
        pods, deployments, daemon_sets, stateful_sets = await asyncio.gather(
            self.client.get_pods(),
            self.client.get_deployments(),
            self.client.get_daemonsets(),
            self.client.get_statefulsets(),
            return_exceptions=True,
        )

        snapshot = RawWorkloadSnapshot(
            deployments=decode_items(Deployment, _items_or_empty(deployments, "deployments")),
            daemon_sets=decode_items(DaemonSet, _items_or_empty(daemon_sets, "daemonsets")),
            stateful_sets=decode_items(StatefulSet, _items_or_empty(stateful_sets, "statefulsets")),
            pods=decode_items(Pod, _items_or_empty(pods, "pods")),
        )
        logger.debug(
            "Fetched %d pods, %d deployments, %d daemonsets, %d statefulsets",
            len(snapshot.pods),
            len(snapshot.deployments),
            len(snapshot.daemon_sets),
            len(snapshot.stateful_sets),
        )
        return snapshot
