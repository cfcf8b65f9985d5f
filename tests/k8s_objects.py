"""
Raw Kubernetes objects and fakes shared by the tests

Objects are plain dicts shaped like ``kubectl get -o json`` items.
"""

from typing import Dict, List, Optional


def make_deployment(name: str, namespace: str, ready: Optional[int], replicas: Optional[int]) -> Dict:
    status = {} if ready is None else {"readyReplicas": ready}
    spec = {} if replicas is None else {"replicas": replicas}
    return {
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec,
        "status": status,
    }


def make_statefulset(name: str, namespace: str, ready: Optional[int], replicas: Optional[int]) -> Dict:
    return make_deployment(name, namespace, ready, replicas)


def make_daemonset(name: str, namespace: str, ready: int, desired: int) -> Dict:
    return {
        "metadata": {"name": name, "namespace": namespace},
        "status": {"numberReady": ready, "desiredNumberScheduled": desired},
    }


def make_pod(
    name: str,
    namespace: str,
    labels: Optional[Dict[str, str]] = None,
    phase: str = "Running",
    containers: Optional[List[Dict]] = None,
    created: Optional[str] = None,
) -> Dict:
    metadata = {"name": name, "namespace": namespace, "labels": labels or {}}
    if created:
        metadata["creationTimestamp"] = created
    status = {"phase": phase}
    if containers is not None:
        status["containerStatuses"] = containers
    return {"metadata": metadata, "status": status}


def make_node(
    name: str,
    ready: str = "True",
    labels: Optional[Dict[str, str]] = None,
    addresses: Optional[List[Dict]] = None,
    created: Optional[str] = None,
) -> Dict:
    metadata = {"name": name, "labels": labels or {}}
    if created:
        metadata["creationTimestamp"] = created
    return {
        "metadata": metadata,
        "status": {
            "conditions": [
                {"type": "MemoryPressure", "status": "False"},
                {"type": "Ready", "status": ready},
            ],
            "addresses": addresses if addresses is not None else [
                {"type": "Hostname", "address": name},
                {"type": "InternalIP", "address": "10.0.0.1"},
            ],
            "nodeInfo": {"osImage": "Ubuntu 22.04.4 LTS", "kernelVersion": "5.15.0-105-generic"},
        },
    }


class FakeKubectlClient:
    """Stands in for KubectlClient; counts list calls per kind"""

    def __init__(
        self,
        nodes: Optional[List[Dict]] = None,
        pods: Optional[List[Dict]] = None,
        deployments: Optional[List[Dict]] = None,
        daemonsets: Optional[List[Dict]] = None,
        statefulsets: Optional[List[Dict]] = None,
        failing: tuple = (),
    ):
        self.items = {
            "nodes": nodes or [],
            "pods": pods or [],
            "deployments": deployments or [],
            "daemonsets": daemonsets or [],
            "statefulsets": statefulsets or [],
        }
        self.failing = set(failing)
        self.calls: Dict[str, int] = {kind: 0 for kind in self.items}

    async def _list(self, kind: str) -> List[Dict]:
        self.calls[kind] += 1
        if kind in self.failing:
            raise RuntimeError(f"{kind} unavailable")
        return list(self.items[kind])

    async def get_nodes(self):
        return await self._list("nodes")

    async def get_pods(self):
        return await self._list("pods")

    async def get_deployments(self):
        return await self._list("deployments")

    async def get_daemonsets(self):
        return await self._list("daemonsets")

    async def get_statefulsets(self):
        return await self._list("statefulsets")


class ManualClock:
    """Monotonic clock advanced by hand"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
