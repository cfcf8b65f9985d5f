"""
Kubernetes client - read-only kubectl wrapper

Lists cluster resources through ``kubectl get <kind> -o json``. Every list
call is read-only. A failing call (non-zero exit, timeout, missing binary,
unparsable output) is logged and returns an empty list, so one unreachable
resource kind never blanks out the whole dashboard.
"""

import asyncio
import json
import logging
import subprocess
from typing import Any, Dict, List, Optional

from ..utils.errors import CollectionError, MonitorErrorCode
from ..utils.retry import retry_on_k8s_error

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


class KubectlClient:
    """kubectl wrapper

    Runs kubectl through subprocess.run in a worker thread so several list
    calls can be in flight at the same time.
    """

    def __init__(
        self,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        kubectl: str = "kubectl",
        max_attempts: int = 2,
    ):
        """
        Args:
            kubeconfig: kubeconfig path (default: kubectl's own resolution)
            context: kubeconfig context (default: current-context)
            timeout: per-command timeout in seconds
            kubectl: kubectl executable
            max_attempts: attempts for timeouts and OS level failures
        """
        self.kubeconfig = kubeconfig
        self.context = context
        self.timeout = timeout
        self.kubectl = kubectl
        self.max_attempts = max_attempts
        self.kubectl_cmd = self._build_kubectl_cmd()

    def _build_kubectl_cmd(self) -> List[str]:
        """kubectl command prefix"""
        cmd = [self.kubectl]
        if self.kubeconfig:
            cmd.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    def _exec_sync(self, cmd: List[str], timeout: float) -> Dict[str, Any]:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout
            )
        except subprocess.TimeoutExpired:
            raise TimeoutError(f"Command timed out after {timeout}s")

        return {
            "returncode": result.returncode,
            "stdout": result.stdout,
            "stderr": result.stderr,
        }

    async def _exec(self, cmd: List[str], timeout: float) -> Dict[str, Any]:
        # worker thread, so the list calls of one refresh overlap
        return await asyncio.to_thread(self._exec_sync, cmd, timeout)

    async def run(self, cmd: List[str], timeout: Optional[float] = None) -> Dict:
        """
        Run a command and parse its JSON output

        Args:
            cmd: command list
            timeout: timeout in seconds (default: client timeout)

        Returns:
            {"success": bool, "data": any, "error": str, "cmd": str}
        """
        timeout = timeout or self.timeout
        execute = retry_on_k8s_error(
            max_attempts=self.max_attempts,
            exceptions=(TimeoutError, ConnectionError, OSError),
        )(self._exec)

        try:
            result = await execute(cmd, timeout)
        except TimeoutError as e:
            return {
                "success": False,
                "error": str(e),
                "code": MonitorErrorCode.TIMEOUT,
                "cmd": " ".join(cmd)
            }
        except OSError as e:
            return {
                "success": False,
                "error": str(e),
                "code": MonitorErrorCode.API_UNAVAILABLE,
                "cmd": " ".join(cmd)
            }

        if result["returncode"] != 0:
            error = result["stderr"].strip()
            code = (
                MonitorErrorCode.PERMISSION_DENIED
                if "forbidden" in error.lower()
                else MonitorErrorCode.API_ERROR
            )
            return {
                "success": False,
                "error": error or f"exit code {result['returncode']}",
                "code": code,
                "cmd": " ".join(cmd)
            }

        try:
            data = json.loads(result["stdout"])
        except json.JSONDecodeError as e:
            return {
                "success": False,
                "error": f"Invalid JSON output: {e}",
                "code": MonitorErrorCode.PARSE_ERROR,
                "cmd": " ".join(cmd)
            }

        return {"success": True, "data": data}

    async def list_resources(self, resource: str, all_namespaces: bool = True) -> List[Dict]:
        """
        List raw resource objects

        Args:
            resource: resource kind (pods, nodes, deployments, ...)
            all_namespaces: list across all namespaces (-A)

        Returns:
            ``items`` of the kubectl list response

        Raises:
            CollectionError: the call failed or returned no item list
        """
        cmd = self.kubectl_cmd + ["get", resource]
        if all_namespaces:
            cmd.append("-A")
        cmd.extend(["-o", "json"])

        result = await self.run(cmd)
        if not result["success"]:
            raise CollectionError(
                result["error"],
                resource_type=resource,
                code=result["code"],
                details={"cmd": result["cmd"]},
            )

        data = result["data"]
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise CollectionError(
                "Response has no items list",
                resource_type=resource,
                code=MonitorErrorCode.PARSE_ERROR,
            )
        return items

    async def _list_or_empty(self, resource: str, all_namespaces: bool = True) -> List[Dict]:
        try:
            return await self.list_resources(resource, all_namespaces)
        except CollectionError as e:
            logger.warning("Failed to list %s, treating as empty: %s", resource, e)
            return []

    # === Read-only list operations ===

    async def get_nodes(self) -> List[Dict]:
        """All cluster nodes (cluster scoped)"""
        return await self._list_or_empty("nodes", all_namespaces=False)

    async def get_pods(self) -> List[Dict]:
        """Pods across all namespaces"""
        return await self._list_or_empty("pods")

    async def get_deployments(self) -> List[Dict]:
        """Deployments across all namespaces"""
        return await self._list_or_empty("deployments")

    async def get_daemonsets(self) -> List[Dict]:
        """DaemonSets across all namespaces"""
        return await self._list_or_empty("daemonsets")

    async def get_statefulsets(self) -> List[Dict]:
        """StatefulSets across all namespaces"""
        return await self._list_or_empty("statefulsets")

    def __repr__(self) -> str:
        return f"KubectlClient(cmd={' '.join(self.kubectl_cmd)!r}, timeout={self.timeout}s)"
