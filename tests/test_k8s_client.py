#!/usr/bin/env python3
"""
Tests for the kubectl client: command building and failure handling
"""

import asyncio
import json

import pytest

from k3s_monitor.collectors.k8s_client import KubectlClient
from k3s_monitor.utils.errors import CollectionError, MonitorErrorCode


def _stub_exec(client, returncode=0, stdout="", stderr="", raises=None):
    """Replace the subprocess call; records every command"""
    calls = []

    async def fake_exec(cmd, timeout):
        calls.append(cmd)
        if raises is not None:
            raise raises
        return {"returncode": returncode, "stdout": stdout, "stderr": stderr}

    client._exec = fake_exec
    return calls


def test_command_prefix():
    assert KubectlClient().kubectl_cmd == ["kubectl"]

    client = KubectlClient(kubeconfig="/etc/rancher/k3s/k3s.yaml", context="prod")
    assert client.kubectl_cmd == [
        "kubectl", "--kubeconfig", "/etc/rancher/k3s/k3s.yaml", "--context", "prod",
    ]


def test_list_commands():
    client = KubectlClient(context="prod")
    calls = _stub_exec(client, stdout=json.dumps({"items": []}))

    asyncio.run(client.get_pods())
    asyncio.run(client.get_nodes())

    assert calls[0] == ["kubectl", "--context", "prod", "get", "pods", "-A", "-o", "json"]
    assert calls[1] == ["kubectl", "--context", "prod", "get", "nodes", "-o", "json"]


def test_items_returned():
    client = KubectlClient()
    items = [{"metadata": {"name": "traefik", "namespace": "kube-system"}}]
    _stub_exec(client, stdout=json.dumps({"kind": "List", "items": items}))

    assert asyncio.run(client.get_deployments()) == items


def test_nonzero_exit_is_empty():
    client = KubectlClient()
    _stub_exec(client, returncode=1, stderr="The connection to the server was refused")

    assert asyncio.run(client.get_statefulsets()) == []


def test_forbidden_maps_to_permission_denied():
    client = KubectlClient()
    _stub_exec(client, returncode=1,
               stderr='Error from server (Forbidden): daemonsets.apps is forbidden')

    with pytest.raises(CollectionError) as exc:
        asyncio.run(client.list_resources("daemonsets"))
    assert exc.value.code == MonitorErrorCode.PERMISSION_DENIED
    assert exc.value.details["resource_type"] == "daemonsets"


def test_invalid_json_is_empty():
    client = KubectlClient()
    _stub_exec(client, stdout="this is not json")

    result = asyncio.run(client.run(["kubectl", "get", "pods"]))
    assert result["success"] is False
    assert result["code"] == MonitorErrorCode.PARSE_ERROR
    assert asyncio.run(client.get_pods()) == []


def test_missing_items_is_empty():
    client = KubectlClient()
    _stub_exec(client, stdout=json.dumps({"kind": "Status"}))

    assert asyncio.run(client.get_daemonsets()) == []


def test_timeout_is_empty():
    client = KubectlClient(max_attempts=1)
    calls = _stub_exec(client, raises=TimeoutError("Command timed out after 15.0s"))

    result = asyncio.run(client.run(["kubectl", "get", "nodes"]))
    assert result["code"] == MonitorErrorCode.TIMEOUT
    assert asyncio.run(client.get_nodes()) == []
    assert len(calls) == 2


def test_timeouts_are_retried():
    client = KubectlClient(max_attempts=2)
    calls = _stub_exec(client, raises=TimeoutError("Command timed out after 15.0s"))

    assert asyncio.run(client.get_pods()) == []
    assert len(calls) == 2


def test_missing_binary_is_empty():
    client = KubectlClient(kubectl="/nonexistent/bin/kubectl", max_attempts=1)

    result = asyncio.run(client.run(client.kubectl_cmd + ["get", "pods"]))
    assert result["code"] == MonitorErrorCode.API_UNAVAILABLE
    assert asyncio.run(client.get_pods()) == []
