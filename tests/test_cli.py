#!/usr/bin/env python3
"""
Tests for the command line interface
"""

import json

import pytest

from k3s_monitor.cli import main as cli
from k3s_monitor.collectors.aggregator import HealthAggregator
from k3s_monitor.collectors.fetcher import ClusterDataFetcher

from k8s_objects import FakeKubectlClient, make_deployment, make_node


@pytest.fixture
def fake_cluster(monkeypatch):
    kubectl = FakeKubectlClient(
        deployments=[make_deployment("traefik", "kube-system", 1, 2)],
        nodes=[make_node("fubuki-1")],
    )
    monkeypatch.setattr(
        cli, "build_aggregator",
        lambda settings: HealthAggregator(ClusterDataFetcher(kubectl)),
    )
    return kubectl


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_check_json(fake_cluster, capsys):
    code = _exit_code(["check", "--json"])
    payload = json.loads(capsys.readouterr().out)

    assert code == 2
    assert payload["status"] == "unhealthy"
    assert payload["components"]["traefik"]["message"] == "1/2 replicas ready"
    assert payload["cluster"]["readyNodes"] == 1


def test_check_tables(fake_cluster):
    assert _exit_code(["check"]) == 2


def test_components_command(fake_cluster):
    assert _exit_code(["components"]) == 0


def test_invalid_settings_exit_code(monkeypatch):
    monkeypatch.setenv("K3S_MONITOR_CACHE_TTL", "-5")
    assert _exit_code(["components"]) == 3


def test_exit_codes_cover_every_status():
    assert sorted(cli.EXIT_CODES.values()) == [0, 1, 2]
