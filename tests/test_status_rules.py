#!/usr/bin/env python3
"""
Tests for the status derivation rules
"""

import pytest

from k3s_monitor.collectors.models import ComponentHealth, HealthStatus
from k3s_monitor.collectors.status import (
    calculate_overall_status,
    degraded_message,
    derive_workload_status,
)


@pytest.mark.parametrize("ready", [0, 1, 5])
def test_nothing_desired_is_unhealthy(ready):
    assert derive_workload_status(ready, 0) == HealthStatus.UNHEALTHY


@pytest.mark.parametrize("count", [1, 2, 7])
def test_all_ready_is_healthy(count):
    assert derive_workload_status(count, count) == HealthStatus.HEALTHY


@pytest.mark.parametrize("ready,desired", [(1, 2), (2, 3), (4, 10)])
def test_partially_ready_is_degraded(ready, desired):
    assert derive_workload_status(ready, desired) == HealthStatus.DEGRADED
    assert degraded_message(ready, desired) == f"{ready}/{desired} replicas ready"


@pytest.mark.parametrize("desired", [1, 3])
def test_none_ready_is_unhealthy(desired):
    assert derive_workload_status(0, desired) == HealthStatus.UNHEALTHY


def test_rollup_of_nothing_is_unhealthy():
    assert calculate_overall_status([]) == HealthStatus.UNHEALTHY
    assert calculate_overall_status({}) == HealthStatus.UNHEALTHY


def test_any_unhealthy_wins():
    statuses = [HealthStatus.HEALTHY, HealthStatus.DEGRADED, HealthStatus.UNHEALTHY]
    assert calculate_overall_status(statuses) == HealthStatus.UNHEALTHY
    assert calculate_overall_status([HealthStatus.UNHEALTHY]) == HealthStatus.UNHEALTHY


def test_degraded_without_unhealthy():
    statuses = [HealthStatus.HEALTHY, HealthStatus.DEGRADED]
    assert calculate_overall_status(statuses) == HealthStatus.DEGRADED


def test_all_healthy():
    assert calculate_overall_status([HealthStatus.HEALTHY] * 3) == HealthStatus.HEALTHY


def test_rollup_accepts_plain_strings():
    assert calculate_overall_status(["healthy", "degraded"]) == HealthStatus.DEGRADED


def test_rollup_over_component_map():
    components = {
        "a": ComponentHealth(name="a", status=HealthStatus.HEALTHY, namespace="ns",
                             ready_replicas=1, desired_replicas=1),
        "b": ComponentHealth(name="b", status=HealthStatus.DEGRADED, namespace="ns",
                             ready_replicas=1, desired_replicas=2,
                             message="1/2 replicas ready"),
    }
    assert calculate_overall_status(components) == HealthStatus.DEGRADED
    assert calculate_overall_status(list(components.values())) == HealthStatus.DEGRADED


def test_message_rejected_on_non_degraded_component():
    with pytest.raises(ValueError):
        ComponentHealth(name="a", status=HealthStatus.HEALTHY, namespace="ns",
                        message="1/1 replicas ready")
