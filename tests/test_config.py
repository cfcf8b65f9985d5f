#!/usr/bin/env python3
"""
Tests for environment based settings
"""

import pytest

from k3s_monitor.config import MonitorSettings
from k3s_monitor.utils.errors import ConfigurationError


def test_defaults():
    settings = MonitorSettings.from_env({})

    assert settings.host == "0.0.0.0"
    assert settings.port == 3000
    assert settings.cache_ttl == 30.0
    assert settings.kubectl_context is None
    assert settings.components_file is None


def test_prefixed_variables():
    settings = MonitorSettings.from_env({
        "K3S_MONITOR_PORT": "8080",
        "K3S_MONITOR_CACHE_TTL": "60",
        "K3S_MONITOR_KUBECTL_TIMEOUT": "5.5",
        "K3S_MONITOR_KUBECTL_CONTEXT": "prod",
        "K3S_MONITOR_COMPONENTS_FILE": "/etc/k3s-monitor/components.yaml",
        "K3S_MONITOR_LOG_LEVEL": "DEBUG",
    })

    assert settings.port == 8080
    assert settings.cache_ttl == 60.0
    assert settings.kubectl_timeout == 5.5
    assert settings.kubectl_context == "prod"
    assert settings.components_file == "/etc/k3s-monitor/components.yaml"
    assert settings.log_level == "DEBUG"


def test_plain_port_and_kubeconfig():
    settings = MonitorSettings.from_env({
        "PORT": "4000",
        "KUBECONFIG": "/etc/rancher/k3s/k3s.yaml",
    })

    assert settings.port == 4000
    assert settings.kubeconfig == "/etc/rancher/k3s/k3s.yaml"


def test_prefixed_port_wins_over_plain_port():
    settings = MonitorSettings.from_env({"PORT": "4000", "K3S_MONITOR_PORT": "5000"})
    assert settings.port == 5000


def test_empty_values_are_ignored():
    assert MonitorSettings.from_env({"K3S_MONITOR_PORT": ""}).port == 3000


@pytest.mark.parametrize("environ", [
    {"K3S_MONITOR_PORT": "http"},
    {"K3S_MONITOR_PORT": "70000"},
    {"PORT": "0"},
    {"K3S_MONITOR_CACHE_TTL": "-1"},
    {"K3S_MONITOR_KUBECTL_TIMEOUT": "0"},
])
def test_invalid_values(environ):
    with pytest.raises(ConfigurationError):
        MonitorSettings.from_env(environ)
