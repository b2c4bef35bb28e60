"""
Pytest configuration and fixtures.
"""
import os
import sys
from unittest.mock import Mock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.data_models import InterfaceSet, MonitorConfig  # noqa: E402


def vector(*series):
    """Prometheus vector result from (labels, value) pairs."""
    return [{"metric": dict(labels), "value": [1700000000.0, str(value)]} for labels, value in series]


def json_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def interfaces():
    return InterfaceSet(lan="eth2", wan0="eth0", wan1="eth1")


@pytest.fixture
def config(interfaces):
    return MonitorConfig(
        interfaces=interfaces,
        prometheus_url="http://prom:9090",
        status_url="http://router:32599/status",
        timeout=2.0,
    )


@pytest.fixture
def scenario_metrics():
    """Per-query results for the example cycle: wan0 under, wan1 over its estimate."""
    return {
        "estimates": vector(({"interface": "eth0"}, 1e9), ({"interface": "eth1"}, 5e8)),
        "ip_rx": vector(
            ({"ip": "10.0.0.1"}, 4.0e8),
            ({"ip": "10.0.0.2"}, 2.5e8),
            ({"ip": "10.0.0.3"}, 1.3e8),
        ),
        "ip_tx": vector(
            ({"ip": "10.0.0.1"}, 3.7e8),
            ({"ip": "10.0.0.2"}, 0.4e8),
            ({"ip": "10.0.0.3"}, 2.0e8),
        ),
        "total_rx": vector(({"nic": "eth0"}, 4.0e8), ({"nic": "eth1"}, 3.8e8)),
        "total_tx": vector(({"nic": "eth0"}, 3.7e8), ({"nic": "eth1"}, 2.4e8)),
    }


@pytest.fixture
def scenario_status():
    return {
        "config": {"lan": "eth2", "wan0": "eth0", "wan1": "eth1"},
        "mappings": {"10.0.0.2": "wan1", "10.0.0.3": "wan1"},
    }
