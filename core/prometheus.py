# ==============================================================================
# FILE: core/prometheus.py
# PURPOSE: Thin client for the Prometheus instant-query HTTP API.
# ==============================================================================
import threading
from typing import Any, Dict, List, Optional

import requests

from .data_models import (
    DEFAULT_TIMEOUT, PrometheusQueryError, PrometheusUnavailableError
)

ESTIMATE_METRIC = "tcp_traffic_scan_tcp_bandwidth_avg_bps"
IP_RATE_METRIC = "network_ip_{direction}_bps"
NIC_TOTAL_METRIC = "network_ip_{direction}_bps_total"


def estimate_query() -> str:
    return f"max by (interface) ({ESTIMATE_METRIC})"


def ip_rate_query(direction: str) -> str:
    return f"sum by (ip) ({IP_RATE_METRIC.format(direction=direction)})"


def nic_total_query(direction: str) -> str:
    return f"sum by (nic) ({NIC_TOTAL_METRIC.format(direction=direction)})"


class PrometheusClient:
    """Runs instant queries and returns the raw vector result list."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None, debug: bool = False):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self._session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The injected session, else one session per calling thread."""
        if self._session is not None:
            return self._session
        if not hasattr(self._local, "session"):
            self._local.session = requests.Session()
        return self._local.session

    def query(self, expr: str, at: Optional[float] = None) -> List[Dict[str, Any]]:
        params = {"query": expr}
        if at is not None:
            params["time"] = f"{at:.3f}"
        if self.debug:
            print(f"[Prometheus] Query: {expr}")

        try:
            response = self.session.get(
                f"{self.base_url}/api/v1/query", params=params, timeout=self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise PrometheusUnavailableError(f"Cannot reach Prometheus at {self.base_url}: {e}") from e
        except requests.RequestException as e:
            raise PrometheusQueryError(f"Query '{expr}' failed: {e}") from e

        if response.status_code >= 400:
            raise PrometheusQueryError(f"Query '{expr}' returned HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError as e:
            raise PrometheusQueryError(f"Query '{expr}' returned a non-JSON body") from e

        if not isinstance(body, dict) or body.get("status") != "success":
            error = body.get("error", "unknown error") if isinstance(body, dict) else "unexpected body"
            raise PrometheusQueryError(f"Query '{expr}' failed: {error}")
        data = body.get("data")
        if not isinstance(data, dict):
            raise PrometheusQueryError(f"Query '{expr}' returned a malformed 'data' block")
        result = data.get("result")
        if not isinstance(result, list):
            raise PrometheusQueryError(f"Query '{expr}' returned no result vector")

        if self.debug:
            print(f"[Prometheus] Result count: {len(result)}")
        return result


def sample_value(result: Dict[str, Any]) -> Optional[float]:
    """Float value of one vector element, or None if it is unusable."""
    try:
        value = float(result["value"][1])
    except (KeyError, IndexError, TypeError, ValueError):
        return None
    if value != value or value in (float("inf"), float("-inf")) or value < 0:
        return None
    return value


def sample_labels(result: Dict[str, Any]) -> Dict[str, str]:
    labels = result.get("metric") if isinstance(result, dict) else None
    return labels if isinstance(labels, dict) else {}


def sample_label(result: Dict[str, Any], name: str) -> Optional[str]:
    """A label value, or None unless it is a non-empty string."""
    value = sample_labels(result).get(name)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()
