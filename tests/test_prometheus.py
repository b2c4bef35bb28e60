"""
Tests for the Prometheus query client.
"""
import threading
from unittest.mock import Mock

import pytest
import requests

from core.data_models import PrometheusQueryError, PrometheusUnavailableError
from core.prometheus import (
    PrometheusClient, estimate_query, ip_rate_query, nic_total_query, sample_value
)

from conftest import json_response, vector


def client_with(response=None, error=None):
    session = Mock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return PrometheusClient("http://prom:9090/", timeout=3.0, session=session), session


class TestQueries:

    def test_per_ip_queries_group_by_ip(self):
        assert ip_rate_query("rx") == "sum by (ip) (network_ip_rx_bps)"
        assert ip_rate_query("tx") == "sum by (ip) (network_ip_tx_bps)"

    def test_interface_queries(self):
        assert "tcp_traffic_scan_tcp_bandwidth_avg_bps" in estimate_query()
        assert "by (interface)" in estimate_query()
        assert nic_total_query("tx") == "sum by (nic) (network_ip_tx_bps_total)"


class TestPrometheusClient:

    def test_returns_result_vector(self):
        result = vector(({"ip": "10.0.0.1"}, 5))
        client, session = client_with(json_response({"status": "success", "data": {"resultType": "vector", "result": result}}))
        assert client.query("up", at=1700000000.5) == result
        session.get.assert_called_once_with(
            "http://prom:9090/api/v1/query",
            params={"query": "up", "time": "1700000000.500"},
            timeout=3.0,
        )

    def test_connection_error_is_unavailable(self):
        client, _ = client_with(error=requests.ConnectionError("refused"))
        with pytest.raises(PrometheusUnavailableError):
            client.query("up")

    def test_timeout_is_unavailable(self):
        client, _ = client_with(error=requests.Timeout("slow"))
        with pytest.raises(PrometheusUnavailableError):
            client.query("up")

    def test_http_error_is_query_error(self):
        client, _ = client_with(json_response({}, status_code=400))
        with pytest.raises(PrometheusQueryError):
            client.query("bad{")

    def test_error_status_is_query_error(self):
        client, _ = client_with(json_response({"status": "error", "error": "parse error"}))
        with pytest.raises(PrometheusQueryError, match="parse error"):
            client.query("bad{")

    def test_non_json_is_query_error(self):
        response = json_response(None)
        response.json.side_effect = ValueError("no json")
        client, _ = client_with(response)
        with pytest.raises(PrometheusQueryError):
            client.query("up")

    @pytest.mark.parametrize("data", [["not", "an", "object"], "vector", 42, None])
    def test_malformed_data_block_is_query_error(self, data):
        client, _ = client_with(json_response({"status": "success", "data": data}))
        with pytest.raises(PrometheusQueryError):
            client.query("up")

    def test_each_thread_gets_its_own_session(self):
        client = PrometheusClient("http://prom:9090")
        seen = []
        worker = threading.Thread(target=lambda: seen.append(client.session))
        worker.start()
        worker.join()
        assert client.session is client.session
        assert seen[0] is not client.session

    def test_injected_session_is_used_everywhere(self):
        session = Mock()
        client = PrometheusClient("http://prom:9090", session=session)
        seen = []
        worker = threading.Thread(target=lambda: seen.append(client.session))
        worker.start()
        worker.join()
        assert seen == [session]
        assert client.session is session


class TestSampleValue:

    @pytest.mark.parametrize("raw, expected", [("12.5", 12.5), ("0", 0.0), ("NaN", None), ("+Inf", None), ("-3", None), ("x", None)])
    def test_values(self, raw, expected):
        assert sample_value({"metric": {}, "value": [0, raw]}) == expected

    def test_missing_value(self):
        assert sample_value({"metric": {}}) is None
