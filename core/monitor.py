# ==============================================================================
# FILE: core/monitor.py
# PURPOSE: Runs one pull-compare-report cycle across the WAN interfaces.
# ==============================================================================
import time
from concurrent.futures import ThreadPoolExecutor
from threading import Event
from typing import Dict, List, Optional

import requests

from .data_models import (
    CycleCancelledError, CycleResult, MetricsUnavailableError, MonitorConfig,
    PrometheusError, PrometheusUnavailableError
)
from .processor import (
    aggregate_actuals, build_reports, parse_counter_totals, parse_estimates, parse_ip_samples
)
from .prometheus import PrometheusClient, estimate_query, ip_rate_query, nic_total_query
from .routing import fetch_snapshot
from .top_talkers import rank_exceeded


class BandwidthMonitor:
    def __init__(self, config: MonitorConfig, client: Optional[PrometheusClient] = None,
                 session: Optional[requests.Session] = None):
        self.config = config
        # used by the routing fetch only; query workers each get their own session
        self.session = session or requests.Session()
        self.client = client or PrometheusClient(
            config.prometheus_url, timeout=config.timeout, debug=config.debug
        )

    def queries(self) -> Dict[str, str]:
        return {
            "estimates": estimate_query(),
            "ip_rx": ip_rate_query("rx"),
            "ip_tx": ip_rate_query("tx"),
            "total_rx": nic_total_query("rx"),
            "total_tx": nic_total_query("tx"),
        }

    def fetch_metrics(self, at: float, warnings: List[str]) -> Dict[str, list]:
        """
        Issues every query concurrently and waits for all of them. A failed
        query yields an empty result; if none could reach the backend the
        cycle fails as a whole.
        """
        queries = self.queries()
        results: Dict[str, list] = {}
        unreachable = []
        with ThreadPoolExecutor(max_workers=len(queries)) as pool:
            futures = {name: pool.submit(self.client.query, expr, at) for name, expr in queries.items()}
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except PrometheusError as e:
                    if isinstance(e, PrometheusUnavailableError):
                        unreachable.append(e)
                    warnings.append(f"Metric query '{queries[name]}' failed ({e}); using no data.")
                    results[name] = []

        if len(unreachable) == len(queries):
            raise MetricsUnavailableError(str(unreachable[0]))
        return results

    def _check_cancel(self, cancel_event: Optional[Event], stage: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise CycleCancelledError(f"Cycle cancelled before {stage}")

    def run_cycle(self, cancel_event: Optional[Event] = None) -> CycleResult:
        interfaces = self.config.interfaces
        at = time.time()

        self._check_cancel(cancel_event, "routing snapshot")
        ip_map, warnings = fetch_snapshot(
            self.config.status_url, interfaces, timeout=self.config.timeout, session=self.session
        )

        self._check_cancel(cancel_event, "metric queries")
        results = self.fetch_metrics(at, warnings)
        for message in warnings:
            print(f"[Warning] {message}")

        self._check_cancel(cancel_event, "aggregation")
        estimates = parse_estimates(results["estimates"], interfaces)
        rx_samples = parse_ip_samples(results["ip_rx"], "rx")
        tx_samples = parse_ip_samples(results["ip_tx"], "tx")
        actuals = aggregate_actuals(rx_samples, tx_samples, ip_map)
        totals_rx = parse_counter_totals(results["total_rx"], interfaces)
        totals_tx = parse_counter_totals(results["total_tx"], interfaces)
        counters = {role: (totals_rx[role], totals_tx[role]) for role in interfaces.wan_roles()}
        reports = build_reports(estimates, actuals, counters, interfaces)

        # Ranking reuses this cycle's samples so it sees the same data as the comparison
        self._check_cancel(cancel_event, "ranking")
        top_ips = rank_exceeded(reports, rx_samples, tx_samples, ip_map)

        self._check_cancel(cancel_event, "reporting")
        return CycleResult(
            timestamp=at,
            interfaces=interfaces,
            ip_map=ip_map,
            reports=reports,
            top_ips=top_ips,
            warnings=warnings,
        )
