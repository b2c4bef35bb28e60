# FILE: core/processor.py
# PURPOSE: Folds per-IP rates into per-WAN totals and compares them with the estimates.

import math
from typing import Dict, Iterable, List, Tuple

from .data_models import (
    WAN_ROLES, BandwidthSample, InterfaceReport, InterfaceSet,
    IpInterfaceMap, IpSample
)
from .prometheus import sample_label, sample_value


def parse_estimates(results: Iterable[dict], interfaces: InterfaceSet) -> Dict[str, BandwidthSample]:
    """One 'estimated' sample per WAN role; a role with no series is idle (0.0)."""
    found: Dict[str, float] = {}
    for result in results:
        role = interfaces.role_for_nic(sample_label(result, "interface"))
        value = sample_value(result)
        if role is None or value is None:
            continue
        found[role] = value
    return {
        role: BandwidthSample(role=role, kind="estimated", value=found.get(role, 0.0))
        for role in WAN_ROLES
    }


def parse_ip_samples(results: Iterable[dict], direction: str) -> List[IpSample]:
    samples = []
    for result in results:
        ip = sample_label(result, "ip")
        value = sample_value(result)
        if not ip or value is None:
            continue
        samples.append(IpSample(ip=ip, direction=direction, value=value))
    return samples


def parse_counter_totals(results: Iterable[dict], interfaces: InterfaceSet) -> Dict[str, float]:
    totals = {role: 0.0 for role in WAN_ROLES}
    for result in results:
        role = interfaces.role_for_nic(sample_label(result, "nic"))
        value = sample_value(result)
        if role is not None and value is not None:
            totals[role] = value
    return totals


def aggregate_actuals(rx_samples: Iterable[IpSample], tx_samples: Iterable[IpSample],
                      ip_map: IpInterfaceMap) -> Dict[str, Tuple[float, float]]:
    """Per-role (rx, tx) sums. Unmapped IPs count towards wan0."""
    buckets = {(role, d): [] for role in WAN_ROLES for d in ("rx", "tx")}
    for direction, samples in (("rx", rx_samples), ("tx", tx_samples)):
        for sample in samples:
            buckets[(ip_map.resolve(sample.ip), direction)].append(sample.value)
    # fsum keeps the totals independent of sample order
    return {
        role: (math.fsum(buckets[(role, "rx")]), math.fsum(buckets[(role, "tx")]))
        for role in WAN_ROLES
    }


def compare(role: str, nic: str, estimated: float, rx: float, tx: float,
            counter_rx: float = 0.0, counter_tx: float = 0.0) -> InterfaceReport:
    actual_total = rx + tx
    return InterfaceReport(
        role=role,
        nic=nic,
        estimated=estimated,
        actual_rx=rx,
        actual_tx=tx,
        actual_total=actual_total,
        exceeded=actual_total > estimated,
        counter_rx=counter_rx,
        counter_tx=counter_tx,
    )


def build_reports(estimates: Dict[str, BandwidthSample], actuals: Dict[str, Tuple[float, float]],
                  counters: Dict[str, Tuple[float, float]], interfaces: InterfaceSet) -> List[InterfaceReport]:
    reports = []
    for role in WAN_ROLES:
        estimate = estimates.get(role)
        rx, tx = actuals.get(role, (0.0, 0.0))
        counter_rx, counter_tx = counters.get(role, (0.0, 0.0))
        reports.append(compare(
            role, interfaces.nic_for_role(role),
            estimate.value if estimate else 0.0, rx, tx, counter_rx, counter_tx,
        ))
    return reports
