# FILE: core/top_talkers.py
# PURPOSE: Picks the heaviest RX and TX IP behind each exceeded WAN.

from typing import Dict, Iterable, List, Optional

from .data_models import InterfaceReport, IpInterfaceMap, IpSample, TopIpEntry


def top_sample(samples: Iterable[IpSample], role: str, ip_map: IpInterfaceMap) -> Optional[IpSample]:
    """Largest sample resolving to `role`; the first one seen wins a tie."""
    best = None
    for sample in samples:
        if ip_map.resolve(sample.ip) != role:
            continue
        if best is None or sample.value > best.value:
            best = sample
    return best


def find_top_ips(report: InterfaceReport, rx_samples: List[IpSample], tx_samples: List[IpSample],
                 ip_map: IpInterfaceMap) -> List[TopIpEntry]:
    """
    Zero to two entries (RX first). An empty list for an exceeded interface
    means no IP could be attributed to it.
    """
    if not report.exceeded:
        return []
    entries = []
    for direction, samples in (("rx", rx_samples), ("tx", tx_samples)):
        top = top_sample(samples, report.role, ip_map)
        if top is not None:
            entries.append(TopIpEntry(
                role=report.role, nic=report.nic, direction=direction, ip=top.ip, value=top.value
            ))
    return entries


def rank_exceeded(reports: Iterable[InterfaceReport], rx_samples: List[IpSample],
                  tx_samples: List[IpSample], ip_map: IpInterfaceMap) -> Dict[str, List[TopIpEntry]]:
    return {
        report.role: find_top_ips(report, rx_samples, tx_samples, ip_map)
        for report in reports
        if report.exceeded
    }
