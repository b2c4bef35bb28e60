# FILE: core/report.py
# PURPOSE: Renders a CycleResult as a text report or JSON.

import json
from datetime import datetime

from .data_models import CycleResult


def format_bps(value: float) -> str:
    return f"{value:,.2f} bps ({value / 1_000_000:,.2f} Mbps)"


def to_dict(result: CycleResult) -> dict:
    return {
        "timestamp": result.timestamp,
        "config": result.interfaces.to_dict(),
        "mappings": result.ip_map.to_dict(),
        "interfaces": [
            {**report.to_dict(), "top_ips": [e.to_dict() for e in result.top_ips.get(report.role, [])]}
            for report in result.reports
        ],
        "warnings": list(result.warnings),
    }


def render_json(result: CycleResult) -> str:
    return json.dumps(to_dict(result), indent=2)


def render_text(result: CycleResult, show_mappings: bool = True) -> str:
    cfg = result.interfaces
    when = datetime.fromtimestamp(result.timestamp).strftime("%Y-%m-%d %H:%M:%S")
    lines = [f"=== Bandwidth Monitoring Report ({when}) ===", ""]
    lines += ["Network Configuration:", f"  LAN: {cfg.lan}", f"  WAN0: {cfg.wan0}", f"  WAN1: {cfg.wan1}", ""]

    if show_mappings:
        lines.append("IP Mappings:")
        if len(result.ip_map):
            for ip, role in sorted(result.ip_map.items()):
                lines.append(f"  {ip} -> {role}")
        else:
            lines.append("  (none reported, all IPs counted on wan0)")
        lines.append("")

    lines.append("Bandwidth Comparison:")
    for report in result.reports:
        lines += [
            "",
            f"  Interface: {report.role} ({report.nic})",
            f"    Estimated Bandwidth: {format_bps(report.estimated)}",
            f"    Actual RX: {format_bps(report.actual_rx)}",
            f"    Actual TX: {format_bps(report.actual_tx)}",
            f"    Actual Total: {format_bps(report.actual_total)}",
            f"    NIC Counters RX/TX: {format_bps(report.counter_rx)} / {format_bps(report.counter_tx)}",
            f"    Exceeded: {'YES' if report.exceeded else 'NO'}",
        ]
        if report.exceeded:
            entries = result.top_ips.get(report.role, [])
            if not entries:
                lines.append("      No top IP found for this interface")
            for entry in entries:
                lines.append(f"      Top {entry.direction.upper()} IP: {entry.ip} ({format_bps(entry.value)})")

    if result.warnings:
        lines += ["", "Warnings:"]
        lines += [f"  - {w}" for w in result.warnings]

    lines += ["", "=== End of Report ==="]
    return "\n".join(lines)
