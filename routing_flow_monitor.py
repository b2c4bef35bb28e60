# PURPOSE: Main entry point for the application. Run this file.
# ==============================================================================
import argparse
import sys

from core.config import check_interfaces, load_config
from core.data_models import ConfigError, CycleCancelledError, MetricsUnavailableError
from core.monitor import BandwidthMonitor
from core.report import render_json, render_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare estimated and actual WAN bandwidth and name the top IPs on exceeded links."
    )
    parser.add_argument("--config", help="path to nic.json (default: nic.json)")
    parser.add_argument("--prometheus-url", help="Prometheus base URL (default: http://localhost:9090)")
    parser.add_argument("--status-url", help="routing status URL (default: http://localhost:32599/status)")
    parser.add_argument("--timeout", type=float, help="per-request timeout in seconds (default: 5)")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    parser.add_argument("--no-mappings", action="store_true", help="leave the IP mapping table out of the report")
    parser.add_argument("--debug", action="store_true", default=None, help="print every Prometheus query")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # --- Initialization ---
    try:
        config = load_config(
            nic_path=args.config,
            prometheus_url=args.prometheus_url,
            status_url=args.status_url,
            timeout=args.timeout,
            debug=args.debug,
        )
    except ConfigError as e:
        print(f"[Error] {e}")
        return 1

    for message in check_interfaces(config.interfaces):
        print(f"[Config] {message}")

    monitor = BandwidthMonitor(config)
    try:
        result = monitor.run_cycle()
    except MetricsUnavailableError as e:
        print(f"[Error] Metrics backend unreachable, no report produced: {e}")
        return 1
    except (CycleCancelledError, KeyboardInterrupt):
        print("\n[Monitor] Cycle aborted, no report produced.")
        return 130

    print(render_json(result) if args.json else render_text(result, show_mappings=not args.no_mappings))
    return 0


if __name__ == '__main__':
    sys.exit(main())
