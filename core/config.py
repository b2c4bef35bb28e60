# ==============================================================================
# FILE: core/config.py
# PURPOSE: Loads nic.json and endpoint settings into a MonitorConfig.
# ==============================================================================
import json
import math
import os
from typing import List, Mapping, Optional

import psutil

from .data_models import (
    DEFAULT_PROMETHEUS_URL, DEFAULT_STATUS_URL, DEFAULT_TIMEOUT,
    ConfigError, InterfaceSet, MonitorConfig
)

DEFAULT_NIC_CONFIG = "nic.json"
NIC_SLOTS = ("lan", "wan0", "wan1")


def parse_interfaces(data) -> InterfaceSet:
    if not isinstance(data, dict):
        raise ConfigError("NIC config must be a JSON object with lan, wan0 and wan1")
    missing = [slot for slot in NIC_SLOTS if not isinstance(data.get(slot), str) or not data[slot].strip()]
    if missing:
        raise ConfigError(f"NIC config is missing: {', '.join(missing)}")
    interfaces = InterfaceSet(**{slot: data[slot].strip() for slot in NIC_SLOTS})
    if interfaces.wan0 == interfaces.wan1:
        raise ConfigError(f"wan0 and wan1 must be different NICs, both are '{interfaces.wan0}'")
    return interfaces


def load_interfaces(path: str = DEFAULT_NIC_CONFIG) -> InterfaceSet:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e
    return parse_interfaces(data)


def save_interfaces(interfaces: InterfaceSet, path: str = DEFAULT_NIC_CONFIG) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(interfaces.to_dict(), f, indent=2)
        f.write("\n")


def _truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def load_config(nic_path: Optional[str] = None, prometheus_url: Optional[str] = None,
                status_url: Optional[str] = None, timeout: Optional[float] = None,
                debug: Optional[bool] = None, environ: Optional[Mapping[str, str]] = None) -> MonitorConfig:
    """Explicit arguments win over environment variables, which win over defaults."""
    env = os.environ if environ is None else environ

    nic_path = nic_path or env.get("ROUTING_FLOW_NIC_CONFIG") or DEFAULT_NIC_CONFIG
    if timeout is None:
        raw_timeout = env.get("ROUTING_FLOW_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(f"ROUTING_FLOW_TIMEOUT is not a number: {raw_timeout!r}")
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError(f"Timeout must be a positive finite number, got {timeout}")

    return MonitorConfig(
        interfaces=load_interfaces(nic_path),
        prometheus_url=prometheus_url or env.get("PROMETHEUS_URL") or DEFAULT_PROMETHEUS_URL,
        status_url=status_url or env.get("ROUTING_STATUS_URL") or DEFAULT_STATUS_URL,
        timeout=timeout,
        debug=_truthy(env.get("ROUTING_FLOW_DEBUG")) if debug is None else debug,
    )


def check_interfaces(interfaces: InterfaceSet) -> List[str]:
    """Warnings for configured NICs that this host does not have."""
    try:
        present = set(psutil.net_if_addrs().keys())
    except Exception as e:
        return [f"Could not list local interfaces: {e}"]
    return [
        f"Configured {slot} interface '{nic}' not found on this host"
        for slot, nic in interfaces.to_dict().items()
        if nic not in present
    ]
