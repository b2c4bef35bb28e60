# ==============================================================================
# FILE: core/routing.py
# PURPOSE: Fetches the routing snapshot and builds the IP -> WAN role map.
# ==============================================================================
from typing import Any, Iterable, List, Optional, Tuple

import requests

from .data_models import (
    DEFAULT_TIMEOUT, WAN_ROLES, InterfaceSet, IpInterfaceMap
)

ROLE_KEYS = ("wan", "role", "interface")


def normalize_role(raw: Any, interfaces: Optional[InterfaceSet] = None) -> Optional[str]:
    """Returns 'wan0'/'wan1' for a reported role token, or None to reject it."""
    if not isinstance(raw, str):
        return None
    token = raw.strip()
    if token.lower() in WAN_ROLES:
        return token.lower()
    if interfaces is not None:
        return interfaces.role_for_nic(token)
    return None


def _iter_records(mappings: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(mappings, dict):
        yield from mappings.items()
        return
    for record in mappings:
        if isinstance(record, dict):
            role = next((record[k] for k in ROLE_KEYS if k in record), None)
            yield record.get("ip"), role
        elif isinstance(record, (list, tuple)) and len(record) == 2:
            yield record[0], record[1]
        else:
            yield None, None


def parse_status(payload: Any, interfaces: Optional[InterfaceSet] = None,
                 warnings: Optional[List[str]] = None) -> IpInterfaceMap:
    """
    Builds the map from a routing-status payload. Bad records are skipped;
    a payload with no usable shape yields an empty map.
    """
    warnings = warnings if warnings is not None else []
    if isinstance(payload, dict):
        mappings = payload.get("mappings")
    else:
        mappings = payload
    if not isinstance(mappings, (dict, list)):
        warnings.append("Routing status has no usable 'mappings'; assuming all IPs on wan0.")
        return IpInterfaceMap()

    accepted = {}
    for ip, raw_role in _iter_records(mappings):
        if not isinstance(ip, str) or not ip.strip():
            warnings.append(f"Skipping routing record without an IP: {raw_role!r}")
            continue
        role = normalize_role(raw_role, interfaces)
        if role is None:
            warnings.append(f"Skipping {ip.strip()}: unknown WAN role {raw_role!r}")
            continue
        accepted[ip.strip()] = role
    return IpInterfaceMap(accepted)


def config_mismatches(payload: Any, interfaces: InterfaceSet) -> List[str]:
    """Differences between the status service's NIC config and ours."""
    remote = payload.get("config") if isinstance(payload, dict) else None
    if not isinstance(remote, dict):
        return []
    local = interfaces.to_dict()
    return [
        f"Routing service reports {slot}={remote[slot]!r}, local config has {local[slot]!r}"
        for slot in ("lan", "wan0", "wan1")
        if slot in remote and remote[slot] != local[slot]
    ]


def fetch_snapshot(url: str, interfaces: Optional[InterfaceSet] = None,
                   timeout: float = DEFAULT_TIMEOUT,
                   session: Optional[requests.Session] = None) -> Tuple[IpInterfaceMap, List[str]]:
    """
    GETs the routing status. Never raises: any failure returns an empty map,
    which resolves every IP to wan0.
    """
    warnings: List[str] = []
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        warnings.append(f"Routing status unavailable ({e}); assuming all IPs on wan0.")
        return IpInterfaceMap(), warnings
    try:
        payload = response.json()
    except ValueError:
        # requests.JSONDecodeError is a ValueError as well
        warnings.append("Routing status returned malformed JSON; assuming all IPs on wan0.")
        return IpInterfaceMap(), warnings

    ip_map = parse_status(payload, interfaces, warnings)
    if interfaces is not None:
        warnings.extend(config_mismatches(payload, interfaces))
    return ip_map, warnings
