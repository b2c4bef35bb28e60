# ==============================================================================
# FILE: core/data_models.py
# PURPOSE: Defines shared data structures and the error types of a cycle.
# ==============================================================================
from dataclasses import dataclass, field, asdict
from typing import Dict, Iterator, List, Optional, Tuple

WAN_ROLES: Tuple[str, str] = ("wan0", "wan1")
DEFAULT_ROLE = "wan0"
DIRECTIONS: Tuple[str, str] = ("rx", "tx")

DEFAULT_PROMETHEUS_URL = "http://localhost:9090"
DEFAULT_STATUS_URL = "http://localhost:32599/status"
DEFAULT_TIMEOUT = 5.0


class MonitorError(Exception):
    pass


class ConfigError(MonitorError):
    pass


class PrometheusError(MonitorError):
    pass


class PrometheusUnavailableError(PrometheusError):
    """The backend could not be contacted (refused, DNS, timeout)."""


class PrometheusQueryError(PrometheusError):
    """The backend answered, but not with a usable query result."""


class MetricsUnavailableError(MonitorError):
    pass


class CycleCancelledError(MonitorError):
    pass


@dataclass(frozen=True)
class InterfaceSet:
    lan: str
    wan0: str
    wan1: str

    def nic_for_role(self, role: str) -> Optional[str]:
        """Physical NIC behind a WAN role. 'lan' is not a WAN role."""
        if role == "wan0":
            return self.wan0
        if role == "wan1":
            return self.wan1
        return None

    def role_for_nic(self, nic: str) -> Optional[str]:
        for role in WAN_ROLES:
            if self.nic_for_role(role) == nic:
                return role
        return None

    @staticmethod
    def wan_roles() -> Tuple[str, str]:
        return WAN_ROLES

    def to_dict(self) -> dict:
        return asdict(self)


class IpInterfaceMap:
    """
    IP -> WAN role, exactly as the routing snapshot reported it.
    IPs the snapshot did not mention resolve to wan0 at lookup time;
    the default is never stored, so an empty map means "everything on wan0".
    """

    def __init__(self, mappings: Optional[Dict[str, str]] = None):
        self._mappings: Dict[str, str] = {}
        for ip, role in (mappings or {}).items():
            if role not in WAN_ROLES:
                raise ValueError(f"IP {ip} mapped to non-WAN role {role!r}")
            self._mappings[ip] = role

    def resolve(self, ip: str) -> str:
        return self._mappings.get(ip, DEFAULT_ROLE)

    def items(self):
        return self._mappings.items()

    def to_dict(self) -> Dict[str, str]:
        return dict(self._mappings)

    def __contains__(self, ip) -> bool:
        return ip in self._mappings

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IpInterfaceMap):
            return NotImplemented
        return self._mappings == other._mappings

    def __repr__(self) -> str:
        return f"IpInterfaceMap({self._mappings!r})"


@dataclass(frozen=True)
class BandwidthSample:
    role: str
    kind: str  # always "estimated"; actuals live on InterfaceReport
    value: float


@dataclass(frozen=True)
class IpSample:
    ip: str
    direction: str  # rx | tx
    value: float


@dataclass(frozen=True)
class InterfaceReport:
    role: str
    nic: str
    estimated: float
    actual_rx: float
    actual_tx: float
    actual_total: float
    exceeded: bool
    # NIC-level totals reported by the exporter; informational only
    counter_rx: float = 0.0
    counter_tx: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TopIpEntry:
    role: str
    nic: str
    direction: str
    ip: str
    value: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MonitorConfig:
    interfaces: InterfaceSet
    prometheus_url: str = DEFAULT_PROMETHEUS_URL
    status_url: str = DEFAULT_STATUS_URL
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False


@dataclass
class CycleResult:
    timestamp: float
    interfaces: InterfaceSet
    ip_map: IpInterfaceMap
    reports: List[InterfaceReport]
    top_ips: Dict[str, List[TopIpEntry]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

