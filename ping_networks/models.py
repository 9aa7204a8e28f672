"""
Data models for Ping Networks
"""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Dict, List, Optional, Union, Any
import uuid

from .errors import InvalidFormatError, RangeOrderError
from .subnet import SubnetCalculator

UNKNOWN_HOSTNAME = "unknown"


@dataclass(frozen=True)
class CIDRSpec:
    """Network given as base address and prefix length (10.0.0.0/24)"""
    base_address: str
    prefix_length: int

    kind = "cidr"

    def __post_init__(self):
        SubnetCalculator.address_to_int(self.base_address)
        SubnetCalculator.prefix_to_int(self.prefix_length)

    @property
    def subnet_mask(self) -> str:
        return SubnetCalculator.mask_from_prefix(self.prefix_length)

    def __str__(self) -> str:
        return f"{self.base_address}/{self.prefix_length}"


@dataclass(frozen=True)
class RangeSpec:
    """Inclusive address range (10.0.0.1-10.0.0.5)"""
    start_address: str
    end_address: str

    kind = "range"

    def __post_init__(self):
        start = SubnetCalculator.address_to_int(self.start_address)
        end = SubnetCalculator.address_to_int(self.end_address)
        if start > end:
            raise RangeOrderError(self.start_address, self.end_address, str(self))

    @property
    def size(self) -> int:
        return (SubnetCalculator.address_to_int(self.end_address)
                - SubnetCalculator.address_to_int(self.start_address) + 1)

    def __str__(self) -> str:
        return f"{self.start_address}-{self.end_address}"


@dataclass(frozen=True)
class TraditionalSpec:
    """Network given as address plus dotted subnet mask"""
    address: str
    subnet_mask: str
    prefix_length: Optional[int] = None

    kind = "traditional"

    def __post_init__(self):
        SubnetCalculator.address_to_int(self.address)
        mask_prefix = SubnetCalculator.prefix_from_mask(self.subnet_mask)
        if self.prefix_length is not None and self.prefix_length != mask_prefix:
            raise InvalidFormatError(
                f"Prefix length /{self.prefix_length} does not match subnet mask {self.subnet_mask}",
                str(self)
            )

    def __str__(self) -> str:
        return f"{self.address}/{self.subnet_mask}"


NetworkSpec = Union[CIDRSpec, RangeSpec, TraditionalSpec]


def packet_loss(sent: int, received: int) -> float:
    """Percentage of sent probes without a reply"""
    if sent <= 0:
        return 100.0
    return round((sent - received) / sent * 100, 2)


@dataclass(frozen=True)
class HostProbeResult:
    """Final probe outcome for one address"""
    address: str
    reachable: bool
    hostname: str = UNKNOWN_HOSTNAME
    min_rtt: float = 0.0
    max_rtt: float = 0.0
    avg_rtt: float = 0.0
    packet_loss_percent: float = 100.0
    pings_sent: int = 0
    pings_received: int = 0
    attempts: int = 0

    @classmethod
    def from_round(cls, address: str, sent: int, rtts: List[float],
                   hostname: str = UNKNOWN_HOSTNAME, attempts: int = 1) -> "HostProbeResult":
        """
        Build a result from the replies of a single probing round

        Args:
            address: Probed address
            sent: Number of probes sent in the round
            rtts: Round-trip times (ms) of the probes that were answered
            hostname: Resolved hostname
            attempts: Rounds performed so far
        """
        received = len(rtts)
        if received:
            min_rtt = round(min(rtts), 2)
            max_rtt = round(max(rtts), 2)
            avg_rtt = round(sum(rtts) / received, 2)
        else:
            min_rtt = max_rtt = avg_rtt = 0.0

        return cls(
            address=address,
            reachable=received > 0,
            hostname=hostname or UNKNOWN_HOSTNAME,
            min_rtt=min_rtt,
            max_rtt=max_rtt,
            avg_rtt=avg_rtt,
            packet_loss_percent=packet_loss(sent, received),
            pings_sent=sent,
            pings_received=received,
            attempts=attempts
        )

    @classmethod
    def failed(cls, address: str, attempts: int = 0) -> "HostProbeResult":
        """Unreachable result with zeroed statistics"""
        return cls(address=address, reachable=False, attempts=attempts)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScanProgress:
    """Progress snapshot, recomputed after every completed host"""
    completed: int
    total: int
    elapsed_seconds: float
    rate_hosts_per_second: float
    eta_seconds: Optional[float]

    @classmethod
    def compute(cls, completed: int, total: int, elapsed: float) -> "ScanProgress":
        rate = completed / elapsed if elapsed > 0 else 0.0
        eta = (total - completed) / rate if rate > 0 else None
        return cls(
            completed=completed,
            total=total,
            elapsed_seconds=elapsed,
            rate_hosts_per_second=rate,
            eta_seconds=eta
        )

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.completed / self.total * 100


@dataclass
class ScanSummary:
    """Scan metadata for the persistence and reporting collaborators"""
    scan_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    network: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hosts_scanned: int = 0
    hosts_reachable: int = 0
    hosts_unreachable: int = 0
    reachable_percent: float = 0.0
    avg_latency_ms: float = 0.0
    cancelled: bool = False

    @property
    def duration_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['start_time'] = self.start_time.isoformat() if self.start_time else None
        data['end_time'] = self.end_time.isoformat() if self.end_time else None
        data['duration_seconds'] = round(self.duration_seconds, 2)
        return data
