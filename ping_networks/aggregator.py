"""
Accumulation of per-host results
"""

from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple, Any

from .models import HostProbeResult, ScanSummary


class ResultAggregator:
    """Collects results in order of arrival and derives summary counts"""

    def __init__(self, network: str = ""):
        self.network = network
        self._results: Dict[str, HostProbeResult] = {}
        self.summary_info = ScanSummary(network=network)

    def add(self, result: HostProbeResult):
        """
        Record a completed host

        Raises:
            ValueError: the address was already recorded
        """
        if result.address in self._results:
            raise ValueError(f"Duplicate result for {result.address}")
        self._results[result.address] = result

    def merge(self, other: "ResultAggregator"):
        """Append all results of another aggregator"""
        for result in other:
            self.add(result)
        self.summary_info.cancelled = self.summary_info.cancelled or other.summary_info.cancelled

    def start(self):
        self.summary_info.start_time = datetime.now()

    def finish(self, cancelled: bool = False):
        self.summary_info.end_time = datetime.now()
        self.summary_info.cancelled = cancelled

    @property
    def results(self) -> Tuple[HostProbeResult, ...]:
        return tuple(self._results.values())

    @property
    def addresses(self) -> List[str]:
        return list(self._results)

    @property
    def total(self) -> int:
        return len(self._results)

    @property
    def reachable_count(self) -> int:
        return sum(1 for r in self._results.values() if r.reachable)

    @property
    def unreachable_count(self) -> int:
        return self.total - self.reachable_count

    @property
    def reachable_percent(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.reachable_count / self.total * 100, 2)

    @property
    def avg_latency_ms(self) -> float:
        """Mean of avg_rtt over reachable hosts"""
        latencies = [r.avg_rtt for r in self._results.values() if r.reachable]
        return round(sum(latencies) / len(latencies), 2) if latencies else 0.0

    def reachable_hosts(self) -> List[HostProbeResult]:
        return [r for r in self._results.values() if r.reachable]

    def unreachable_hosts(self) -> List[HostProbeResult]:
        return [r for r in self._results.values() if not r.reachable]

    def get(self, address: str) -> Optional[HostProbeResult]:
        return self._results.get(address)

    def summary(self) -> ScanSummary:
        """Current summary with counts filled in"""
        info = self.summary_info
        info.hosts_scanned = self.total
        info.hosts_reachable = self.reachable_count
        info.hosts_unreachable = self.unreachable_count
        info.reachable_percent = self.reachable_percent
        info.avg_latency_ms = self.avg_latency_ms
        return info

    def to_dict(self) -> Dict[str, Any]:
        """Summary plus one row per host"""
        return {
            "summary": self.summary().to_dict(),
            "results": [r.to_dict() for r in self._results.values()]
        }

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[HostProbeResult]:
        return iter(list(self._results.values()))

    def __contains__(self, address) -> bool:
        return address in self._results
