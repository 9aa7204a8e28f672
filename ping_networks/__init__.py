"""
Ping Networks: IPv4 range enumeration and concurrent reachability probing
"""

__version__ = "1.0.0"
__author__ = "Ping Networks Team"

from .aggregator import ResultAggregator
from .config import ProbeConfig, ConfigLoader
from .enumerator import HostEnumerator
from .errors import (
    PingNetworksError, ParseError, InvalidFormatError, RangeOrderError,
    InvalidOctetError, InvalidAddressError, ProbeError
)
from .ip_parser import RangeParser
from .logger import setup_logger
from .models import (
    CIDRSpec, RangeSpec, TraditionalSpec, NetworkSpec,
    HostProbeResult, ScanProgress, ScanSummary
)
from .prober import Prober, SubprocessPinger, HostnameResolver
from .progress import LoggingProgress, ConsoleProgress
from .scanner import ProbeEngine, scan_networks
from .subnet import SubnetCalculator, UsableRange

__all__ = [
    'ResultAggregator',
    'ProbeConfig',
    'ConfigLoader',
    'HostEnumerator',
    'PingNetworksError',
    'ParseError',
    'InvalidFormatError',
    'RangeOrderError',
    'InvalidOctetError',
    'InvalidAddressError',
    'ProbeError',
    'RangeParser',
    'setup_logger',
    'CIDRSpec',
    'RangeSpec',
    'TraditionalSpec',
    'NetworkSpec',
    'HostProbeResult',
    'ScanProgress',
    'ScanSummary',
    'Prober',
    'SubprocessPinger',
    'HostnameResolver',
    'LoggingProgress',
    'ConsoleProgress',
    'ProbeEngine',
    'scan_networks',
    'SubnetCalculator',
    'UsableRange',
]
