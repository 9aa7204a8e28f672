"""
Reachability probe transports and hostname resolution
"""

import asyncio
import math
import platform
import re
import socket
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .config import ProbeConfig
from .errors import ProbeError
from .models import UNKNOWN_HOSTNAME

logger = logging.getLogger(__name__)


class Prober(ABC):
    """Sends one round of probes to an address"""

    @abstractmethod
    async def ping(self, address: str, config: ProbeConfig) -> List[Optional[float]]:
        """
        Send config.pings_per_attempt probes to address

        Returns:
            One entry per probe sent: round-trip time in ms, or None if lost

        Raises:
            ProbeError: the transport itself failed
        """
        raise NotImplementedError


class SubprocessPinger(Prober):
    """Prober backed by the operating system ping command"""

    REPLY_PATTERNS = [
        re.compile(r'time[=<](\d+\.?\d*)\s*ms', re.IGNORECASE),
        re.compile(r'время[=<](\d+\.?\d*)\s*мс', re.IGNORECASE),
    ]

    def __init__(self, system: Optional[str] = None):
        self.system = (system or platform.system()).lower()
        logger.debug(f"OS: {self.system}, using the ping command")

    def build_command(self, address: str, config: ProbeConfig) -> List[str]:
        """Build the ping command line for the current platform"""
        count = str(config.pings_per_attempt)
        size = str(config.packet_size_bytes)
        ttl = str(config.time_to_live)

        if self.system == 'windows':
            timeout_ms = str(max(1, int(config.per_ping_timeout_seconds * 1000)))
            return ['ping', '-n', count, '-l', size, '-i', ttl, '-w', timeout_ms, address]

        if self.system == 'darwin':
            timeout_ms = str(max(1, int(config.per_ping_timeout_seconds * 1000)))
            return ['ping', '-c', count, '-s', size, '-m', ttl, '-W', timeout_ms, address]

        timeout_s = str(max(1, math.ceil(config.per_ping_timeout_seconds)))
        return ['ping', '-c', count, '-s', size, '-t', ttl, '-W', timeout_s, address]

    def parse_replies(self, output: str) -> List[float]:
        """Round-trip times of every reply line in ping output"""
        for pattern in self.REPLY_PATTERNS:
            matches = pattern.findall(output)
            if matches:
                return [float(m) for m in matches]
        return []

    async def ping(self, address: str, config: ProbeConfig) -> List[Optional[float]]:
        cmd = self.build_command(address, config)
        sent = config.pings_per_attempt
        deadline = sent * (config.per_ping_timeout_seconds + 1) + 1

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise ProbeError(f"Cannot run ping for {address}: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            logger.debug(f"ping {address} timed out after {deadline:.1f}s")
            return [None] * sent

        output = stdout.decode('utf-8', errors='ignore')
        rtts = self.parse_replies(output)[:sent]
        return rtts + [None] * (sent - len(rtts))


class HostnameResolver:
    """Reverse DNS lookup run in the default executor"""

    async def resolve(self, address: str) -> str:
        loop = asyncio.get_running_loop()
        try:
            hostname, _, _ = await loop.run_in_executor(None, socket.gethostbyaddr, address)
        except OSError as e:
            logger.debug(f"Reverse lookup failed for {address}: {e}")
            return UNKNOWN_HOSTNAME
        return hostname or UNKNOWN_HOSTNAME
