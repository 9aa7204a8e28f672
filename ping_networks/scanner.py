"""
Concurrent probe engine
"""

import asyncio
import time
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .aggregator import ResultAggregator
from .config import ProbeConfig
from .enumerator import HostEnumerator
from .errors import ParseError
from .ip_parser import RangeParser, SpecInput
from .models import HostProbeResult, ScanProgress, UNKNOWN_HOSTNAME
from .prober import Prober, SubprocessPinger, HostnameResolver
from .progress import ProgressSink
from .subnet import SubnetCalculator

logger = logging.getLogger(__name__)


class ProbeEngine:
    """
    Probes addresses with at most config.concurrency_limit hosts in flight

    Every input address yields exactly one HostProbeResult. Failures of a
    single host are folded into an unreachable result and never stop the scan.
    An engine cancelled with cancel() stays cancelled.
    """

    def __init__(self, config: ProbeConfig, prober: Optional[Prober] = None,
                 resolver: Optional[HostnameResolver] = None):
        self.config = config
        self.prober = prober or SubprocessPinger()
        self.resolver = resolver or HostnameResolver()
        self._cancel_requested = False
        self._cancel_event: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def cancel(self):
        """Stop dispatching new hosts; safe to call from any thread"""
        self._cancel_requested = True
        loop, event = self._loop, self._cancel_event
        if loop is not None and event is not None and not loop.is_closed():
            loop.call_soon_threadsafe(event.set)

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested or (self._cancel_event is not None and self._cancel_event.is_set())

    def scan(self, addresses: Iterable[str], progress_sink: Optional[ProgressSink] = None,
             network: str = "") -> ResultAggregator:
        """Synchronous wrapper around run_scan"""
        return asyncio.run(self.run_scan(addresses, progress_sink, network=network))

    async def run_scan(self, addresses: Iterable[str], progress_sink: Optional[ProgressSink] = None,
                       cancel_event: Optional[asyncio.Event] = None,
                       network: str = "") -> ResultAggregator:
        """
        Probe every address and collect the results

        Args:
            addresses: IPv4 addresses to probe
            progress_sink: Called with a ScanProgress after every completed host
            cancel_event: External cancellation signal (optional)
            network: Label stored in the scan summary

        Returns:
            ResultAggregator with results in order of completion; partial
            when the scan was cancelled

        Raises:
            InvalidAddressError: an address is not a valid IPv4 address
        """
        address_list = self._prepare(addresses)
        total = len(address_list)

        self._loop = asyncio.get_running_loop()
        self._cancel_event = cancel_event or asyncio.Event()
        if self._cancel_requested:
            self._cancel_event.set()

        aggregator = ResultAggregator(network)
        aggregator.start()
        start_time = time.monotonic()
        pending: Dict[asyncio.Future, str] = {}

        logger.info(f"Starting scan of {total} hosts "
                    f"(concurrency {self.config.concurrency_limit}, "
                    f"{self.config.pings_per_attempt} ping(s) per attempt, "
                    f"{self.config.max_retries} retries)")

        try:
            for address in address_list:
                while len(pending) >= self.config.concurrency_limit:
                    await self._collect(pending, aggregator, progress_sink, total, start_time)
                if self.cancelled:
                    break
                pending[asyncio.ensure_future(self._probe_host(address))] = address

            while pending:
                await self._collect(pending, aggregator, progress_sink, total, start_time)
        finally:
            for task in pending:
                task.cancel()

        cancelled = self.cancelled
        aggregator.finish(cancelled=cancelled)
        self._loop = None

        summary = aggregator.summary()
        if cancelled:
            logger.warning(f"Scan cancelled: {len(aggregator)}/{total} hosts probed")
        logger.info(f"Scan finished in {summary.duration_seconds:.1f} seconds: "
                    f"{summary.hosts_reachable} reachable, {summary.hosts_unreachable} unreachable")

        return aggregator

    @staticmethod
    def _prepare(addresses: Iterable[str]) -> List[str]:
        """Require canonical dotted-quad addresses and drop repeats, keeping the first occurrence"""
        address_list = list(addresses)
        for address in address_list:
            SubnetCalculator.address_to_int(address)

        unique = list(dict.fromkeys(address_list))
        if len(unique) != len(address_list):
            logger.warning(f"Ignoring {len(address_list) - len(unique)} duplicate addresses")
        return unique

    async def _collect(self, pending: Dict[asyncio.Future, str], aggregator: ResultAggregator,
                       progress_sink: Optional[ProgressSink], total: int, start_time: float):
        """Wait for at least one host to finish and record it"""
        done, _ = await asyncio.wait(set(pending), return_when=asyncio.FIRST_COMPLETED)

        for task in done:
            address = pending.pop(task)
            try:
                result = task.result()
            except Exception as e:
                logger.warning(f"Probe task for {address} failed: {e}")
                result = HostProbeResult.failed(address)

            aggregator.add(result)

            if progress_sink is not None:
                progress = ScanProgress.compute(len(aggregator), total, time.monotonic() - start_time)
                try:
                    progress_sink(progress)
                except Exception as e:
                    logger.warning(f"Progress sink error: {e}")

    async def _probe_host(self, address: str) -> HostProbeResult:
        try:
            return await self._probe_with_retries(address)
        except Exception as e:
            logger.warning(f"Probe of {address} failed: {e}")
            return HostProbeResult.failed(address)

    async def _probe_with_retries(self, address: str) -> HostProbeResult:
        """Probe rounds until a reply arrives or retries run out"""
        sent = self.config.pings_per_attempt
        attempt = 0

        while True:
            rtts = await self._probe_round(address)
            if rtts or attempt >= self.config.max_retries:
                break

            delay = self.config.backoff_delay(attempt)
            logger.debug(f"{address}: no replies on attempt {attempt + 1}, retrying in {delay:.1f}s")
            if await self._backoff(delay):
                logger.debug(f"{address}: retry abandoned, scan cancelled")
                break
            attempt += 1

        hostname = UNKNOWN_HOSTNAME
        if rtts and self.config.resolve_hostnames:
            hostname = await self._resolve(address)

        result = HostProbeResult.from_round(address, sent, rtts, hostname, attempts=attempt + 1)
        logger.debug(f"{address}: reachable={result.reachable} "
                     f"loss={result.packet_loss_percent}% avg={result.avg_rtt}ms")
        return result

    async def _probe_round(self, address: str) -> List[float]:
        """Round-trip times of the answered probes of one round"""
        replies = await self.prober.ping(address, self.config)
        rtts = [max(0.0, float(r)) for r in replies if r is not None]
        return rtts[:self.config.pings_per_attempt]

    async def _backoff(self, delay: float) -> bool:
        """Sleep before a retry; True if the scan was cancelled meanwhile"""
        event = self._cancel_event
        if self.cancelled:
            return True
        if delay <= 0:
            return False
        try:
            await asyncio.wait_for(event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def _resolve(self, address: str) -> str:
        try:
            return await self.resolver.resolve(address) or UNKNOWN_HOSTNAME
        except Exception as e:
            logger.debug(f"Hostname resolution for {address} failed: {e}")
            return UNKNOWN_HOSTNAME


async def scan_networks(specs: Union[str, Iterable[SpecInput]], config: ProbeConfig,
                        prober: Optional[Prober] = None,
                        resolver: Optional[HostnameResolver] = None,
                        progress_sink: Optional[ProgressSink] = None,
                        engine: Optional[ProbeEngine] = None
                        ) -> Tuple[ResultAggregator, Dict[str, ParseError]]:
    """
    Scan several networks one after another and merge the results

    Specifications that fail to parse are reported and skipped. Addresses
    shared by overlapping networks are probed once.

    Returns:
        Tuple (merged results, {specification: parse error})
    """
    engine = engine or ProbeEngine(config, prober, resolver)
    parsed, errors = RangeParser.parse_many(specs)

    merged = ResultAggregator(", ".join(str(spec) for spec in parsed))
    merged.start()
    cancelled = False

    for spec in parsed:
        if engine.cancelled:
            cancelled = True
            break

        addresses = [a for a in HostEnumerator.expand(spec, engine.config.max_hosts) if a not in merged]
        logger.info(f"Network {spec}: {len(addresses)} hosts to probe")

        partial = await engine.run_scan(addresses, progress_sink, network=str(spec))
        merged.merge(partial)
        if partial.summary_info.cancelled:
            cancelled = True
            break

    merged.finish(cancelled=cancelled)
    return merged, errors
