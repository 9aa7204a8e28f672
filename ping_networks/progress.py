"""
Progress sinks for ScanProgress snapshots
"""

import sys
import time
import logging
from typing import Callable, Optional, TextIO

from colorama import Fore, Style, just_fix_windows_console

from .models import ScanProgress

logger = logging.getLogger(__name__)

ProgressSink = Callable[[ScanProgress], None]


def format_eta(eta_seconds: Optional[float]) -> str:
    if eta_seconds is None:
        return "unknown"
    return f"{eta_seconds:.0f}s"


class LoggingProgress:
    """Logs a progress line every `step` percent and at completion"""

    def __init__(self, step: int = 10, log: Optional[logging.Logger] = None):
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        self.step = step
        self.log = log or logger
        self._next_mark = step

    def __call__(self, progress: ScanProgress):
        if progress.percent < self._next_mark and progress.completed < progress.total:
            return

        while self._next_mark <= progress.percent:
            self._next_mark += self.step

        self.log.info(
            f"Progress: {progress.completed}/{progress.total} ({progress.percent:.1f}%) | "
            f"Rate: {progress.rate_hosts_per_second:.1f} hosts/s | "
            f"ETA: {format_eta(progress.eta_seconds)}"
        )


class ConsoleProgress:
    """Single-line console progress, redrawn at most once per interval"""

    def __init__(self, stream: Optional[TextIO] = None, update_interval: float = 1.0):
        just_fix_windows_console()
        self.stream = stream or sys.stdout
        self.update_interval = update_interval
        self.last_update: Optional[float] = None

    def __call__(self, progress: ScanProgress):
        now = time.monotonic()
        finished = progress.completed >= progress.total

        if not finished and self.last_update is not None \
                and now - self.last_update < self.update_interval:
            return
        self.last_update = now

        color = Fore.GREEN if finished else Fore.CYAN
        self.stream.write(
            f"\r{color}Progress: {progress.completed}/{progress.total} "
            f"({progress.percent:.1f}%){Style.RESET_ALL} | "
            f"Rate: {progress.rate_hosts_per_second:.1f} hosts/s | "
            f"ETA: {format_eta(progress.eta_seconds)}"
        )
        if finished:
            self.stream.write("\n")
        self.stream.flush()
