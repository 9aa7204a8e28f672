# tests/test_progress.py
import io
import logging

import pytest

from ping_networks.logger import setup_logger
from ping_networks.models import ScanProgress
from ping_networks.progress import ConsoleProgress, LoggingProgress, format_eta


def test_format_eta():
    assert format_eta(None) == "unknown"
    assert format_eta(12.4) == "12s"


def test_logging_progress_steps(caplog):
    sink = LoggingProgress(step=50, log=logging.getLogger("ping_networks.test"))
    with caplog.at_level(logging.INFO, logger="ping_networks.test"):
        for done in range(1, 11):
            sink(ScanProgress.compute(done, 10, elapsed=float(done)))

    lines = [r.getMessage() for r in caplog.records]
    assert len(lines) == 2
    assert lines[0].startswith("Progress: 5/10")
    assert lines[-1].startswith("Progress: 10/10")


@pytest.mark.parametrize("step", [0, -5, 0.0])
def test_logging_progress_rejects_non_positive_step(step):
    with pytest.raises(ValueError):
        LoggingProgress(step=step)


def test_logging_progress_fractional_step_reaches_completion(caplog):
    sink = LoggingProgress(step=0.5, log=logging.getLogger("ping_networks.test"))
    with caplog.at_level(logging.INFO, logger="ping_networks.test"):
        sink(ScanProgress.compute(3, 3, elapsed=1.0))
    assert [r.getMessage() for r in caplog.records][-1].startswith("Progress: 3/3")


def test_console_progress_writes_final_line():
    stream = io.StringIO()
    sink = ConsoleProgress(stream=stream, update_interval=3600)

    sink(ScanProgress.compute(1, 3, elapsed=1.0))
    sink(ScanProgress.compute(2, 3, elapsed=2.0))
    sink(ScanProgress.compute(3, 3, elapsed=3.0))

    output = stream.getvalue()
    assert "1/3" in output
    assert "2/3" not in output
    assert "3/3" in output
    assert output.endswith("\n")


def test_setup_logger_with_file(tmp_path):
    log_file = tmp_path / "logs" / "scan.log"
    log = setup_logger("ping_networks.filetest", "debug", str(log_file))
    log.debug("hello")
    for handler in log.handlers:
        handler.flush()

    assert log.level == logging.DEBUG
    assert "hello" in log_file.read_text(encoding="utf-8")
