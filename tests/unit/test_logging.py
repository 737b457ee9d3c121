"""Unit Tests for logging setup

Covers LogDeduplicationFilter suppression keys and LoggerManager sink
ownership and runtime level control.
"""
import importlib
import pytest
from datetime import datetime, timedelta
from types import SimpleNamespace
from unittest.mock import patch

from bargen.bar_generation.state import GeneratorState
from bargen.bar_generation.tick_aggregator import TickAggregator
from bargen.bar_generation.watchdog import StaleBarWatchdog
from bargen.logger import LogDeduplicationFilter, LoggerManager, logger, logger_manager
from tests.fixtures.market_data import create_tick


def make_record(path="bargen/bar_generation/generator.py", line=212, vt_symbol=None):
    """Minimal stand-in for a loguru record dict."""
    extra = {} if vt_symbol is None else {"vt_symbol": vt_symbol}
    return {"file": SimpleNamespace(path=path), "line": line, "extra": extra}


@pytest.fixture
def host_records():
    """A handler registered by the host application before bargen configures anything."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(handler_id)


class TestLogDeduplicationFilter:

    def test_first_record_allowed(self):
        dedup = LogDeduplicationFilter()
        assert dedup(make_record()) is True

    def test_repeat_from_same_line_suppressed(self):
        dedup = LogDeduplicationFilter(time_threshold_seconds=1.0)

        with patch("bargen.logger.time.monotonic", side_effect=[100.0, 100.2, 100.4]):
            results = [dedup(make_record()) for _ in range(3)]

        assert results == [True, False, False]

    def test_repeat_after_threshold_allowed(self):
        dedup = LogDeduplicationFilter(time_threshold_seconds=1.0)

        with patch("bargen.logger.time.monotonic", side_effect=[100.0, 101.5]):
            assert dedup(make_record()) is True
            assert dedup(make_record()) is True

    def test_different_lines_not_suppressed(self):
        dedup = LogDeduplicationFilter()

        assert all(dedup(make_record(line=line)) for line in (10, 11, 12))

    def test_same_line_in_different_files_not_suppressed(self):
        dedup = LogDeduplicationFilter()

        assert dedup(make_record(path="a.py", line=5)) is True
        assert dedup(make_record(path="b.py", line=5)) is True

    def test_same_line_for_different_instruments_not_suppressed(self):
        dedup = LogDeduplicationFilter()

        with patch("bargen.logger.time.monotonic", return_value=100.0):
            assert dedup(make_record(vt_symbol="rb2501_SHFE/CTP")) is True
            assert dedup(make_record(vt_symbol="hc2501_SHFE/CTP")) is True
            assert dedup(make_record(vt_symbol="rb2501_SHFE/CTP")) is False

    def test_history_is_bounded(self):
        dedup = LogDeduplicationFilter(max_history=2)

        with patch("bargen.logger.time.monotonic", return_value=100.0):
            dedup(make_record(line=1))
            dedup(make_record(line=2))
            dedup(make_record(line=3))
            # line 1 fell out of the history
            assert dedup(make_record(line=1)) is True
            assert dedup(make_record(line=3)) is False

    def test_stale_warnings_for_several_instruments_all_pass(self):
        dedup = LogDeduplicationFilter(time_threshold_seconds=60.0)
        kept = []
        handler_id = logger.add(
            lambda message: kept.append(message.record),
            level="WARNING",
            filter=dedup,
        )
        try:
            watchdog = StaleBarWatchdog()
            start = datetime(2025, 1, 6, 9, 30)
            for symbol in ("rb2501", "hc2501", "i2505"):
                state = GeneratorState()
                tick = create_tick(start, 10.0).model_copy(update={"symbol": symbol})
                TickAggregator().ingest(state, tick)
                watchdog.check(state, start + timedelta(minutes=5))
        finally:
            logger.remove(handler_id)

        assert [r["extra"]["vt_symbol"].split("_")[0] for r in kept] == ["rb2501", "hc2501", "i2505"]


class TestLoggerManager:

    @pytest.fixture(autouse=True)
    def restore_level(self):
        original = logger_manager.get_level()
        yield
        logger_manager.set_level(original)

    def test_import_adds_no_sinks(self):
        assert logger_manager.is_configured is False
        assert logger_manager.log_file_path is None

    def test_host_handler_survives_module_import(self, host_records):
        import bargen.logger

        importlib.reload(bargen.logger)
        logger.info("host message")

        assert "host message" in [r["message"] for r in host_records]
        assert bargen.logger.logger_manager.is_configured is False

    def test_host_handler_survives_manager(self, host_records):
        manager = LoggerManager()
        logger.info("before setup")

        manager.setup_logger()
        manager.set_level("WARNING")
        logger.info("after setup")
        manager.remove_sinks()

        messages = [r["message"] for r in host_records]
        assert "before setup" in messages
        assert "after setup" in messages

    def test_remove_sinks_only_removes_own(self, host_records):
        manager = LoggerManager()
        manager.setup_logger()
        assert manager.is_configured

        manager.remove_sinks()
        logger.info("still delivered")

        assert manager.is_configured is False
        assert "still delivered" in [r["message"] for r in host_records]

    def test_file_sink_only_when_configured(self, tmp_path):
        manager = LoggerManager()
        manager.log_file_path = tmp_path / "logs" / "bargen.log"

        manager.setup_logger()
        logger.warning("written to file")
        manager.remove_sinks()

        assert "written to file" in manager.log_file_path.read_text()

    def test_set_level_case_insensitive(self):
        assert logger_manager.set_level("debug") == "DEBUG"
        assert logger_manager.get_level() == "DEBUG"

    def test_invalid_level_rejected(self):
        with pytest.raises(ValueError):
            logger_manager.set_level("VERBOSE")
