"""
Loguru logger configuration with runtime level control and deduplication
"""
from loguru import logger
import sys
import time
import threading
from pathlib import Path
from collections import deque
from typing import Any, Dict, List, Optional
from bargen.config import settings


VALID_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LogDeduplicationFilter:
    """Suppress duplicate log lines emitted from the same call site.

    A bar generator fed by a noisy gateway can log the same warning
    (e.g. a failing sink) for every tick. The filter remembers the last
    few (file, line, instrument) keys and drops a record when the same key
    was seen within the time threshold. The instrument comes from
    record["extra"]["vt_symbol"] (set with logger.bind), so one call site
    reporting on several instruments is not collapsed into one line.

    Example:
        12:00:00.010 | WARNING | ...watchdog:check:60 - rb2501_SHFE/CTP: latest bar ... stale  <- Allowed
        12:00:00.011 | WARNING | ...watchdog:check:60 - hc2501_SHFE/CTP: latest bar ... stale  <- Allowed
        12:00:00.020 | ERROR   | ...generator:_deliver:247 - on_bar sink failed for rb2501...  <- Allowed
        12:00:00.030 | ERROR   | ...generator:_deliver:247 - on_bar sink failed for rb2501...  <- Suppressed
    """

    def __init__(self, max_history: int = 5, time_threshold_seconds: float = 1.0):
        """Initialize deduplication filter.

        Args:
            max_history: Number of recent keys to remember
            time_threshold_seconds: Suppress duplicates within this window
        """
        self.max_history = max_history
        self.time_threshold = time_threshold_seconds
        # Each entry: ((file path, line number, vt_symbol), monotonic timestamp)
        self.recent_logs = deque(maxlen=max_history)
        self._lock = threading.Lock()

    def __call__(self, record: Dict[str, Any]) -> bool:
        """Return True to keep the record, False to drop it."""
        key = (
            record["file"].path,
            record["line"],
            record.get("extra", {}).get("vt_symbol"),
        )
        current_time = time.monotonic()

        with self._lock:
            for recent_key, recent_time in self.recent_logs:
                if recent_key == key and current_time - recent_time < self.time_threshold:
                    return False

            self.recent_logs.append((key, current_time))
            return True


class LoggerManager:
    """Manages the bargen logging sinks with runtime level control.

    Nothing is configured at import time. An application that wants the
    bargen console/file sinks calls logger_manager.setup_logger(); handlers
    registered elsewhere are left alone, only the sinks added here are
    replaced on reconfiguration.
    """

    def __init__(self):
        self.current_level = settings.LOGGER.default_level.upper()
        self.log_file_path: Optional[Path] = (
            Path(settings.LOGGER.file_path) if settings.LOGGER.file_path else None
        )
        self.log_rotation = settings.LOGGER.rotation
        self.log_retention = settings.LOGGER.retention

        self.filter_enabled = settings.LOGGER.filter_enabled
        self.filter_max_history = settings.LOGGER.filter_max_history
        self.filter_time_threshold = settings.LOGGER.filter_time_threshold_seconds

        self._handler_ids: List[int] = []

    def _make_filter(self) -> Optional[LogDeduplicationFilter]:
        """New filter for one sink (filters are not shared between sinks)"""
        if not self.filter_enabled:
            return None
        return LogDeduplicationFilter(
            max_history=self.filter_max_history,
            time_threshold_seconds=self.filter_time_threshold
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._handler_ids)

    def setup_logger(self):
        """Configure console and (optional) file sinks"""
        self.remove_sinks()

        self._handler_ids.append(logger.add(
            sys.stderr,
            level=self.current_level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            colorize=True,
            backtrace=True,
            diagnose=False,
            filter=self._make_filter()
        ))

        if self.log_file_path is not None:
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            self._handler_ids.append(logger.add(
                str(self.log_file_path),
                level="DEBUG",  # File always keeps DEBUG and above
                format=(
                    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                    "{level: <8} | "
                    "{name}:{function}:{line} - "
                    "{message}"
                ),
                rotation=self.log_rotation,
                retention=self.log_retention,
                compression="zip",
                backtrace=True,
                diagnose=False,
                enqueue=True,  # Safe across producer threads
                filter=self._make_filter()
            ))

        logger.debug(f"Logger initialized with level: {self.current_level}")

    def remove_sinks(self):
        """Remove the sinks added by setup_logger()"""
        if self._handler_ids:
            logger.complete()
        for handler_id in self._handler_ids:
            logger.remove(handler_id)
        self._handler_ids.clear()

    def set_level(self, level: str) -> str:
        """
        Change console log level at runtime

        Args:
            level: New log level (TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)

        Returns:
            The new log level

        Raises:
            ValueError: If level is invalid
        """
        level_upper = level.upper()
        if level_upper not in VALID_LEVELS:
            raise ValueError(f"Invalid level '{level}'. Choose from: {', '.join(VALID_LEVELS)}")

        old_level = self.current_level
        self.current_level = level_upper
        if self.is_configured:
            self.setup_logger()

        logger.info(f"Log level changed from {old_level} to {level_upper}")
        return self.current_level

    def get_level(self) -> str:
        """Get current log level"""
        return self.current_level


# Global logger manager instance (sinks are added by setup_logger())
logger_manager = LoggerManager()

__all__ = ["logger", "logger_manager", "LogDeduplicationFilter", "LoggerManager"]
