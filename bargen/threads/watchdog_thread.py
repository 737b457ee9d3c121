"""Watchdog Thread for Stale Minute Bars

Background scheduler that periodically runs the stale-bar check of every
registered BarGenerator. The generators do not depend on it; any timer or
event loop that calls check_stale_bar() works as well.
"""
import threading
from typing import Iterable, List, Optional

from bargen.config import settings
from bargen.logger import logger
from bargen.bar_generation.generator import BarGenerator


class WatchdogThread:
    """Daemon thread driving BarGenerator.check_stale_bar().

    Errors raised by one generator are logged and do not stop the loop
    or the checks of the other generators.
    """

    def __init__(
        self,
        generators: Optional[Iterable[BarGenerator]] = None,
        interval_seconds: Optional[float] = None
    ):
        """Initialize watchdog thread.

        Args:
            generators: Generators to check each cycle
            interval_seconds: Seconds between cycles (defaults to settings)
        """
        self._generators: List[BarGenerator] = list(generators or [])
        self._generators_lock = threading.Lock()

        self._interval = (
            interval_seconds
            if interval_seconds is not None
            else settings.BAR_GENERATOR.watchdog_interval_seconds
        )

        # Thread control
        self._thread: Optional[threading.Thread] = None
        self._shutdown = threading.Event()

        self.cycles = 0
        self.forced_bars = 0

        logger.info(
            f"WatchdogThread initialized: interval={self._interval}s, "
            f"generators={len(self._generators)}"
        )

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def add_generator(self, generator: BarGenerator) -> None:
        with self._generators_lock:
            if generator not in self._generators:
                self._generators.append(generator)

    def remove_generator(self, generator: BarGenerator) -> None:
        with self._generators_lock:
            if generator in self._generators:
                self._generators.remove(generator)

    def start(self) -> None:
        """Start the watchdog thread."""
        if self.is_running:
            logger.warning("WatchdogThread already running")
            return

        self._shutdown.clear()

        self._thread = threading.Thread(
            target=self._watchdog_worker,
            name="BarWatchdogThread",
            daemon=True
        )
        self._thread.start()

        logger.info("WatchdogThread started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the watchdog thread.

        Args:
            timeout: Maximum seconds to wait for the thread to exit
        """
        if self._thread is None:
            return

        self._shutdown.set()
        self._thread.join(timeout=timeout)

        if self._thread.is_alive():
            # is_running stays True, so start() refuses until the worker exits
            logger.warning("WatchdogThread did not stop within timeout")
            return

        self._thread = None
        logger.info("WatchdogThread stopped")

    def run_cycle(self) -> int:
        """Check every registered generator once.

        Returns:
            Number of bars force-emitted in this cycle
        """
        with self._generators_lock:
            generators = list(self._generators)

        forced = 0
        for generator in generators:
            try:
                if generator.check_stale_bar():
                    forced += 1
            except Exception as e:
                logger.error(f"Stale bar check failed for {generator!r}: {e}")

        self.cycles += 1
        self.forced_bars += forced
        return forced

    def _watchdog_worker(self) -> None:
        logger.debug("WatchdogThread worker started")
        try:
            while not self._shutdown.is_set():
                self.run_cycle()
                self._shutdown.wait(self._interval)
        finally:
            logger.debug("WatchdogThread worker exiting")
