"""Background threads"""
from bargen.threads.watchdog_thread import WatchdogThread

__all__ = ["WatchdogThread"]
