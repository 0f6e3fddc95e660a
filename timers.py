"""timers.py - Cancellable one-shot timers for the playback scheduler."""

import threading
from typing import Callable


class ThreadingTimers:
    """call_later/cancel pair backed by daemon threading.Timer objects."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_seconds, callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, handle: threading.Timer) -> None:
        handle.cancel()
