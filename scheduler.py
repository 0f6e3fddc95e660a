"""scheduler.py - Timer-driven playback loop that advances the reading position."""

import bisect
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, NamedTuple, Sequence

from pacing import delay_ms

if TYPE_CHECKING:
    from session import ReadingSession

logger = logging.getLogger(__name__)


class PlayState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class Step(NamedTuple):
    index: int
    chapter_skip: bool


def next_step(position: int, length: int, chapter_starts: Sequence[int]) -> Step | None:
    """
    Where playback goes after the token at position, or None at end of book.

    With more than one chapter, the last token of a chapter hands straight
    over to the next chapter's first token. A single-chapter book always
    advances by one.
    """
    if length == 0 or position >= length - 1:
        return None
    if len(chapter_starts) > 1:
        pos = bisect.bisect_right(chapter_starts, position)
        if pos < len(chapter_starts):
            next_start = chapter_starts[pos]
            if position >= next_start - 1:
                return Step(next_start, True)
    return Step(position + 1, False)


class PlaybackScheduler:
    """
    Single-timer playback loop for one reading session.

    Every scheduled tick owns a generation number. Cancelling bumps the
    generation, so a tick whose timer fires after cancellation is a no-op and
    at most one tick is ever live.
    """

    def __init__(
        self,
        session: "ReadingSession",
        timers: Any,
        on_tick: Callable[[Step], None] | None = None,
        on_stop: Callable[[], None] | None = None,
    ):
        self.session = session
        self.timers = timers
        self.on_tick = on_tick
        self.on_stop = on_stop
        self.state = PlayState.STOPPED
        self._handle = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self.state is PlayState.RUNNING

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def play(self) -> bool:
        """Start playback. Returns False when already running or nothing can play."""
        with self.session.lock:
            if self.running:
                return False
            if self.session.wpm <= 0 or not self.session.tokens:
                return False
            self.state = PlayState.RUNNING
            self._schedule()
            return True

    def pause(self) -> None:
        with self.session.lock:
            self._cancel()
            self.state = PlayState.STOPPED

    def reschedule(self) -> None:
        """Drop any pending tick and, if still running, time the current token afresh."""
        with self.session.lock:
            self._cancel()
            if self.running:
                self._schedule()

    def _cancel(self) -> None:
        if self._handle is not None:
            self.timers.cancel(self._handle)
            self._handle = None
        self._generation += 1

    def _schedule(self) -> None:
        self._cancel()
        wpm = self.session.wpm
        tokens = self.session.tokens
        if wpm <= 0 or not tokens:
            # Rate 0 keeps the play flag but never advances
            return
        delay = delay_ms(tokens[self.session.navigation.position], wpm)
        generation = self._generation
        self._handle = self.timers.call_later(delay / 1000, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        with self.session.lock:
            if generation != self._generation or not self.running:
                return
            self._handle = None
            nav = self.session.navigation
            step = next_step(nav.position, nav.length, nav.chapter_starts)
            if step is None:
                self.state = PlayState.STOPPED
                logger.debug("Reached end of book at index %d", nav.position)
                if self.on_stop:
                    self.on_stop()
                return
            self.session.move_to(step.index)
            self._schedule()
            if self.on_tick:
                self.on_tick(step)
