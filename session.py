"""session.py - One open book: token stream, position, bookmarks, rate and playback."""

import hashlib
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from context_window import MIN_LINE_CHARS, ContextWindow, compose
from models import BookMetadata, TocEntry
from navigation import Navigation
from orp import split_for_display
from parsers import ExtractResult, parse_file
from preferences import (
    WPM_STEP,
    Preferences,
    clamp_font_size,
    clamp_wpm,
    load_preferences,
    save_preferences,
)
from scheduler import PlaybackScheduler
from timers import ThreadingTimers

logger = logging.getLogger(__name__)

PROGRESS_KEY_PREFIX = "speedreader-progress-"


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to draw the current tick."""
    index: int
    length: int
    left: str
    center: str
    right: str
    wpm: int
    minutes_remaining: int | None
    progress_percent: int
    playing: bool
    alt_reading_mode: bool
    chapter: str | None = None
    toc: list[TocEntry] = field(default_factory=list)
    bookmarks: list[int] = field(default_factory=list)


def book_id_for(path: Path) -> str:
    """Stable identifier for a book file, derived from its contents."""
    digest = hashlib.sha1(Path(path).read_bytes()).hexdigest()
    return digest[:12]


def progress_key(book_id: str) -> str:
    return f"{PROGRESS_KEY_PREFIX}{book_id}"


def _valid_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ReadingSession:
    """
    Explicit state for one reading session.

    All mutations take the session lock, so the scheduler's timer thread and
    the caller's commands never interleave mid-update.
    """

    def __init__(
        self,
        book_id: str,
        result: ExtractResult,
        store,
        preferences: Preferences | None = None,
        timers=None,
        on_tick=None,
        on_stop=None,
    ):
        self.book_id = book_id
        self.tokens = tuple(result.tokens)
        self.chapters = list(result.chapters)
        self.metadata = result.metadata or BookMetadata(title=book_id, author="")
        self.store = store
        self.preferences = preferences or load_preferences(store)
        self.lock = threading.RLock()
        self.navigation = Navigation(len(self.tokens), self.chapters)
        self.scheduler = PlaybackScheduler(
            self, timers or ThreadingTimers(), on_tick=on_tick, on_stop=on_stop
        )

    # --- state ---

    @property
    def wpm(self) -> int:
        return self.preferences.wpm

    @property
    def position(self) -> int:
        return self.navigation.position

    @property
    def is_playing(self) -> bool:
        return self.scheduler.running

    # --- persistence ---

    def restore_progress(self) -> None:
        """Load saved position and bookmarks; anything malformed falls back to the start."""
        raw = self.store.get(progress_key(self.book_id))
        position, bookmarks = 0, []
        if isinstance(raw, dict):
            if _valid_index(raw.get("currentIndex")):
                position = raw["currentIndex"]
            if isinstance(raw.get("bookmarks"), list):
                bookmarks = [b for b in raw["bookmarks"] if _valid_index(b)]
        elif raw is not None:
            logger.warning("Ignoring malformed progress record for %s", self.book_id)
        with self.lock:
            self.navigation = Navigation(len(self.tokens), self.chapters, position, bookmarks)

    def save_progress(self) -> None:
        record = {"currentIndex": self.navigation.position, "bookmarks": self.navigation.bookmarks}
        self.store.set(progress_key(self.book_id), record)

    def save_preferences(self) -> None:
        save_preferences(self.store, self.preferences)

    # --- commands ---

    def play(self) -> bool:
        return self.scheduler.play()

    def pause(self) -> None:
        self.scheduler.pause()

    def toggle_play(self) -> bool:
        """Flip play/pause. Returns the new playing state."""
        with self.lock:
            if self.scheduler.running:
                self.scheduler.pause()
            else:
                self.scheduler.play()
            return self.scheduler.running

    def move_to(self, index: int) -> int:
        """Set the position without touching the timer (used by the scheduler tick)."""
        with self.lock:
            position = self.navigation.jump_to(index)
            self.save_progress()
            return position

    def jump(self, delta: int) -> int:
        with self.lock:
            position = self.navigation.jump(delta)
            self.save_progress()
            self.scheduler.reschedule()
            return position

    def jump_to(self, index: int) -> int:
        with self.lock:
            return self.jump(index - self.navigation.position)

    def jump_to_chapter(self, number: int) -> int:
        """Jump to the start of the 1-based chapter number."""
        if not 1 <= number <= len(self.chapters):
            raise IndexError(f"Chapter {number} out of range (book has {len(self.chapters)} chapters)")
        return self.jump_to(self.chapters[number - 1].index)

    def jump_to_bookmark(self, index: int) -> int:
        # Stale bookmarks clamp rather than fail
        return self.jump_to(index)

    def set_rate(self, wpm: int) -> int:
        with self.lock:
            self.preferences.wpm = max(0, wpm)
            self.save_preferences()
            self.scheduler.reschedule()
            return self.preferences.wpm

    def adjust_rate(self, delta: int = WPM_STEP) -> int:
        with self.lock:
            return self.set_rate(clamp_wpm(self.preferences.wpm + delta))

    def toggle_bookmark(self, index: int | None = None) -> bool:
        with self.lock:
            marked = self.navigation.toggle_bookmark(index)
            self.save_progress()
            return marked

    def toggle_alt_mode(self) -> bool:
        with self.lock:
            self.preferences.alt_reading_mode = not self.preferences.alt_reading_mode
            self.save_preferences()
            return self.preferences.alt_reading_mode

    def step_bookmark(self, direction: int) -> int | None:
        """Jump to the nearest bookmark after (direction > 0) or before the position."""
        with self.lock:
            position = self.navigation.position
            if direction > 0:
                targets = [b for b in self.navigation.bookmarks if b > position]
            else:
                targets = [b for b in reversed(self.navigation.bookmarks) if b < position]
            if not targets:
                return None
            return self.jump_to_bookmark(targets[0])

    def set_font_size(self, size: int) -> int:
        with self.lock:
            self.preferences.font_size = clamp_font_size(size)
            self.save_preferences()
            return self.preferences.font_size

    def close(self) -> None:
        """Cancel any pending tick and flush progress."""
        with self.lock:
            self.scheduler.pause()
            if self.tokens:
                self.save_progress()

    # --- views ---

    def minutes_remaining(self) -> int | None:
        if self.wpm <= 0:
            return None
        return (len(self.tokens) - self.navigation.position) // self.wpm

    def frame(self) -> Frame:
        with self.lock:
            nav = self.navigation
            token = self.tokens[nav.position] if self.tokens else ""
            left, center, right = split_for_display(token) if token else ("", "", "")
            chapter = nav.current_chapter()
            return Frame(
                index=nav.position,
                length=nav.length,
                left=left,
                center=center,
                right=right,
                wpm=self.wpm,
                minutes_remaining=self.minutes_remaining(),
                progress_percent=nav.progress_percent(),
                playing=self.scheduler.running,
                alt_reading_mode=self.preferences.alt_reading_mode,
                chapter=chapter.label if chapter else None,
                toc=nav.toc(),
                bookmarks=nav.bookmarks,
            )

    def context(self, max_line_chars: int) -> ContextWindow:
        with self.lock:
            return compose(self.tokens, self.navigation.position, max(MIN_LINE_CHARS, max_line_chars))


def open_book(
    path: Path,
    store,
    timers=None,
    resume: bool = True,
    show_progress: bool = False,
    on_tick=None,
    on_stop=None,
) -> ReadingSession:
    """
    Extract a book and build its session.

    EmptyContentError propagates before anything is stored, so a failed open
    leaves the caller's previous state untouched.
    """
    path = Path(path)
    result = parse_file(path, show_progress=show_progress)
    session = ReadingSession(
        book_id=book_id_for(path),
        result=result,
        store=store,
        timers=timers,
        on_tick=on_tick,
        on_stop=on_stop,
    )
    if resume:
        session.restore_progress()
    return session
