import pytest

from models import BookMetadata, Chapter
from parsers.base import ExtractResult
from session import ReadingSession
from storage import MemoryStore


class ManualTimers:
    """call_later/cancel fake: timers only fire when the test says so."""

    def __init__(self):
        self.pending = []
        self.cancelled = []

    def call_later(self, delay_seconds, callback):
        handle = {"delay": delay_seconds, "callback": callback}
        self.pending.append(handle)
        return handle

    def cancel(self, handle):
        if handle in self.pending:
            self.pending.remove(handle)
        self.cancelled.append(handle)

    @property
    def last_delay_ms(self):
        return round(self.pending[-1]["delay"] * 1000)

    def fire(self):
        handle = self.pending.pop(0)
        handle["callback"]()
        return handle


@pytest.fixture
def timers():
    return ManualTimers()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_session(timers, store):
    def _make(tokens, chapters=(), wpm=600, **kwargs):
        result = ExtractResult(
            tokens=tuple(tokens),
            chapters=[Chapter(label=f"Chapter {i}", index=idx) for i, idx in enumerate(chapters, start=1)],
            metadata=BookMetadata(title="Test Book", author="Tester", source_format="text"),
        )
        session = ReadingSession("book1", result, store, timers=timers, **kwargs)
        session.preferences.wpm = wpm
        return session

    return _make
