"""navigation.py - Reading position, chapter starts and bookmarks for one book."""

import bisect
from typing import Iterable

from models import Chapter, TocEntry


def derive_chapter_starts(chapters: Iterable[Chapter]) -> list[int]:
    """Sorted, de-duplicated chapter start indices, always beginning at 0."""
    starts = sorted({ch.index for ch in chapters if ch.index >= 0})
    if not starts or starts[0] != 0:
        starts.insert(0, 0)
    return starts


class Navigation:
    """Cursor into a token stream plus the chapter table and bookmark set."""

    def __init__(
        self,
        length: int,
        chapters: Iterable[Chapter] = (),
        position: int = 0,
        bookmarks: Iterable[int] = (),
    ):
        self.length = max(0, length)
        self.chapters = list(chapters)
        self.chapter_starts = derive_chapter_starts(self.chapters)
        self._position = self._clamp(position)
        self._bookmarks = sorted({b for b in bookmarks if 0 <= b < self.length})

    def _clamp(self, index: int) -> int:
        if self.length == 0:
            return 0
        return max(0, min(self.length - 1, index))

    @property
    def position(self) -> int:
        return self._position

    @property
    def bookmarks(self) -> list[int]:
        return list(self._bookmarks)

    def current_chapter_starts(self) -> list[int]:
        return list(self.chapter_starts)

    def jump(self, delta: int) -> int:
        """Move by delta tokens, clamped to the stream. Returns the new position."""
        self._position = self._clamp(self._position + delta)
        return self._position

    def jump_to(self, index: int) -> int:
        return self.jump(index - self._position)

    def is_bookmarked(self, index: int | None = None) -> bool:
        index = self._position if index is None else index
        pos = bisect.bisect_left(self._bookmarks, index)
        return pos < len(self._bookmarks) and self._bookmarks[pos] == index

    def toggle_bookmark(self, index: int | None = None) -> bool:
        """Add or remove a bookmark (default: current position). Returns True if now bookmarked."""
        index = self._position if index is None else index
        if not 0 <= index < self.length:
            raise IndexError(f"Bookmark index {index} outside stream of length {self.length}")
        pos = bisect.bisect_left(self._bookmarks, index)
        if pos < len(self._bookmarks) and self._bookmarks[pos] == index:
            del self._bookmarks[pos]
            return False
        self._bookmarks.insert(pos, index)
        return True

    def current_chapter(self) -> Chapter | None:
        """The last chapter starting at or before the current position."""
        current = None
        for chapter in self.chapters:
            if chapter.index <= self._position:
                if current is None or chapter.index >= current.index:
                    current = chapter
        return current

    def percent_of(self, index: int) -> int:
        if self.length == 0:
            return 0
        return (index * 100) // self.length

    def progress_percent(self) -> int:
        return self.percent_of(self._position)

    def toc(self) -> list[TocEntry]:
        return [TocEntry(label=ch.label, index=ch.index, percent=self.percent_of(ch.index)) for ch in self.chapters]
