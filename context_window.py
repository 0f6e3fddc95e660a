"""context_window.py - Greedy line-wrapped text around the current token."""

import math
from dataclasses import dataclass, field
from typing import Sequence

from models import ContextLine

LINES_BEFORE = 3
LINES_AFTER = 3
MIN_LINE_CHARS = 18
AVG_CHAR_WIDTH_RATIO = 0.55   # average glyph width relative to font size
HORIZONTAL_PADDING_PX = 48


@dataclass(frozen=True)
class ContextWindow:
    before: list[ContextLine] = field(default_factory=list)
    after: list[ContextLine] = field(default_factory=list)


def _fill_line(tokens: Sequence[str], start: int, step: int, max_line_chars: int) -> tuple[list[str], int]:
    """Consume tokens from start in direction step until the line is full."""
    line: list[str] = []
    length = 0
    idx = start
    while 0 <= idx < len(tokens):
        word = tokens[idx]
        add = len(word) + (1 if length > 0 else 0)
        if length + add > max_line_chars and length > 0:
            break
        line.append(word)
        length += add
        idx += step
    if step < 0:
        line.reverse()
    return line, idx


def compose(
    tokens: Sequence[str],
    current_index: int,
    max_line_chars: int,
    lines_before: int = LINES_BEFORE,
    lines_after: int = LINES_AFTER,
) -> ContextWindow:
    """
    Build the lines shown above and below the current token.

    Lines are filled greedily outward from the current token. A token longer
    than max_line_chars still gets a line of its own. Each line records its
    distance from the current token (1 = adjacent); "before" lines come back
    in reading order, so the nearest one is last.
    """
    if not tokens:
        return ContextWindow()

    before: list[ContextLine] = []
    idx = current_index - 1
    for distance in range(1, lines_before + 1):
        if idx < 0:
            break
        words, idx = _fill_line(tokens, idx, -1, max_line_chars)
        before.append(ContextLine(text=" ".join(words), distance=distance))
    before.reverse()

    after: list[ContextLine] = []
    idx = current_index + 1
    for distance in range(1, lines_after + 1):
        if idx >= len(tokens):
            break
        words, idx = _fill_line(tokens, idx, 1, max_line_chars)
        after.append(ContextLine(text=" ".join(words), distance=distance))

    return ContextWindow(before=before, after=after)


def line_chars_for_width(width_px: float, font_size: float) -> int:
    """Estimate how many characters fit on a context line of the given pixel width."""
    avg_char_width = font_size * AVG_CHAR_WIDTH_RATIO
    return max(MIN_LINE_CHARS, math.floor((width_px - HORIZONTAL_PADDING_PX) / avg_char_width))
