"""pacing.py - Per-token display delay from a WPM rate and trailing punctuation."""

import math
import re

from orp import decompose

SENTENCE_MULTIPLIER = 2.6
CLAUSE_MULTIPLIER = 1.9    # colon, semicolon
COMMA_MULTIPLIER = 1.4
DASH_MULTIPLIER = 1.6

_CLOSERS = re.compile(r"[\"'”’)\]}»]+$")
_SENTENCE_END = re.compile(r"[.?!…]+$")
_CLAUSE_END = re.compile(r"[:;]+$")
_COMMA_END = re.compile(r",+$")
_DASH = re.compile(r"—|–|--")


def pause_multiplier(token: str) -> float:
    """Pick the slowdown factor for a token; the first matching rule wins."""
    trailing = _CLOSERS.sub("", decompose(token).trailing)
    if _SENTENCE_END.search(trailing):
        return SENTENCE_MULTIPLIER
    if _CLAUSE_END.search(trailing):
        return CLAUSE_MULTIPLIER
    if _COMMA_END.search(trailing):
        return COMMA_MULTIPLIER
    if _DASH.search(token):
        return DASH_MULTIPLIER
    return 1.0


def base_interval_ms(wpm: int) -> float:
    if wpm <= 0:
        return math.inf
    return 60000 / wpm


def delay_ms(token: str, wpm: int) -> float:
    """
    Milliseconds to show a token at the given rate.

    Returns math.inf for a non-positive rate; callers treat that as "do not
    schedule". Otherwise the result is rounded to whole milliseconds.
    """
    interval = base_interval_ms(wpm)
    if math.isinf(interval):
        return interval
    return round(interval * pause_multiplier(token))
