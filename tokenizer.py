"""tokenizer.py - Turn raw prose into an ordered list of display tokens."""

import re

from orp import decompose

DASHES = "—–"  # em dash, en dash

_FENCED_CODE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE = re.compile(r"`[^`]*`")
_IMAGE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_HEADING = re.compile(r"^\s{0,3}#+\s*", re.MULTILINE)
_BULLET = re.compile(r"^\s{0,3}[*+-]\s+", re.MULTILINE)
_NUMBERED = re.compile(r"^\s{0,3}\d+\.\s+", re.MULTILINE)
_BLOCKQUOTE = re.compile(r"^\s*>+\s?", re.MULTILINE)
_RULE = re.compile(r"-{3,}")

_DASH_BETWEEN_WORDS = re.compile(rf"([A-Za-z0-9])([{DASHES}])([A-Za-z0-9])")
_DASH = re.compile(rf"\s*([{DASHES}])\s*")
_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends."""
    return _WHITESPACE.sub(" ", text).strip()


def strip_markdown(text: str) -> str:
    """Remove block-level markdown markup, leaving a space where each construct was."""
    cleaned = _FENCED_CODE.sub(" ", text)
    cleaned = _INLINE_CODE.sub(" ", cleaned)
    cleaned = _IMAGE.sub(" ", cleaned)
    cleaned = _LINK.sub(r"\1", cleaned)
    # Line-anchored markers must go before newlines are collapsed
    cleaned = _HEADING.sub(" ", cleaned)
    cleaned = _BULLET.sub(" ", cleaned)
    cleaned = _NUMBERED.sub(" ", cleaned)
    cleaned = _BLOCKQUOTE.sub(" ", cleaned)
    cleaned = _RULE.sub(" ", cleaned)
    return _WHITESPACE.sub(" ", cleaned)


def normalize_words(text: str) -> list[str]:
    """
    Split text into display tokens.

    Em and en dashes always become their own token, whatever the source
    spacing. Only candidates that decompose to an empty core are dropped;
    a token with no letter or digit is its own core and stays.
    """
    normalized = _DASH_BETWEEN_WORDS.sub(r"\1\2 \3", text)
    normalized = _DASH.sub(r" \1 ", normalized)
    normalized = collapse_whitespace(normalized)
    if not normalized:
        return []
    return [word for word in normalized.split(" ") if decompose(word).core]
