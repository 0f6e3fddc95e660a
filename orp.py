"""orp.py - Word decomposition and optimal recognition point (ORP) layout."""

import re

from models import DecomposedToken

# leading punctuation / core word / trailing punctuation.
# An apostrophe that opens a word ('Tis, ’em) belongs to the core.
_WORD_SHAPE = re.compile(
    r"^([^A-Za-z0-9]*?)"
    r"((?:['’](?=[A-Za-z0-9]))?[A-Za-z0-9][A-Za-z0-9'’\-]*)"
    r"([^A-Za-z0-9]*)$"
)

# (max core length, ORP index)
ORP_STEPS = ((1, 0), (5, 1), (9, 2), (13, 3))
ORP_MAX = 4


def decompose(token: str) -> DecomposedToken:
    """Split a token into leading punctuation, core and trailing punctuation."""
    match = _WORD_SHAPE.match(token)
    if match is None:
        return DecomposedToken(leading="", core=token, trailing="")
    leading, core, trailing = match.groups()
    return DecomposedToken(leading=leading, core=core, trailing=trailing)


def orp_index(core: str) -> int:
    """Return the focal character index for a core of this length."""
    length = len(core)
    for max_length, index in ORP_STEPS:
        if length <= max_length:
            return index
    return ORP_MAX


def split_for_display(token: str) -> tuple[str, str, str]:
    """
    Return the (left, center, right) fragments the renderer aligns on.

    The center character is the ORP of the core; it is empty when the core is
    too short to reach the ORP index.
    """
    parts = decompose(token)
    core = parts.core or token
    orp = orp_index(core)
    left = parts.leading + core[:orp]
    center = core[orp] if orp < len(core) else ""
    right = core[orp + 1:] + parts.trailing
    return left, center, right
