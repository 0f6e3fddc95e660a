"""controls.py - Terminal keypresses mapped onto reading-session commands."""

import os
import select
import sys
import termios
import time

from preferences import WPM_STEP

QUIT = "quit"

# Arrow keys arrive as escape sequences; shift and ctrl add a modifier field.
RIGHT, LEFT, UP, DOWN = "\x1b[C", "\x1b[D", "\x1b[A", "\x1b[B"
SHIFT_RIGHT, SHIFT_LEFT = "\x1b[1;2C", "\x1b[1;2D"
CTRL_RIGHT, CTRL_LEFT = "\x1b[1;5C", "\x1b[1;5D"
ESCAPE = "\x1b"

KEY_BINDINGS = {
    " ": ("toggle_play",),
    RIGHT: ("jump", 1),
    LEFT: ("jump", -1),
    SHIFT_RIGHT: ("jump", 10),
    SHIFT_LEFT: ("jump", -10),
    CTRL_RIGHT: ("jump", 50),
    CTRL_LEFT: ("jump", -50),
    "l": ("jump", 1),
    "h": ("jump", -1),
    "L": ("jump", 10),
    "H": ("jump", -10),
    "]": ("jump", 50),
    "[": ("jump", -50),
    UP: ("adjust_rate", WPM_STEP),
    DOWN: ("adjust_rate", -WPM_STEP),
    "k": ("adjust_rate", WPM_STEP),
    "j": ("adjust_rate", -WPM_STEP),
    "b": ("toggle_bookmark",),
    "n": ("step_bookmark", 1),
    "p": ("step_bookmark", -1),
    "a": ("toggle_alt_mode",),
    "q": (QUIT,),
    ESCAPE: (QUIT,),
}

KEY_HELP = (
    "space play/pause | ←/→ h/l ±1 | shift ±10 or H/L | ctrl ±50 or [/] | "
    "↑/↓ k/j rate ±10 | b bookmark | n/p next/prev bookmark | a alt mode | q quit"
)


def handle_key(session, key: str) -> bool:
    """Run the command bound to key. Returns False when the key asks to quit."""
    binding = KEY_BINDINGS.get(key)
    if binding is None:
        return True
    name, *args = binding
    if name == QUIT:
        return False
    getattr(session, name)(*args)
    return True


class KeyReader:
    """
    Read single keypresses from a terminal in cbreak mode.

    Echo and line buffering are switched off on entry and restored on exit.
    When the stream is not a terminal nothing is changed and read() only waits.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.fd = None
        self._saved = None

    def __enter__(self):
        if self.stream.isatty():
            self.fd = self.stream.fileno()
            self._saved = termios.tcgetattr(self.fd)
            mode = termios.tcgetattr(self.fd)
            mode[3] = mode[3] & ~(termios.ECHO | termios.ICANON)
            termios.tcsetattr(self.fd, termios.TCSANOW, mode)
        return self

    def __exit__(self, *exc_info):
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None
        return False

    @property
    def interactive(self) -> bool:
        return self.fd is not None

    def read(self, timeout: float) -> str | None:
        """Next key or escape sequence, or None if nothing arrived within timeout."""
        if self.fd is None:
            time.sleep(timeout)
            return None
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        return os.read(self.fd, 8).decode(errors="ignore")
