"""Single-keypress reader for the terminal frontend.

Maps arrow keys, WASD and command letters to action strings without
requiring Enter. Works on macOS / Linux (tty+termios) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys
import time
from typing import Callable

# -- key mapping ---------------------------------------------------------------

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "r": "restart",
    "n": "hint",
    "m": "smart",
    "u": "undo",
    "v": "solve",
    "\r": "enter",
    "\n": "enter",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}


def resolve(ch: str) -> str:
    """Map a raw character to its action string.

    Letters are case-insensitive; unmapped printable characters come back
    unchanged and anything else maps to ``""``.
    """
    action = _KEY_MAP.get(ch) or _KEY_MAP.get(ch.lower())
    if action:
        return action
    return ch if ch.isprintable() else ""


def resolve_escape(tail: str) -> str:
    """Map the bytes following ESC: ``[A`` .. ``[D`` are arrows, nothing is quit."""
    if not tail:
        return "quit"
    if tail[0] != "[":
        return "quit"
    return _ARROW_MAP.get(tail[1:2], "")


def read_escape_tail(read_byte: Callable[[], str], pending: Callable[[], bool]) -> str:
    """Collect up to two bytes after ESC while more input is pending.

    Stops after the first byte unless it opens a ``[`` sequence, so a key
    typed right after a bare Escape is not swallowed.
    """
    tail = ""
    while len(tail) < 2 and pending():
        tail += read_byte()
        if not tail.startswith("["):
            break
    return tail


# -- platform readers ----------------------------------------------------------


def _read_unix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)

    def ready(wait: float | None) -> bool:
        return bool(select.select([fd], [], [], wait)[0])

    try:
        tty.setraw(fd)
        if timeout is not None and not ready(timeout):
            return None

        # os.read is unbuffered, so select() still sees the rest of an
        # escape sequence.
        ch = os.read(fd, 1).decode("utf-8", errors="ignore")
        if ch != "\x1b":
            return resolve(ch)

        def read_byte() -> str:
            return os.read(fd, 1).decode("utf-8", errors="ignore")

        return resolve_escape(read_escape_tail(read_byte, lambda: ready(0.1)))
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    if timeout is not None:
        end = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= end:
                return None
            time.sleep(0.02)
    return resolve(msvcrt.getch().decode("utf-8", errors="ignore"))


_read = _read_windows if os.name == "nt" else _read_unix


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Block until a key is pressed and return its action string.

    Possible return values:
        "up", "down", "left", "right"  — movement
        "quit"                         — q / Ctrl-C / Escape
        "restart"                      — r
        "hint"                         — n (highlight next move)
        "smart"                        — m (apply smart move)
        "undo"                         — u
        "solve"                        — v (auto-solve)
        "enter"                        — Enter / Return
        "<char>"                       — unmapped printable char
        ""                             — unrecognised key
    """
    key = _read(None)
    return key or ""


def get_key_timeout(timeout: float) -> str | None:
    """Like ``get_key`` but return ``None`` after *timeout* seconds idle."""
    return _read(timeout)
