"""Terminal size detection and raw keyboard input on Unix terminals."""

from __future__ import annotations

import os
import re
import select
import termios
from collections.abc import Mapping

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def winsize_from_env(environ: Mapping[str, str] | None = None) -> tuple[int, int] | None:
    """Read (cols, rows) from COLUMNS and LINES, or None unless both are positive."""
    if environ is None:
        environ = os.environ
    cols = _atoi(environ["COLUMNS"]) if "COLUMNS" in environ else -1
    rows = _atoi(environ["LINES"]) if "LINES" in environ else -1
    if cols > 0 and rows > 0:
        return cols, rows
    return None


def get_size(fd: int = 0, environ: Mapping[str, str] | None = None) -> tuple[int, int] | None:
    """The (cols, rows) of the terminal on ``fd``, falling back to the environment."""
    try:
        size = os.get_terminal_size(fd)
    except (OSError, ValueError):
        return winsize_from_env(environ)
    return size.columns, size.lines


class RawTerminal:
    """Puts a terminal into raw, non-echoing mode and polls it for input.

    Signals from the keyboard stay enabled. On a descriptor that is not a
    terminal, entering and leaving do nothing.
    """

    def __init__(self, fd: int = 0) -> None:
        self.fd = fd
        self._saved: list | None = None
        self.active = False

    def enter(self) -> None:
        """Switch to raw mode, remembering the previous settings."""
        if self.active:
            return
        self.active = True
        try:
            saved = termios.tcgetattr(self.fd)
        except termios.error:
            self._saved = None
            return
        self._saved = saved

        iflag, oflag, cflag, lflag, ispeed, ospeed, cc = saved
        lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN)
        iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        cflag &= ~(termios.CSIZE | termios.PARENB)
        cflag |= termios.CS8
        oflag &= ~termios.OPOST
        cc = list(cc)
        cc[termios.VMIN] = 1
        cc[termios.VTIME] = 0
        termios.tcsetattr(
            self.fd, termios.TCSAFLUSH, [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]
        )

    def leave(self) -> None:
        """Restore the settings saved by :meth:`enter`."""
        if not self.active:
            return
        self.active = False
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._saved)
            self._saved = None

    def read(self, size: int = 1024) -> bytes:
        """Return up to ``size`` bytes that are ready now, without blocking."""
        readable, _, _ = select.select([self.fd], [], [], 0)
        if not readable:
            return b""
        return os.read(self.fd, size)

    def __enter__(self) -> RawTerminal:
        self.enter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.leave()