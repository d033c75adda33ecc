"""Raw terminal input modes."""

from __future__ import annotations

import os
import sys
import termios
from typing import Optional, TextIO

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"

_LFLAG = 3
_CC = 6


class Terminal:
    """Switches a terminal between its original, polling and waiting input modes."""

    def __init__(self, fd: Optional[int] = None, out: Optional[TextIO] = None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.out = sys.stdout if out is None else out
        self._original = termios.tcgetattr(self.fd)
        self._polling = self._derive(min_chars=0)
        self._waiting = self._derive(min_chars=1)

    def _derive(self, min_chars: int) -> list:
        attrs = [list(item) if isinstance(item, list) else item for item in self._original]
        attrs[_LFLAG] &= ~(termios.ICANON | termios.ECHO)
        attrs[_CC][termios.VMIN] = min_chars
        attrs[_CC][termios.VTIME] = 0
        return attrs

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def nonblocking(self) -> None:
        """Unbuffered, unechoed input where reads return at once; hides the cursor."""
        termios.tcsetattr(self.fd, termios.TCSANOW, self._polling)
        self._write(HIDE_CURSOR)

    def blocking(self) -> None:
        """Unbuffered, unechoed input where a read waits for one character."""
        termios.tcsetattr(self.fd, termios.TCSANOW, self._waiting)

    def restore(self) -> None:
        """Put back the original settings and show the cursor."""
        termios.tcsetattr(self.fd, termios.TCSANOW, self._original)
        self._write(SHOW_CURSOR)

    def read_char(self) -> Optional[str]:
        """Read one character, or return None when nothing is available."""
        data = os.read(self.fd, 1)
        if not data:
            return None
        return data.decode("latin-1")

    def __enter__(self) -> "Terminal":
        self.nonblocking()
        return self

    def __exit__(self, *args) -> None:
        self.restore()