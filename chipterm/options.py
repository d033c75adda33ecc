"""Command-line option parsing for the emulator."""

from __future__ import annotations

import getopt
import re
from dataclasses import dataclass, field
from typing import Optional

HELP_MESSAGE = """Usage: chipterm [OPTIONS] ROM
Emulate the chip8 ROM

  -d, --debug-level=LEVEL  set debug level to LEVEL. default 1.
                           0  -> disable
                           >0 -> show registers
                           >2 -> show callstack on return
  -f, --fps=NUM            limits the framerate of emulation to NUM; default 60.
                           set to 0 for no framerate limit.
  -h, --help               show this help
  -m, --inputmap=MAP       MAP must be exactly 16 characters. default 0123456789abcdef
                           You can use these characters as key intead of 0x0-0xf
"""

_INTEGER_PREFIX = re.compile(r"\s*[+-]?\d+")


class UsageError(Exception):
    """Raised when the command line cannot be used; the message is for the user."""


@dataclass
class Options:
    """Settings chosen on the command line."""

    debug_level: int = 1
    fps: int = 60
    filename: Optional[str] = None
    keymap: dict[str, int] = field(default_factory=dict)


def _leading_int(value: str, message: str) -> int:
    match = _INTEGER_PREFIX.match(value)
    if match is None:
        raise UsageError(message)
    return int(match.group())


def parse_options(argv: list[str]) -> Options:
    """Parse the arguments that follow the program name."""
    try:
        pairs, positional = getopt.gnu_getopt(
            argv, "hd:f:m:", ["debug-level=", "fps=", "help", "inputmap="]
        )
    except getopt.GetoptError:
        raise UsageError(HELP_MESSAGE) from None
    options = Options()
    for name, value in pairs:
        if name in ("-d", "--debug-level"):
            options.debug_level = _leading_int(value, "Debug level must be an integer")
        elif name in ("-f", "--fps"):
            options.fps = _leading_int(value, "fps must be an integer")
        elif name in ("-m", "--inputmap"):
            if len(value) != 16:
                raise UsageError("MAP must be exactly 16 characters long")
            options.keymap = {}
            for key, char in enumerate(value):
                options.keymap.setdefault(char, key)
        else:
            raise UsageError(HELP_MESSAGE)
    if not positional:
        raise UsageError("chipterm: ROM is not optional.\n" + HELP_MESSAGE)
    options.filename = positional[0]
    return options