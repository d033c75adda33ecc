"""Command that runs a ROM in the terminal."""

from __future__ import annotations

import signal
import sys
from typing import Optional, Sequence

from .display import Display
from .machine import KeyInput, Machine, load_memory
from .options import UsageError, parse_options
from .terminal import Terminal

INTERPRETER_ROM = "interpreter_rom.rom"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the emulator; returns the process exit status."""
    try:
        options = parse_options(sys.argv[1:] if argv is None else list(argv))
    except UsageError as exc:
        sys.stderr.write(str(exc))
        sys.stderr.flush()
        return 1

    terminal = Terminal()
    display = Display()
    terminal.nonblocking()

    def wait_for_char() -> Optional[str]:
        terminal.blocking()
        try:
            return terminal.read_char()
        finally:
            terminal.nonblocking()

    machine: Optional[Machine] = None
    message = ""
    status = 0
    try:
        try:
            memory = load_memory(options.filename, INTERPRETER_ROM)
        except OSError as exc:
            message = f"{exc.filename}: {exc.strerror}"
            status = exc.errno or 1
        else:
            keys = KeyInput(terminal.read_char, wait_for_char, options.keymap or None)
            machine = Machine(memory, display, keys, options.debug_level)
            machine.start_timers()
            display.clear()
            machine.run(options.fps)
    except KeyboardInterrupt:
        status = int(signal.SIGINT)
    finally:
        if machine is not None:
            machine.stop_timers()
        terminal.restore()
        display.erase()

    if message:
        sys.stdout.write(message)
        sys.stdout.flush()
    return status