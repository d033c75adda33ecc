"""The 64x32 monochrome screen, drawn with terminal escape sequences."""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

ORIGIN_X = 6
ORIGIN_Y = 2
WIDTH = 64
HEIGHT = 32

TOP_LEFT = "┌"
HORIZONTAL = "─"
TOP_RIGHT = "┐"
VERTICAL = "│"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"

ON_PIXEL = "█"
OFF_PIXEL = " "
CURSOR_REST_X = 1
CURSOR_REST_Y = 37

_ROW_MASK = (1 << WIDTH) - 1


def rotate_right(value: int, n: int) -> int:
    """Rotate a 64-bit value right by n bits."""
    n %= WIDTH
    return ((value >> n) | (value << (WIDTH - n))) & _ROW_MASK


class Display:
    """Screen state as one 64-bit integer per row, mirrored to a text stream."""

    def __init__(self, out: Optional[TextIO] = None):
        self.out = sys.stdout if out is None else out
        self.rows = [0] * HEIGHT

    def _print_at(self, x: int, y: int, text: str) -> None:
        self.out.write(f"\x1b[{y};{x}H{text}")

    def clear(self) -> None:
        """Draw the frame, blank the screen and reset every pixel."""
        left, right = ORIGIN_X - 1, ORIGIN_X + WIDTH
        top, bottom = ORIGIN_Y - 1, ORIGIN_Y + HEIGHT
        self._print_at(left, top, TOP_LEFT)
        for x in range(ORIGIN_X, right):
            self._print_at(x, top, HORIZONTAL)
        self._print_at(right, top, TOP_RIGHT)
        for y in range(ORIGIN_Y, bottom):
            self._print_at(left, y, VERTICAL)
            for x in range(ORIGIN_X, right):
                self._print_at(x, y, " ")
            self._print_at(right, y, VERTICAL)
        self._print_at(left, bottom, BOTTOM_LEFT)
        for x in range(ORIGIN_X, right):
            self._print_at(x, bottom, HORIZONTAL)
        self._print_at(right, bottom, BOTTOM_RIGHT)
        self.rows = [0] * HEIGHT
        self.out.flush()

    def flip_sprite_row(self, x: int, y: int, data: int) -> bool:
        """XOR eight pixels of a sprite into row y at column x, wrapping round.

        Returns True when a lit pixel was turned off.
        """
        mask = rotate_right((data & 0xFF) << (WIDTH - 8), x)
        collision = bool(self.rows[y] & mask)
        self.rows[y] ^= mask
        self.update_line(y)
        return collision

    def update_line(self, y: int) -> None:
        """Redraw row y; the most significant bit is the leftmost pixel."""
        row = self.rows[y]
        text = "".join(
            ON_PIXEL if (row >> bit) & 1 else OFF_PIXEL
            for bit in reversed(range(WIDTH))
        )
        self._print_at(ORIGIN_X, ORIGIN_Y + y, text)
        self.out.flush()

    def print_registers(
        self, registers: Sequence[int], pc: int, index: int, hold: bool
    ) -> None:
        """Show the registers, program counter, index and waiting state."""
        for line in range(2):
            for column in range(8):
                number = line * 8 + column
                self._print_at(
                    1 + column * 8,
                    35 + line,
                    f"{number:x}: {registers[number]:02x}  ",
                )
        self._print_at(65, 35, f"p: {pc:03x}")
        self._print_at(65, 36, f"i: {index:03x}")
        self._print_at(71, 36, "[ HOLD ]" if hold else " " * 8)
        self.out.flush()

    def erase(self) -> None:
        """Erase the whole terminal screen."""
        self.out.write("\x1b[2J")
        self.out.flush()

    def rest_cursor(self) -> None:
        """Move the cursor below the screen."""
        self._print_at(CURSOR_REST_X, CURSOR_REST_Y, "")
        self.out.flush()