import io

import pytest

from chipterm.display import (
    HEIGHT,
    HORIZONTAL,
    OFF_PIXEL,
    ON_PIXEL,
    WIDTH,
    Display,
    rotate_right,
)


@pytest.fixture
def display():
    return Display(io.StringIO())


def test_rotate_right_moves_low_bit_to_top():
    assert rotate_right(1, 1) == 1 << 63


def test_rotate_right_zero_is_identity():
    assert rotate_right(0xDEADBEEF, 0) == 0xDEADBEEF


@pytest.mark.parametrize("n", [1, 7, 32, 60, 63])
def test_rotate_right_round_trip(n):
    value = 0x0123456789ABCDEF
    rotated = rotate_right(value, n)
    assert rotated < 1 << 64
    assert rotate_right(rotated, WIDTH - n) == value
    assert bin(rotated).count("1") == bin(value).count("1")


def test_clear_draws_frame_and_resets(display):
    display.rows[3] = 5
    display.clear()
    text = display.out.getvalue()
    assert text.startswith("\x1b[1;5H┌")
    assert text.count(HORIZONTAL) == 2 * WIDTH
    assert display.rows == [0] * HEIGHT


def test_flip_twice_collides_and_restores(display):
    assert display.flip_sprite_row(10, 4, 0xF0) is False
    assert display.rows[4] != 0
    assert display.flip_sprite_row(10, 4, 0xF0) is True
    assert display.rows[4] == 0


def test_flip_at_left_edge(display):
    display.flip_sprite_row(0, 0, 0xFF)
    line = display.out.getvalue().split("H")[-1]
    assert line == ON_PIXEL * 8 + OFF_PIXEL * 56


def test_flip_wraps_round(display):
    display.flip_sprite_row(60, 2, 0xFF)
    line = display.out.getvalue().split("H")[-1]
    assert line == ON_PIXEL * 4 + OFF_PIXEL * 56 + ON_PIXEL * 4
    assert display.out.getvalue().startswith("\x1b[4;6H")


def test_print_registers(display):
    registers = list(range(16))
    display.print_registers(registers, 0x200, 0x50, True)
    text = display.out.getvalue()
    assert "\x1b[35;1H0: 00  " in text
    assert "p: 200" in text
    assert "[ HOLD ]" in text


def test_print_registers_without_hold(display):
    display.print_registers([0] * 16, 0, 0, False)
    assert "HOLD" not in display.out.getvalue()


def test_erase_and_rest_cursor(display):
    display.erase()
    display.rest_cursor()
    assert display.out.getvalue() == "\x1b[2J\x1b[37;1H"