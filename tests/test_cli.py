import copy
import errno
import os
import sys
import termios

import pytest

from chipterm.cli import INTERPRETER_ROM, main
from chipterm.terminal import SHOW_CURSOR

ORIGINAL = [0, 0, 0, termios.ICANON | termios.ECHO, 0, 0, [b"\x01"] * termios.NCCS]


@pytest.fixture
def tty_stdin(monkeypatch):
    monkeypatch.setattr(termios, "tcgetattr", lambda fd: copy.deepcopy(ORIGINAL))
    monkeypatch.setattr(termios, "tcsetattr", lambda fd, when, attrs: None)
    read_fd, write_fd = os.pipe()
    stdin_file = os.fdopen(read_fd, "r")
    monkeypatch.setattr(sys, "stdin", stdin_file)
    yield stdin_file
    stdin_file.close()
    os.close(write_fd)


def test_help_exits_with_usage(capsys):
    assert main(["-h"]) == 1
    assert "Usage:" in capsys.readouterr().err


def test_missing_rom_argument(capsys):
    assert main([]) == 1
    assert "ROM is not optional" in capsys.readouterr().err


def test_bad_input_map(capsys):
    assert main(["-m", "abc", "game.ch8"]) == 1
    assert "MAP must be exactly 16 characters long" in capsys.readouterr().err


def test_missing_rom_file(tmp_path, monkeypatch, capsys, tty_stdin):
    monkeypatch.chdir(tmp_path)
    missing = str(tmp_path / "missing.ch8")
    assert main([missing]) == errno.ENOENT
    out = capsys.readouterr().out
    assert f"{missing}: " in out
    assert SHOW_CURSOR in out


def test_missing_interpreter(tmp_path, monkeypatch, capsys, tty_stdin):
    monkeypatch.chdir(tmp_path)
    rom = tmp_path / "game.ch8"
    rom.write_bytes(b"\x00\x00")
    assert main([str(rom)]) == errno.ENOENT
    assert f"{INTERPRETER_ROM}: " in capsys.readouterr().out


def test_runs_rom_to_completion(tmp_path, monkeypatch, capsys, tty_stdin):
    monkeypatch.chdir(tmp_path)
    (tmp_path / INTERPRETER_ROM).write_bytes(bytes(0x200))
    rom = tmp_path / "game.ch8"
    rom.write_bytes(b"\x6a\x05\x00\x00")
    assert main(["-f", "0", "-d", "0", str(rom)]) == 0
    out = capsys.readouterr().out
    assert "┌" in out
    assert out.index(SHOW_CURSOR) > out.index("┌")