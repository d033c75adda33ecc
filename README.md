# chipterm

A CHIP-8 emulator that runs in a POSIX terminal. The 64×32 display is drawn
with box-drawing characters and escape sequences. Key presses are read
straight from the keyboard.

## Installation

```
pip install .
```

## Usage

```
chipterm [OPTIONS] ROM
```

The emulator reads its low memory, including the font, from
`interpreter_rom.rom` in the current directory. It places the ROM directly
after that data and starts running at address `0x200`. All memory is kept in
the running process. Nothing is written to disk.

Options:

| Option | Meaning |
| --- | --- |
| `-d`, `--debug-level=LEVEL` | `0` turns the debug display off. Above `0`, the registers, program counter and index are shown below the screen, with `[ HOLD ]` while the program waits for a key. Above `2`, each return address is also shown at the top right. The default is `1`. |
| `-f`, `--fps=NUM` | The number of instructions run per second. The default is `60`. `0` removes the limit. |
| `-m`, `--inputmap=MAP` | Exactly 16 characters, used as the keys for `0x0` to `0xf`. If a character appears more than once, its first position counts. The default is `0123456789abcdef`. |
| `-h`, `--help` | Print the help text and exit with status 1. |

When the emulator exits, it restores the terminal's settings, shows the
cursor again and erases the screen. It stops when:

- it reads an opcode of `0000`, and exits with status 0;
- you press Ctrl-C, and it exits with status 2;
- it cannot open the ROM or `interpreter_rom.rom`. It then prints the file
  name and the reason, and exits with the error number.

Invalid options print a message to standard error and exit with status 1.

## Using it from Python

```python
import io

from chipterm.display import Display
from chipterm.machine import Machine

memory = bytearray(0x200) + bytes([0x60, 0x2A, 0x70, 0x01, 0x00, 0x00])
machine = Machine(memory, Display(io.StringIO()), debug_level=0)
machine.run(0)
print(machine.registers[0])  # 43
```

- `chipterm.options.parse_options(argv)` turns a list of arguments into an
  `Options` value, with the fields `debug_level`, `fps`, `filename` and
  `keymap`. It raises `UsageError` when the arguments cannot be used.
- `chipterm.machine.load_memory(rom_path, interpreter_path)` returns the
  interpreter image followed by the ROM, as a `bytearray`.
- `chipterm.machine.Machine` holds the registers, memory, call stack and
  timers. It provides `fetch`, `execute`, `step`, `run`, `tick_timers`,
  `start_timers` and `stop_timers`. An opcode that matches no instruction does
  nothing.
- `chipterm.machine.KeyInput` maps typed characters to key numbers, using two
  reading functions: one that returns at once and one that waits. A character
  that is not in the map stands for its own character code.
- `chipterm.display.Display` keeps the screen as one 64-bit integer per row.
  It writes the screen to any text stream.
- `chipterm.terminal.Terminal` switches a terminal between its original
  settings, non-blocking raw input and blocking raw input. Used as a context
  manager, it enters non-blocking mode and restores the original settings
  afterwards. It needs a real terminal on the file descriptor it is given.

## What it does not do

- The package does not include `interpreter_rom.rom`. You must supply that
  file, with the font data at the start of memory.
- Sound is the terminal bell, rung on each 60 Hz tick while the sound timer
  is running.
- It runs only on POSIX systems, because terminal control goes through
  `termios`.

## Running the tests

```
pip install .[test]
pytest
```