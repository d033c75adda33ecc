"""The CHIP-8 processor: memory, registers, timers and instructions."""

from __future__ import annotations

import random
import threading
from typing import Callable, Mapping, Optional

from .display import HEIGHT, WIDTH, Display

PROGRAM_START = 0x200
TIMER_PERIOD = 0.016667
DEFAULT_KEYMAP = {char: key for key, char in enumerate("0123456789abcdef")}


def load_memory(rom_path, interpreter_path) -> bytearray:
    """Build memory from the interpreter image followed by the ROM."""
    with open(rom_path, "rb") as rom_file:
        rom = rom_file.read()
    with open(interpreter_path, "rb") as interpreter_file:
        return bytearray(interpreter_file.read() + rom)


class KeyInput:
    """Maps typed characters to CHIP-8 keys and remembers unmatched presses."""

    def __init__(self, read_nonblocking: Callable[[], Optional[str]],
                 read_blocking: Callable[[], Optional[str]],
                 keymap: Optional[Mapping[str, int]] = None):
        self._poll = read_nonblocking
        self._wait = read_blocking
        self.keymap = dict(DEFAULT_KEYMAP if keymap is None else keymap)
        self._pending: set[int] = set()

    def translate(self, char: str) -> int:
        """Key number for a character; unmapped characters stand for themselves."""
        return self.keymap.get(char, ord(char)) & 0xFF

    def is_pressed(self, key: int) -> bool:
        """Report whether key was pressed, consuming a remembered press first."""
        if key in self._pending:
            self._pending.discard(key)
            return True
        char = self._poll()
        if char is None:
            return False
        pressed = self.translate(char)
        if pressed == key:
            return True
        self._pending.add(pressed)
        return False

    def wait(self) -> Optional[int]:
        """Wait for a key and return its number, or None when nothing was read."""
        char = self._wait()
        return None if char is None else self.translate(char)


def _x(opcode: int) -> int:
    return (opcode >> 8) & 0xF


def _y(opcode: int) -> int:
    return (opcode >> 4) & 0xF


class Machine:
    """Registers, memory, call stack and timers of a running program."""

    def __init__(self, memory: bytearray, display: Optional[Display] = None,
                 keys: Optional[KeyInput] = None, debug_level: int = 1,
                 rng: Optional[random.Random] = None):
        self.memory = memory
        self.display = Display() if display is None else display
        self.keys = KeyInput(lambda: None, lambda: None) if keys is None else keys
        self.debug_level = debug_level
        self.rng = random.Random() if rng is None else rng
        self.registers = [0] * 16
        self.pc = PROGRAM_START
        self.index = 0
        self.stack: list[int] = []
        self.timer = 0
        self.sound = 0
        self.hold = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _read(self, address: int) -> int:
        return self.memory[address] if address < len(self.memory) else 0

    def _write(self, address: int, value: int) -> None:
        if address >= len(self.memory):
            self.memory.extend(bytes(address + 1 - len(self.memory)))
        self.memory[address] = value & 0xFF

    def _debug(self) -> None:
        if self.debug_level > 0:
            self.display.print_registers(self.registers, self.pc, self.index, self.hold)

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.pc += 2

    def fetch(self) -> int:
        """Read the big-endian opcode at the program counter and advance past it."""
        opcode = (self._read(self.pc) << 8) | self._read(self.pc + 1)
        self.pc += 2
        return opcode

    def execute(self, opcode: int) -> None:
        """Carry out one opcode; opcodes with no matching instruction do nothing."""
        for mask, value, handler in self._INSTRUCTIONS:
            if opcode & mask == value:
                handler(self, opcode)
                return

    def step(self) -> bool:
        """Fetch and execute one instruction; False when a zero opcode halts."""
        opcode = self.fetch()
        if not opcode:
            return False
        self.execute(opcode)
        return True

    def run(self, fps: int) -> None:
        """Run until a zero opcode, at most fps instructions a second (0: no limit)."""
        while self.step():
            if fps:
                self._stop.wait(1 / fps)

    def tick_timers(self) -> None:
        """Count both timers down by one; ring the bell while sound is running."""
        with self._lock:
            if self.timer > 0:
                self.timer -= 1
            ring = self.sound > 0
            if ring:
                self.sound -= 1
        if ring:
            self.display.out.write("\a")
            self.display.out.flush()

    def _timer_loop(self) -> None:
        while not self._stop.is_set():
            self.tick_timers()
            self._stop.wait(TIMER_PERIOD)

    def start_timers(self) -> None:
        """Start counting the timers down at 60 Hz in the background."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._timer_loop, daemon=True)
        self._thread.start()

    def stop_timers(self) -> None:
        """Stop the background timer thread and wait for it to finish."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _op_return(self, opcode: int) -> None:
        if not self.stack:
            raise IndexError("return with an empty call stack")
        self.pc = self.stack.pop()
        if self.debug_level > 2:
            self.display.out.write(f"\x1b[1;67H{self.pc:04x}")
            self.display.out.flush()

    def _op_call(self, opcode: int) -> None:
        self.stack.append(self.pc)
        self.pc = opcode & 0x0FFF

    def _op_arithmetic(self, opcode: int) -> None:
        regs = self.registers
        x, y, kind = _x(opcode), _y(opcode), opcode & 0xF
        if kind == 0:
            regs[x] = regs[y]
        elif kind == 1:
            regs[x] |= regs[y]
        elif kind == 2:
            regs[x] &= regs[y]
        elif kind == 3:
            regs[x] ^= regs[y]
        elif kind == 4:
            regs[15] = int(regs[x] > 255 - regs[y])
            regs[x] = (regs[x] + regs[y]) & 0xFF
        elif kind == 5:
            regs[15] = int(regs[x] >= regs[y])
            regs[x] = (regs[x] - regs[y]) & 0xFF
        elif kind == 6:
            regs[15] = regs[x] & 1
            regs[x] >>= 1
        elif kind == 7:
            regs[15] = int(regs[y] >= regs[x])
            regs[x] = (regs[y] - regs[x]) & 0xFF
        elif kind == 14:
            regs[15] = regs[x] >> 7
            regs[x] = (regs[x] << 1) & 0xFF
        self._debug()

    def _set_register(self, x: int, value: int) -> None:
        self.registers[x] = value & 0xFF
        self._debug()

    def _set_index(self, value: int) -> None:
        self.index = value
        self._debug()

    def _op_draw(self, opcode: int) -> None:
        regs = self.registers
        x, y = _x(opcode), _y(opcode)
        regs[15] = 0
        for row in range(opcode & 0xF):
            line = regs[y] % HEIGHT + row
            if line >= HEIGHT:
                break
            if self.display.flip_sprite_row(regs[x] % WIDTH, line,
                                            self._read(self.index + row)):
                regs[15] = 1
                self._debug()

    def _op_get_timer(self, opcode: int) -> None:
        with self._lock:
            value = self.timer
        self._set_register(_x(opcode), value)

    def _op_set_timer(self, opcode: int) -> None:
        with self._lock:
            self.timer = self.registers[_x(opcode)]

    def _op_set_sound(self, opcode: int) -> None:
        with self._lock:
            self.sound = self.registers[_x(opcode)]

    def _op_wait_key(self, opcode: int) -> None:
        self.hold = True
        self._debug()
        key = self.keys.wait()
        if key is not None:
            self.registers[_x(opcode)] = key
        self.hold = False
        self._debug()

    def _op_bcd(self, opcode: int) -> None:
        value = self.registers[_x(opcode)]
        for offset, digit in enumerate((value // 100, value // 10 % 10, value % 10)):
            self._write(self.index + offset, digit)

    def _op_dump(self, opcode: int) -> None:
        for offset, value in enumerate(self.registers[: _x(opcode) + 1]):
            self._write(self.index + offset, value)

    def _op_load(self, opcode: int) -> None:
        for offset in range(_x(opcode) + 1):
            self.registers[offset] = self._read(self.index + offset)
        self._debug()

    _INSTRUCTIONS = (
        (0xFFFF, 0x00E0, lambda m, o: m.display.clear()),
        (0xFFFF, 0x00EE, _op_return),
        (0xF000, 0x1000, lambda m, o: setattr(m, "pc", o & 0x0FFF)),
        (0xF000, 0x2000, _op_call),
        (0xF000, 0x3000, lambda m, o: m._skip_if(m.registers[_x(o)] == o & 0xFF)),
        (0xF000, 0x4000, lambda m, o: m._skip_if(m.registers[_x(o)] != o & 0xFF)),
        (0xF00F, 0x5000,
         lambda m, o: m._skip_if(m.registers[_x(o)] == m.registers[_y(o)])),
        (0xF000, 0x6000, lambda m, o: m._set_register(_x(o), o)),
        (0xF000, 0x7000, lambda m, o: m._set_register(_x(o), m.registers[_x(o)] + o)),
        (0xF000, 0x8000, _op_arithmetic),
        (0xF000, 0x9000,
         lambda m, o: m._skip_if(m.registers[_x(o)] != m.registers[_y(o)])),
        (0xF000, 0xA000, lambda m, o: m._set_index(o & 0x0FFF)),
        (0xF000, 0xB000, lambda m, o: setattr(m, "pc", (o & 0x0FFF) + m.registers[0])),
        (0xF000, 0xC000, lambda m, o: m._set_register(_x(o), m.rng.randrange(256) & o)),
        (0xF000, 0xD000, _op_draw),
        (0xF0FF, 0xE09E, lambda m, o: m._skip_if(m.keys.is_pressed(m.registers[_x(o)]))),
        (0xF0FF, 0xE0A1,
         lambda m, o: m._skip_if(not m.keys.is_pressed(m.registers[_x(o)]))),
        (0xF0FF, 0xF007, _op_get_timer),
        (0xF0FF, 0xF00A, _op_wait_key),
        (0xF0FF, 0xF015, _op_set_timer),
        (0xF0FF, 0xF018, _op_set_sound),
        (0xF0FF, 0xF01E,
         lambda m, o: m._set_index((m.index + m.registers[_x(o)]) & 0xFFFF)),
        (0xF0FF, 0xF029, lambda m, o: m._set_index(m.registers[_x(o)] * 5)),
        (0xF0FF, 0xF033, _op_bcd),
        (0xF0FF, 0xF055, _op_dump),
        (0xF0FF, 0xF065, _op_load),
    )