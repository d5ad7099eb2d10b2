"""CHIP-8 fetch/decode/execute core.

The interpreter owns every piece of machine state (registers, index
register, timers, program counter, memory with its in-memory call stack and
the packed display buffer) and drives two injected capabilities: a
``Keyboard`` it polls and a ``Display`` it hands the whole bitmap to after
each display-mutating instruction.

Fatal conditions are raised as :class:`~chip8.errors.MachineFault`
subclasses out of :meth:`Interpreter.step`. Every instruction validates its
addresses before mutating anything, so a faulting step leaves the machine
exactly as it found it.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .config import MachineConfig
from .constants import (
    DISPLAY_HEIGHT,
    FLAG_REGISTER,
    INDEX_MASK,
    NUM_KEYS,
    NUM_REGISTERS,
    OPCODE_SIZE,
    PROGRAM_START,
    ROW_MASK,
    glyph_address,
)
from .disasm import DecodedOpcode, decode, describe
from .errors import (
    FaultKind,
    InvalidKeyError,
    MachineFault,
    ReservedAddressError,
    UnknownOpcodeError,
)
from .interfaces import Display, Keyboard
from .memory import Memory
from .state_model import capture_state, format_dump
from .tracing import LoggingObserver, RecordingObserver, TraceDispatcher

logger = logging.getLogger(__name__)

# Reverse the bit order of every byte: sprite bit 7 (leftmost pixel) must
# land on the lowest display column of the lane.
_REVERSED_BITS = bytes(int(f"{value:08b}"[::-1], 2) for value in range(256))


@dataclass
class StepResult:
    """Outcome of a single executed instruction."""

    pc: int
    opcode: int
    next_pc: int
    redrawn: bool = False
    description: Optional[str] = None


class Interpreter:
    """CHIP-8 virtual machine driving a keyboard and a display capability."""

    def __init__(
        self,
        keyboard: Keyboard,
        display: Display,
        *,
        config: Optional[MachineConfig] = None,
        rng: Optional[random.Random] = None,
        tracer: Optional[TraceDispatcher] = None,
    ) -> None:
        self.config = config or MachineConfig()
        self.keyboard = keyboard
        self.display = display
        self.tracer = tracer or TraceDispatcher()
        # An injected rng is left alone by reset(); the built-in one is reseeded.
        self._owns_rng = rng is None
        self._rng = rng or random.Random(self.config.seed)

        self._draws = 0
        self.history: Optional[RecordingObserver] = None
        if self.config.debug:
            if not self.tracer.has_observers():
                self.tracer.register(LoggingObserver())
            if self.config.trace_history:
                self.history = RecordingObserver(self.config.trace_history)
                self.tracer.register(self.history)

        self._families: Dict[int, Callable[[DecodedOpcode], bool]] = {
            0x0: self._op_system,
            0x1: self._op_jump,
            0x2: self._op_call,
            0x3: self._op_skip_eq_imm,
            0x4: self._op_skip_ne_imm,
            0x5: self._op_skip_eq_reg,
            0x6: self._op_load_imm,
            0x7: self._op_add_imm,
            0x8: self._op_alu,
            0x9: self._op_skip_ne_reg,
            0xA: self._op_load_index,
            0xB: self._op_jump_alt,
            0xC: self._op_random,
            0xD: self._op_draw,
            0xE: self._op_key_skip,
            0xF: self._op_misc,
        }
        self._power_on()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def _power_on(self) -> None:
        self.memory = Memory()
        self.registers = bytearray(NUM_REGISTERS)
        self.index = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.pc = PROGRAM_START
        self.cycle = 0
        self._vram: List[int] = [0] * DISPLAY_HEIGHT
        self.display.draw(self.display_buffer)

    def reset(self) -> None:
        """Return to power-on state; any loaded program is discarded."""

        if self._owns_rng:
            self._rng.seed(self.config.seed)
        self._power_on()

    def load(self, rom: bytes) -> None:
        """Copy a program image verbatim into memory at 0x200."""

        self.memory.load_program(bytes(rom))
        logger.debug("Loaded %d byte program at 0x%03X", len(rom), PROGRAM_START)

    # ------------------------------------------------------------------ #
    # Read-only views
    # ------------------------------------------------------------------ #
    @property
    def sp(self) -> int:
        return self.memory.sp

    @property
    def display_buffer(self) -> Tuple[int, ...]:
        return tuple(self._vram)

    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def step(self) -> StepResult:
        """Fetch, decode and execute exactly one instruction."""

        pc = self.pc
        opcode: Optional[int] = None
        try:
            opcode = self.memory.read_word(pc)
            decoded = decode(opcode)

            description = None
            if self.config.debug:
                description = describe(opcode)
                self.tracer.record_instruction(pc, opcode, description)

            draws_before = self._draws
            pc_set = self._families[decoded.family](decoded)
        except MachineFault as fault:
            self._report_fault(fault, pc, opcode)
            raise

        if self.cycle % self.config.timer_divider == 0:
            self.delay_timer = max(0, self.delay_timer - 1)
            self.sound_timer = max(0, self.sound_timer - 1)
        if not pc_set:
            self.pc += OPCODE_SIZE
        self.cycle += 1

        return StepResult(
            pc=pc,
            opcode=opcode,
            next_pc=self.pc,
            redrawn=self._draws != draws_before,
            description=description,
        )

    def run(self, steps: int) -> int:
        for _ in range(steps):
            self.step()
        return steps

    def _redraw(self, pc: int, opcode: int, collision: Optional[bool] = None) -> None:
        self._draws += 1
        self.display.draw(self.display_buffer)
        if self.config.debug:
            self.tracer.record_draw(pc, opcode, collision=collision)

    def _report_fault(self, fault: MachineFault, pc: int, opcode: Optional[int]) -> None:
        if fault.pc is None:
            fault.pc = pc
        if fault.opcode is None:
            fault.opcode = opcode
        fault.state = capture_state(self)
        if self.tracer.has_observers():
            dump = format_dump(fault.state, include_memory=self.config.dump_memory_on_fault)
            self.tracer.record_fault(pc, opcode, str(fault), dump)

    def _reserved_target(self, d: DecodedOpcode, what: str) -> None:
        if d.addr < PROGRAM_START:
            raise ReservedAddressError(
                f"{what} to reserved address",
                kind=FaultKind.RESERVED_JUMP,
                address=d.addr,
            )

    @staticmethod
    def _unknown(d: DecodedOpcode) -> bool:
        raise UnknownOpcodeError("bad opcode", opcode=d.opcode)

    # ------------------------------------------------------------------ #
    # Instruction families. Each returns True when it set the PC itself.
    # ------------------------------------------------------------------ #
    def _op_system(self, d: DecodedOpcode) -> bool:
        if d.addr == 0x0E0:
            for row in range(DISPLAY_HEIGHT):
                self._vram[row] = 0
            self._redraw(self.pc, d.opcode)
            return False
        if d.addr == 0x0EE:
            # The stored address is the call itself; the generic advance
            # moves past it.
            self.pc = self.memory.pop()
            return False
        return self._unknown(d)

    def _op_jump(self, d: DecodedOpcode) -> bool:
        self._reserved_target(d, "jump")
        self.pc = d.addr
        return True

    def _op_call(self, d: DecodedOpcode) -> bool:
        self._reserved_target(d, "call")
        self.memory.push(self.pc)
        self.pc = d.addr
        return True

    def _skip_if(self, condition: bool) -> bool:
        if condition:
            self.pc += OPCODE_SIZE
        return False

    def _op_skip_eq_imm(self, d: DecodedOpcode) -> bool:
        return self._skip_if(self.registers[d.x] == d.kk)

    def _op_skip_ne_imm(self, d: DecodedOpcode) -> bool:
        return self._skip_if(self.registers[d.x] != d.kk)

    def _op_skip_eq_reg(self, d: DecodedOpcode) -> bool:
        if d.n != 0x0:
            return self._unknown(d)
        return self._skip_if(self.registers[d.x] == self.registers[d.y])

    def _op_skip_ne_reg(self, d: DecodedOpcode) -> bool:
        if d.n != 0x0:
            return self._unknown(d)
        return self._skip_if(self.registers[d.x] != self.registers[d.y])

    def _op_load_imm(self, d: DecodedOpcode) -> bool:
        self.registers[d.x] = d.kk
        return False

    def _op_add_imm(self, d: DecodedOpcode) -> bool:
        self.registers[d.x] = (self.registers[d.x] + d.kk) & 0xFF
        return False

    def _op_alu(self, d: DecodedOpcode) -> bool:
        v = self.registers
        vx, vy = v[d.x], v[d.y]
        op = d.n

        if op == 0x0:
            v[d.x] = vy
        elif op == 0x1:
            v[d.x] = vx | vy
        elif op == 0x2:
            v[d.x] = vx & vy
        elif op == 0x3:
            v[d.x] = vx ^ vy
        elif op == 0x4:
            total = (vx + vy) & 0xFF
            v[FLAG_REGISTER] = 1 if total < vx else 0
            v[d.x] = total
        elif op == 0x5:
            diff = (vx - vy) & 0xFF
            v[FLAG_REGISTER] = 0 if diff > vx else 1
            v[d.x] = diff
        elif op == 0x6:
            v[FLAG_REGISTER] = vy & 0x1
            v[d.x] = vy >> 1
        elif op == 0x7:
            diff = (vy - vx) & 0xFF
            v[FLAG_REGISTER] = 0 if diff > vy else 1
            v[d.x] = diff
        elif op == 0xE:
            v[FLAG_REGISTER] = vy >> 7
            v[d.x] = (vy << 1) & 0xFF
        else:
            return self._unknown(d)
        return False

    def _op_load_index(self, d: DecodedOpcode) -> bool:
        self.index = d.addr
        return False

    def _op_jump_alt(self, d: DecodedOpcode) -> bool:
        # No V0 offset.
        self._reserved_target(d, "jump")
        self.pc = d.addr
        return True

    def _op_random(self, d: DecodedOpcode) -> bool:
        self.registers[d.x] = self._rng.getrandbits(8) & d.kk
        return False

    def _op_draw(self, d: DecodedOpcode) -> bool:
        sprite = self.memory.read_block(self.index, d.n)
        column = self.registers[d.x]
        top = self.registers[d.y]
        window = (0xFF << column) & ROW_MASK

        collision = 0
        for offset, byte in enumerate(sprite):
            row = top + offset
            if row >= DISPLAY_HEIGHT:
                # No vertical wrap; rows below the canvas are dropped.
                break
            lane = (_REVERSED_BITS[byte] << column) & ROW_MASK
            previous = self._vram[row] & window
            self._vram[row] ^= lane
            if self._vram[row] & previous != previous:
                collision = 1

        self.registers[FLAG_REGISTER] = collision
        self._redraw(self.pc, d.opcode, collision=bool(collision))
        return False

    def _key_operand(self, d: DecodedOpcode) -> int:
        key = self.registers[d.x]
        if key >= NUM_KEYS:
            raise InvalidKeyError(
                f"expected key between 0x0 and 0xF, got {key}", opcode=d.opcode
            )
        return key

    def _op_key_skip(self, d: DecodedOpcode) -> bool:
        if d.kk == 0x9E:
            return self._skip_if(self.keyboard.is_pressed(self._key_operand(d)))
        if d.kk == 0xA1:
            return self._skip_if(not self.keyboard.is_pressed(self._key_operand(d)))
        return self._unknown(d)

    def _op_misc(self, d: DecodedOpcode) -> bool:
        v = self.registers
        op = d.kk

        if op == 0x07:
            v[d.x] = self.delay_timer
        elif op == 0x0A:
            key = self.keyboard.pressed_key()
            if key is None:
                # Busy-poll: leave the PC on this instruction.
                return True
            if not 0 <= key < NUM_KEYS:
                raise InvalidKeyError(
                    f"keyboard reported key {key}, expected 0x0-0xF", opcode=d.opcode
                )
            v[d.x] = key
        elif op == 0x15:
            self.delay_timer = v[d.x]
        elif op == 0x18:
            self.sound_timer = v[d.x]
        elif op == 0x1E:
            self.index = (self.index + v[d.x]) & INDEX_MASK
        elif op == 0x29:
            self.index = glyph_address(v[d.x])
        elif op == 0x33:
            self.memory.check_writable(self.index, 3)
            value = v[d.x]
            for offset, digit in enumerate((value // 100, (value // 10) % 10, value % 10)):
                self.memory.write_byte(self.index + offset, digit, pc=self.pc)
        elif op == 0x55:
            self.memory.check_writable(self.index, d.x + 1)
            for register in range(d.x + 1):
                self.memory.write_byte(self.index, v[register], pc=self.pc)
                self.index += 1
        elif op == 0x65:
            self.memory.check_range(self.index, d.x + 1)
            for register in range(d.x + 1):
                v[register] = self.memory.read_byte(self.index)
                self.index += 1
        else:
            return self._unknown(d)
        return False


__all__ = ["Interpreter", "StepResult"]
