"""Canonical machine state snapshots, diffs and post-mortem dumps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

from .constants import DISPLAY_WIDTH, MEMORY_SIZE

if TYPE_CHECKING:
    from .interpreter import Interpreter


@dataclass(frozen=True)
class MachineState:
    """Immutable copy of every piece of interpreter state."""

    registers: Tuple[int, ...]
    index: int
    delay_timer: int
    sound_timer: int
    pc: int
    sp: int
    cycle: int
    stack: Tuple[int, ...]
    memory: bytes
    display: Tuple[int, ...]


@dataclass(frozen=True)
class FieldDiff:
    """Difference for a single named field."""

    name: str
    before: object
    after: object


@dataclass(frozen=True)
class StateDiff:
    """Aggregated differences between two machine states."""

    fields: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    memory_writes: Tuple[Tuple[int, int, int], ...] = field(default_factory=tuple)
    display_changed: bool = False

    @property
    def memory_changed(self) -> bool:
        return bool(self.memory_writes)

    def is_empty(self) -> bool:
        """Return True when no differences were recorded."""

        return not self.fields and not self.memory_writes and not self.display_changed

    def get(self, name: str) -> Optional[FieldDiff]:
        for diff in self.fields:
            if diff.name == name:
                return diff
        return None


def capture_state(interpreter: "Interpreter") -> MachineState:
    """Capture the current interpreter state as canonical snapshot."""

    memory = interpreter.memory
    return MachineState(
        registers=tuple(interpreter.registers),
        index=interpreter.index,
        delay_timer=interpreter.delay_timer,
        sound_timer=interpreter.sound_timer,
        pc=interpreter.pc,
        sp=memory.sp,
        cycle=interpreter.cycle,
        stack=memory.stack_frames(),
        memory=bytes(memory.data),
        display=interpreter.display_buffer,
    )


def diff_states(before: Optional[MachineState], after: MachineState) -> StateDiff:
    """Compute structured differences between two machine states."""

    if before is None:
        return StateDiff()

    diffs: list[FieldDiff] = []
    for index, (previous, current) in enumerate(zip(before.registers, after.registers)):
        if previous != current:
            diffs.append(FieldDiff(f"V{index:X}", previous, current))
    for name in ("index", "delay_timer", "sound_timer", "pc", "sp", "cycle"):
        previous = getattr(before, name)
        current = getattr(after, name)
        if previous != current:
            diffs.append(FieldDiff(name, previous, current))

    writes = tuple(
        (address, old, new)
        for address, (old, new) in enumerate(zip(before.memory, after.memory))
        if old != new
    )
    return StateDiff(
        fields=tuple(diffs),
        memory_writes=writes,
        display_changed=before.display != after.display,
    )


def _hex_rows(memory: bytes, width: int = 16) -> Iterable[str]:
    for row in range(0, len(memory), width):
        chunk = memory[row : row + width]
        yield f"{row:03X}: " + " ".join(f"{byte:02X}" for byte in chunk)


def format_dump(state: MachineState, include_memory: bool = True) -> str:
    """Render registers, timers, stack and memory for post-mortem inspection."""

    lines = ["---Registers---"]
    lines.extend(f"v[{index:x}]: 0x{value:02x}" for index, value in enumerate(state.registers))
    lines.append(f"i: 0x{state.index:03x}")
    lines.append(f"st: 0x{state.sound_timer:02x}")
    lines.append(f"dt: 0x{state.delay_timer:02x}")
    lines.append(f"pc: 0x{state.pc:03x}")
    lines.append(f"sp: 0x{state.sp:03x}")
    lines.append(f"cycle: {state.cycle}")
    if state.stack:
        lines.append("stack: " + " ".join(f"0x{frame:03x}" for frame in state.stack))
    else:
        lines.append("stack: <empty>")
    if include_memory:
        lines.append("---Memory---")
        lines.extend(_hex_rows(state.memory[:MEMORY_SIZE]))
    return "\n".join(lines)


def format_display(state: MachineState, on: str = "#", off: str = ".") -> str:
    return "\n".join(
        "".join(on if (row >> x) & 1 else off for x in range(DISPLAY_WIDTH))
        for row in state.display
    )


__all__ = [
    "MachineState",
    "FieldDiff",
    "StateDiff",
    "capture_state",
    "diff_states",
    "format_display",
    "format_dump",
]
