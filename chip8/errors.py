"""Fatal machine faults raised by the CHIP-8 interpreter."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .state_model import MachineState


class FaultKind(enum.Enum):
    """Conditions after which execution cannot meaningfully continue."""

    UNKNOWN_OPCODE = "unknown opcode"
    STACK_OVERFLOW = "stack overflow"
    STACK_UNDERFLOW = "stack underflow"
    RESERVED_JUMP = "jump to reserved address"
    RESERVED_WRITE = "write to reserved memory"
    OUT_OF_BOUNDS = "memory access out of bounds"
    PROGRAM_TOO_LARGE = "program too large"
    INVALID_KEY = "invalid key"


class MachineFault(Exception):
    """Base class for every fatal interpreter condition.

    ``state`` is filled in by the interpreter with a post-mortem snapshot
    when the fault escapes ``Interpreter.step``; faults raised outside of a
    step (loading a ROM, pressing a bad key) leave it as ``None``.
    """

    kind: FaultKind = FaultKind.UNKNOWN_OPCODE

    def __init__(
        self,
        message: str,
        *,
        opcode: Optional[int] = None,
        pc: Optional[int] = None,
        address: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.opcode = opcode
        self.pc = pc
        self.address = address
        self.state: Optional["MachineState"] = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.opcode is not None:
            parts.append(f"opcode=0x{self.opcode:04X}")
        if self.pc is not None:
            parts.append(f"pc=0x{self.pc:03X}")
        if self.address is not None:
            parts.append(f"address=0x{self.address:03X}")
        return " ".join(parts)


class UnknownOpcodeError(MachineFault):
    kind = FaultKind.UNKNOWN_OPCODE


class StackOverflowError(MachineFault):
    kind = FaultKind.STACK_OVERFLOW


class StackUnderflowError(MachineFault):
    kind = FaultKind.STACK_UNDERFLOW


class ReservedAddressError(MachineFault):
    """Jump, call or indexed write targeting the reserved low 512 bytes."""

    def __init__(self, message: str, *, kind: FaultKind, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.kind = kind


class MemoryBoundsError(MachineFault):
    kind = FaultKind.OUT_OF_BOUNDS


class ProgramTooLargeError(MachineFault):
    kind = FaultKind.PROGRAM_TOO_LARGE


class InvalidKeyError(MachineFault):
    kind = FaultKind.INVALID_KEY


__all__ = [
    "FaultKind",
    "MachineFault",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "ReservedAddressError",
    "MemoryBoundsError",
    "ProgramTooLargeError",
    "InvalidKeyError",
]
