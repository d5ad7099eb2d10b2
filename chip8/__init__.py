"""CHIP-8 virtual machine package."""

from .config import MachineConfig
from .display import FrameBuffer, ImageRenderer
from .errors import (
    FaultKind,
    InvalidKeyError,
    MachineFault,
    MemoryBoundsError,
    ProgramTooLargeError,
    ReservedAddressError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from .interpreter import Interpreter, StepResult
from .keyboard import Keypad
from .runner import Driver, KeyEvent, QuitEvent, RunStats
from .state_model import (
    FieldDiff,
    MachineState,
    StateDiff,
    capture_state,
    diff_states,
    format_dump,
)

__all__ = [
    "Interpreter",
    "StepResult",
    "MachineConfig",
    "Keypad",
    "FrameBuffer",
    "ImageRenderer",
    "Driver",
    "KeyEvent",
    "QuitEvent",
    "RunStats",
    "MachineState",
    "FieldDiff",
    "StateDiff",
    "capture_state",
    "diff_states",
    "format_dump",
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
