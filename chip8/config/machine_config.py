"""Machine configuration for the CHIP-8 interpreter."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import DEFAULT_CYCLES_PER_SECOND, TIMER_DIVIDER

DEBUG_ENV_VAR = "CHIP_8_DEBUG_MODE"
SEED_ENV_VAR = "CHIP8_SEED"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


@dataclass
class MachineConfig:
    """Interpreter settings passed explicitly at construction."""

    timer_divider: int = TIMER_DIVIDER
    cycles_per_second: int = DEFAULT_CYCLES_PER_SECOND
    debug: bool = False
    seed: Optional[int] = None
    trace_history: int = 64
    dump_memory_on_fault: bool = True

    def __post_init__(self) -> None:
        if self.timer_divider < 1:
            raise ValueError(f"timer_divider must be >= 1, got {self.timer_divider}")
        if self.cycles_per_second < 1:
            raise ValueError(
                f"cycles_per_second must be >= 1, got {self.cycles_per_second}"
            )
        if self.trace_history < 0:
            raise ValueError(f"trace_history must be >= 0, got {self.trace_history}")

    @property
    def step_interval(self) -> float:
        """Seconds the driver waits between steps."""
        return 1.0 / self.cycles_per_second

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MachineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "MachineConfig":
        """Load configuration from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, base: Optional["MachineConfig"] = None) -> "MachineConfig":
        """Overlay ``CHIP_8_DEBUG_MODE`` / ``CHIP8_SEED`` onto ``base``.

        Only the command line front end calls this; the interpreter itself
        never looks at the environment.
        """
        data = (base or cls()).to_dict()
        if os.getenv(DEBUG_ENV_VAR) is not None:
            data["debug"] = _env_flag(DEBUG_ENV_VAR, default=True)
        seed = os.getenv(SEED_ENV_VAR)
        if seed:
            try:
                data["seed"] = int(seed, 0)
            except ValueError as exc:
                raise ValueError(f"{SEED_ENV_VAR} must be an integer, got {seed!r}") from exc
        return cls.from_dict(data)


__all__ = ["MachineConfig", "DEBUG_ENV_VAR", "SEED_ENV_VAR"]
