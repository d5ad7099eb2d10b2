"""Configuration system for the CHIP-8 interpreter."""

from .machine_config import DEBUG_ENV_VAR, SEED_ENV_VAR, MachineConfig

__all__ = ["MachineConfig", "DEBUG_ENV_VAR", "SEED_ENV_VAR"]
