#!/usr/bin/env python3
"""Command line front end: load a ROM from disk and run it headless."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import MachineConfig
from .disasm import disassemble
from .display import ImageRenderer
from .errors import MachineFault
from .interpreter import Interpreter
from .keyboard import Keypad
from .runner import Driver
from .state_model import format_dump

logger = logging.getLogger("chip8")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Headless CHIP-8 interpreter")
    parser.add_argument("rom", type=Path, help="Path to a CHIP-8 program image")
    parser.add_argument(
        "--steps", type=int, default=5000, help="Number of instructions to execute"
    )
    parser.add_argument(
        "--realtime",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Pace steps at the configured rate (default: run flat out)",
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Trace every instruction (default: CHIP_8_DEBUG_MODE)",
    )
    parser.add_argument("--seed", type=int, help="Seed for the random source")
    parser.add_argument("--config", type=Path, help="Load a JSON machine config")
    parser.add_argument("--save-png", type=Path, help="Write the final frame as PNG")
    parser.add_argument("--zoom", type=int, default=8, help="PNG pixel scale")
    parser.add_argument(
        "--ascii", action="store_true", help="Print the final frame as text"
    )
    parser.add_argument(
        "--disassemble", action="store_true", help="List the ROM and exit"
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> MachineConfig:
    base = MachineConfig.load(args.config) if args.config else None
    config = MachineConfig.from_env(base)
    data = config.to_dict()
    if args.debug is not None:
        data["debug"] = args.debug
    if args.seed is not None:
        data["seed"] = args.seed
    return MachineConfig.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.rom.is_file():
        parser.error(f"ROM not found: {args.rom}")
    config = _resolve_config(args)
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(message)s",
    )

    rom = args.rom.read_bytes()
    if args.disassemble:
        for address, opcode, text in disassemble(rom):
            print(f"{address:03X}: {opcode:04X}  {text}")
        return 0

    keypad = Keypad()
    renderer = ImageRenderer(zoom=args.zoom)
    interpreter = Interpreter(keypad, renderer, config=config)
    status = 0
    try:
        interpreter.load(rom)
        stats = Driver(interpreter, keypad, config=config).run(
            args.steps, realtime=args.realtime
        )
        logger.info("Executed %d instructions, %d redraws", stats.steps, stats.draws)
    except MachineFault as fault:
        logger.error("panic: %s", fault)
        # Trace observers have already received the dump with the fault event.
        if fault.state is not None and not interpreter.tracer.has_observers():
            logger.error(
                "%s", format_dump(fault.state, include_memory=config.dump_memory_on_fault)
            )
        status = 1

    if args.ascii:
        print(renderer.to_text())
    if args.save_png:
        renderer.save(args.save_png)
        logger.info("Saved frame to %s", args.save_png)
    return status


if __name__ == "__main__":
    sys.exit(main())
