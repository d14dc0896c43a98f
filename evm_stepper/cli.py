#!/usr/bin/env python3
"""
Command line entry point for the EVM stepper.

Assembles a program from hex bytecode or assembly text, steps it through
the interpreter and prints the final machine state. Also prints random
instructions for quiz-style use and disassembles bytecode.
"""

import argparse
import os
import random
import sys
from typing import List, Optional

import structlog

from .assembler import disassemble, parse_assembly, parse_hex
from .core.bytecode import Bytecode, Instruction
from .core.errors import EvmError
from .core.evm import Evm
from .export import FORMATTERS
from .logging_config import configure_logging
from .random_instructions import random_program

logger = structlog.get_logger()

# Configuration constants
DEFAULT_GAS_LIMIT = 10_000
DEFAULT_MAX_STEPS = 1024
DEFAULT_OUTPUT_FORMAT = "json"
DEFAULT_RANDOM_COUNT = 16
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise SystemExit(f"Environment variable {name} must be an integer, got {raw!r}")


def non_negative_int(raw: str) -> int:
    """argparse type for counts and gas amounts."""
    try:
        value = int(raw, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def load_program(args: argparse.Namespace) -> List[Instruction]:
    """Load instructions from --code or --asm."""
    if args.code is not None:
        return parse_hex(args.code)
    if args.asm == "-":
        return parse_assembly(sys.stdin.read())
    if not os.path.exists(args.asm):
        raise FileNotFoundError(f"Assembly file not found: {args.asm}")
    with open(args.asm, "r") as f:
        return parse_assembly(f.read())


def write_output(text: str, output: Optional[str]) -> None:
    if output:
        with open(output, "w") as f:
            f.write(text)
        logger.info("State written", path=output)
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")


def cmd_run(args: argparse.Namespace) -> int:
    try:
        instructions = load_program(args)
    except (ValueError, FileNotFoundError) as e:
        logger.error("Could not load program", error=str(e))
        return 2

    try:
        evm = Evm(args.gas_limit)
    except ValueError as e:
        logger.error("Invalid gas limit", error=str(e))
        return 2
    evm.push_instructions(instructions)
    logger.info(
        "Running program",
        instructions=len(instructions),
        bytecode_size=len(evm.bytecode),
        gas_limit=args.gas_limit,
    )

    exit_code = 0
    try:
        steps = evm.run(max_steps=args.max_steps)
        logger.info("Program stopped", steps=steps, finished=evm.is_finished, gas_used=evm.gas.used)
    except EvmError as e:
        logger.error("Execution failed", pc=evm.program_counter, error=type(e).__name__, detail=str(e))
        exit_code = 1

    write_output(FORMATTERS[args.format](evm), args.output)
    return exit_code


def cmd_random(args: argparse.Namespace) -> int:
    rng = random.Random(args.seed)
    for instruction in random_program(args.count, rng):
        print(instruction)
    return 0


def cmd_disasm(args: argparse.Namespace) -> int:
    try:
        bytecode = Bytecode.from_instructions(parse_hex(args.code))
    except ValueError as e:
        logger.error("Could not decode bytecode", error=str(e))
        return 2
    for offset, text in disassemble(bytecode):
        print(f"{offset:04x}: {text}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evm-stepper",
        description="Step-by-step emulator for a subset of the EVM",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        choices=LOG_LEVELS,
        help="Logging level",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render log lines as JSON instead of console output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Assemble and execute a program, then print the final state",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--code", help="Bytecode as a hex string")
    source.add_argument("--asm", help="Assembly file, one instruction per line ('-' for stdin)")
    run_parser.add_argument(
        "--gas-limit",
        type=non_negative_int,
        default=_env_int("EVM_STEPPER_GAS_LIMIT", DEFAULT_GAS_LIMIT),
        help="Gas limit for the run",
    )
    run_parser.add_argument(
        "--max-steps",
        type=non_negative_int,
        default=_env_int("EVM_STEPPER_MAX_STEPS", DEFAULT_MAX_STEPS),
        help="Stop after this many steps",
    )
    run_parser.add_argument(
        "--format",
        choices=sorted(FORMATTERS),
        default=os.environ.get("EVM_STEPPER_FORMAT", DEFAULT_OUTPUT_FORMAT),
        help="Output format for the final state",
    )
    run_parser.add_argument("--output", help="Write the state to this file instead of stdout")
    run_parser.set_defaults(handler=cmd_run)

    random_parser = subparsers.add_parser(
        "random",
        help="Print random instructions",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    random_parser.add_argument("--count", type=non_negative_int, default=DEFAULT_RANDOM_COUNT, help="Number of instructions")
    random_parser.add_argument("--seed", type=int, help="Seed for reproducible output")
    random_parser.set_defaults(handler=cmd_random)

    disasm_parser = subparsers.add_parser("disasm", help="Disassemble hex bytecode")
    disasm_parser.add_argument("--code", required=True, help="Bytecode as a hex string")
    disasm_parser.set_defaults(handler=cmd_disasm)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and run the selected command.

    Returns:
        Exit code (0 for success, 1 for a failed step, 2 for unreadable input)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_logs=args.json_logs)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
