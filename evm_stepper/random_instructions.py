"""
Random instruction supply for "predict the effect" exercises.

Only produces instructions; loading and stepping is up to the host.
"""

import random
from typing import Iterable, List, Optional

from .core.bytecode import PUSH_DATA_SIZE, Instruction
from .core.opcodes import SUPPORTED_OPCODES, Opcode

DEFAULT_OPCODES = tuple(sorted(SUPPORTED_OPCODES))


def random_instruction(
    rng: Optional[random.Random] = None, opcodes: Iterable[Opcode] = DEFAULT_OPCODES
) -> Instruction:
    """
    Draw one instruction uniformly from ``opcodes``.

    PUSHn payloads get ``n`` random bytes followed by zero padding.
    """
    rng = rng or random.Random()
    choices = tuple(opcodes)
    if not choices:
        raise ValueError("opcodes must not be empty")
    opcode = Opcode(rng.choice(choices))
    n_bytes = opcode.push_size()
    if n_bytes == 0:
        return Instruction(opcode)
    payload = bytes(rng.getrandbits(8) for _ in range(n_bytes))
    return Instruction(opcode, payload.ljust(PUSH_DATA_SIZE, b"\x00"))


def random_program(
    length: int,
    rng: Optional[random.Random] = None,
    opcodes: Iterable[Opcode] = DEFAULT_OPCODES,
) -> List[Instruction]:
    """Draw ``length`` independent instructions."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    rng = rng or random.Random()
    choices = tuple(opcodes)
    return [random_instruction(rng, choices) for _ in range(length)]
