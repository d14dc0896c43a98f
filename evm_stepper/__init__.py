"""
Step-by-step emulator for a subset of the EVM.
"""

from .core import (
    AccessList,
    Bytecode,
    Evm,
    EvmError,
    EvmParts,
    Gas,
    GasCost,
    Instruction,
    MalformedProgram,
    Memory,
    MemoryLimitExceeded,
    Opcode,
    OutOfGas,
    ProgramExhausted,
    Stack,
    StackOverflow,
    StackUnderflow,
    Storage,
    UnsupportedOpcode,
)
from .assembler import disassemble, parse_assembly, parse_hex
from .random_instructions import random_instruction, random_program

__version__ = "0.1.0"

__all__ = [
    "AccessList",
    "Bytecode",
    "Evm",
    "EvmParts",
    "Gas",
    "GasCost",
    "Instruction",
    "Memory",
    "Opcode",
    "Stack",
    "Storage",
    "EvmError",
    "OutOfGas",
    "StackUnderflow",
    "StackOverflow",
    "MemoryLimitExceeded",
    "UnsupportedOpcode",
    "MalformedProgram",
    "ProgramExhausted",
    "parse_hex",
    "parse_assembly",
    "disassemble",
    "random_instruction",
    "random_program",
]
