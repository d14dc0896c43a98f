"""
Interpreter core: opcode catalog, machine state components and the
single-step dispatch loop.
"""

from .access_list import AccessList
from .bytecode import Bytecode, BytecodeElement, Instruction
from .errors import (
    EvmError,
    MalformedProgram,
    MemoryLimitExceeded,
    OutOfGas,
    ProgramExhausted,
    StackOverflow,
    StackUnderflow,
    UnsupportedOpcode,
)
from .evm import Evm, EvmParts
from .gas import Gas, GasCost
from .memory import MAX_MEMORY_SIZE, Memory
from .opcodes import (
    SUPPORTED_OPCODES,
    Opcode,
    OpcodeFamily,
    OpcodeInfo,
    lookup_opcode,
    opcode_from_name,
)
from .stack import MAX_STACK_SIZE, Stack
from .storage import Storage

__all__ = [
    # State components
    "AccessList",
    "Bytecode",
    "BytecodeElement",
    "Instruction",
    "Gas",
    "GasCost",
    "Memory",
    "Stack",
    "Storage",
    "MAX_MEMORY_SIZE",
    "MAX_STACK_SIZE",
    # Opcodes
    "Opcode",
    "OpcodeFamily",
    "OpcodeInfo",
    "SUPPORTED_OPCODES",
    "lookup_opcode",
    "opcode_from_name",
    # Interpreter
    "Evm",
    "EvmParts",
    # Errors
    "EvmError",
    "OutOfGas",
    "StackUnderflow",
    "StackOverflow",
    "MemoryLimitExceeded",
    "UnsupportedOpcode",
    "MalformedProgram",
    "ProgramExhausted",
]
