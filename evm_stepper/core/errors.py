"""
Error kinds raised by the interpreter.

Every failing ``Evm.step()`` raises one of these; the interpreter never
catches or retries them.
"""

from typing import Optional


class EvmError(Exception):
    """Base class for all execution errors."""


class OutOfGas(EvmError):
    """The requested cost exceeds the remaining gas budget."""

    def __init__(self, cost: int, left: int):
        super().__init__(f"out of gas: cost {cost} exceeds {left} gas left")
        self.cost = cost
        self.left = left


class StackUnderflow(EvmError):
    """An operation needs more stack elements than are present."""

    def __init__(self, required: int, available: int):
        super().__init__(
            f"stack underflow: {required} element(s) required, {available} available"
        )
        self.required = required
        self.available = available


class StackOverflow(EvmError):
    """A push would grow the stack past its maximum depth."""

    def __init__(self, limit: int):
        super().__init__(f"stack overflow: limit of {limit} elements reached")
        self.limit = limit


class MemoryLimitExceeded(EvmError):
    """A memory access would grow memory past its hard cap."""

    def __init__(self, requested: int, limit: int):
        super().__init__(
            f"memory limit exceeded: {requested} bytes requested, cap is {limit}"
        )
        self.requested = requested
        self.limit = limit


class UnsupportedOpcode(EvmError):
    """The opcode exists in the EVM but this emulator does not execute it."""

    def __init__(self, opcode: int, name: Optional[str] = None):
        label = name or f"0x{opcode:02x}"
        super().__init__(f"opcode {label} is not supported by this emulator")
        self.opcode = opcode
        self.name = name


class MalformedProgram(EvmError):
    """A push payload runs past the end of the bytecode."""


class ProgramExhausted(EvmError):
    """The program counter has reached the end of the bytecode."""

    def __init__(self, program_counter: int):
        super().__init__(f"no instruction at program counter {program_counter}")
        self.program_counter = program_counter
