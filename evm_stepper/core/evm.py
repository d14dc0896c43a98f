"""
Single-step EVM interpreter.

The interpreter owns its program counter, bytecode, stack, memory, storage,
access list and gas meter. Each ``step()`` executes exactly one instruction.
Opcodes are dispatched through a table keyed on the opcode family computed
once per byte value in the catalog.

Every opcode validates the stack, prices itself and charges gas before it
mutates anything, so a step that raises leaves the machine untouched.
"""

from typing import Callable, Dict, Iterable, NamedTuple, Optional

import structlog
from eth_utils import big_endian_to_int

from ..utils.evm_ops import (
    evm_add,
    evm_addmod,
    evm_and,
    evm_byte,
    evm_div,
    evm_eq,
    evm_gt,
    evm_lt,
    evm_mod,
    evm_mul,
    evm_mulmod,
    evm_not,
    evm_or,
    evm_sdiv,
    evm_sgt,
    evm_signextend,
    evm_slt,
    evm_smod,
    evm_sub,
    evm_xor,
)
from .access_list import AccessList
from .bytecode import Bytecode, Instruction
from .errors import EvmError, ProgramExhausted, UnsupportedOpcode
from .gas import Gas
from .memory import WORD_SIZE, Memory
from .opcodes import Opcode, OpcodeFamily, OpcodeInfo, lookup_opcode
from .stack import Stack
from .storage import Storage

logger = structlog.get_logger()

# Pure word operations; operands are passed in pop order (top of stack first)
WORD_OPS: Dict[Opcode, Callable[..., int]] = {
    Opcode.ADD: evm_add,
    Opcode.MUL: evm_mul,
    Opcode.SUB: evm_sub,
    Opcode.DIV: evm_div,
    Opcode.SDIV: evm_sdiv,
    Opcode.MOD: evm_mod,
    Opcode.SMOD: evm_smod,
    Opcode.ADDMOD: evm_addmod,
    Opcode.MULMOD: evm_mulmod,
    Opcode.SIGNEXTEND: evm_signextend,
    Opcode.LT: evm_lt,
    Opcode.GT: evm_gt,
    Opcode.SLT: evm_slt,
    Opcode.SGT: evm_sgt,
    Opcode.EQ: evm_eq,
    Opcode.AND: evm_and,
    Opcode.OR: evm_or,
    Opcode.XOR: evm_xor,
    Opcode.NOT: evm_not,
    Opcode.BYTE: evm_byte,
}


class EvmParts(NamedTuple):
    """Bulk snapshot of an interpreter, in the order ``Evm.from_parts`` takes them."""

    program_counter: int
    bytecode: Bytecode
    stack: Stack
    memory: Memory
    gas: Gas
    storage: Storage
    access_list: AccessList


class Evm:
    """A simple emulator for the EVM."""

    def __init__(self, gas_limit: int):
        self.program_counter = 0
        self.access_list = AccessList()
        self.bytecode = Bytecode()
        self.gas = Gas(gas_limit)
        self.memory = Memory()
        self.stack = Stack()
        self.storage = Storage()

    @classmethod
    def from_parts(
        cls,
        program_counter: int,
        bytecode: Bytecode,
        stack: Stack,
        memory: Memory,
        gas: Gas,
        storage: Storage,
        access_list: AccessList,
    ) -> "Evm":
        """Rebuild an interpreter from the parts returned by ``into_parts``."""
        evm = cls.__new__(cls)
        evm.program_counter = program_counter
        evm.bytecode = bytecode
        evm.stack = stack
        evm.memory = memory
        evm.gas = gas
        evm.storage = storage
        evm.access_list = access_list
        return evm

    def into_parts(self) -> EvmParts:
        return EvmParts(
            self.program_counter,
            self.bytecode,
            self.stack,
            self.memory,
            self.gas,
            self.storage,
            self.access_list,
        )

    def push_instruction(self, instruction: Instruction) -> None:
        """Append an instruction to the program."""
        self.bytecode.push(instruction)

    def push_instructions(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.bytecode.push(instruction)

    @property
    def is_finished(self) -> bool:
        """True once the program counter has moved past the last instruction."""
        return self.program_counter >= len(self.bytecode)

    @property
    def next_opcode(self) -> Optional[Opcode]:
        if self.is_finished:
            return None
        return lookup_opcode(self.bytecode.opcode_byte(self.program_counter)).opcode

    def step(self) -> None:
        """Execute the instruction at the program counter."""
        if self.is_finished:
            raise ProgramExhausted(self.program_counter)
        info = lookup_opcode(self.bytecode.opcode_byte(self.program_counter))
        handler = self._FAMILY_HANDLERS[info.family]
        pc = self.program_counter
        try:
            handler(self, info)
        except EvmError as e:
            logger.warning(
                "Step failed",
                pc=pc,
                opcode=info.name,
                error=type(e).__name__,
                detail=str(e),
            )
            raise
        logger.debug(
            "Executed step",
            pc=pc,
            opcode=info.name,
            gas_used=self.gas.used,
            stack_depth=len(self.stack),
        )

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        Step until the program is exhausted or ``max_steps`` steps ran.

        Returns the number of steps executed. Errors propagate unchanged.
        """
        steps = 0
        while not self.is_finished and (max_steps is None or steps < max_steps):
            self.step()
            steps += 1
        return steps

    # ------------------------------------------------------------------ #
    # Family handlers
    # ------------------------------------------------------------------ #

    def _check_stack(self, info: OpcodeInfo) -> None:
        self.stack.require(info.stack_in)
        if info.stack_out > info.stack_in:
            self.stack.require_room(info.stack_out - info.stack_in)

    def _execute_word_op(self, info: OpcodeInfo) -> None:
        self._check_stack(info)
        self.gas.use_gas(info.constant_gas)
        operands = [self.stack.pop() for _ in range(info.stack_in)]
        self.stack.push(WORD_OPS[info.opcode](*operands))
        self.program_counter += 1

    def _execute_memory_op(self, info: OpcodeInfo) -> None:
        if info.opcode is Opcode.MLOAD:
            self.memory.mload(self.gas, self.stack)
        elif info.opcode is Opcode.MSTORE:
            self.memory.mstore(self.gas, self.stack)
        else:
            self.memory.mstore8(self.gas, self.stack)
        self.program_counter += 1

    def _execute_storage_op(self, info: OpcodeInfo) -> None:
        if info.opcode is Opcode.SLOAD:
            self.storage.sload(self.access_list, self.gas, self.stack)
        else:
            self.storage.sstore(self.access_list, self.gas, self.stack)
        self.program_counter += 1

    def _execute_stack_op(self, info: OpcodeInfo) -> None:
        opcode = info.opcode
        if opcode.is_push():
            n_bytes = opcode.push_size()
            # left pad big endian bytes
            data = self.bytecode.read_push_data(self.program_counter + 1, n_bytes)
            self._check_stack(info)
            self.gas.use_gas(info.constant_gas)
            self.stack.push(big_endian_to_int(data) if data else 0)
            self.program_counter += 1 + n_bytes
            return
        self._check_stack(info)
        self.gas.use_gas(info.constant_gas)
        if opcode.is_dup():
            self.stack.dup(opcode.dup_depth())
        else:
            self.stack.swap(opcode.swap_depth())
        self.program_counter += 1

    def _execute_misc_op(self, info: OpcodeInfo) -> None:
        self._check_stack(info)
        self.gas.use_gas(info.constant_gas)
        if info.opcode is Opcode.PC:
            value = self.program_counter
        elif info.opcode is Opcode.MSIZE:
            value = self.memory.word_size * WORD_SIZE
        else:
            value = self.gas.left()
        self.stack.push(value)
        self.program_counter += 1

    def _execute_unsupported(self, info: OpcodeInfo) -> None:
        name = info.opcode.name if info.opcode is not None else None
        raise UnsupportedOpcode(info.value, name)

    _FAMILY_HANDLERS = {
        OpcodeFamily.ARITHMETIC: _execute_word_op,
        OpcodeFamily.COMPARISON: _execute_word_op,
        OpcodeFamily.BITWISE: _execute_word_op,
        OpcodeFamily.MEMORY: _execute_memory_op,
        OpcodeFamily.STORAGE: _execute_storage_op,
        OpcodeFamily.STACK: _execute_stack_op,
        OpcodeFamily.MISC: _execute_misc_op,
        OpcodeFamily.UNSUPPORTED: _execute_unsupported,
    }
