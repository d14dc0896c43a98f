"""
Byte-addressable, word-aligned memory with quadratic expansion pricing.
"""

from typing import Optional

import structlog
from eth_utils import big_endian_to_int

from .errors import MemoryLimitExceeded
from .gas import Gas, GasCost
from .opcodes import CONSTANT_GAS, Opcode
from .stack import Stack

logger = structlog.get_logger()

# Maximum size in bytes of memory, currently 512 KiB
MAX_MEMORY_SIZE = 512 * 1024
WORD_SIZE = 32


def words_for(byte_size: int) -> int:
    """Number of 32-byte words needed to hold ``byte_size`` bytes."""
    return (byte_size + WORD_SIZE - 1) // WORD_SIZE


class Memory:
    def __init__(self, data: Optional[bytes] = None):
        data = bytes(data or b"")
        if len(data) % WORD_SIZE:
            raise ValueError(f"memory size must be a multiple of {WORD_SIZE}, got {len(data)}")
        if len(data) > MAX_MEMORY_SIZE:
            raise MemoryLimitExceeded(len(data), MAX_MEMORY_SIZE)
        self._data = bytearray(data)
        self._word_size = len(data) // WORD_SIZE

    @property
    def word_size(self) -> int:
        """Current size in words, as reported by MSIZE / 32."""
        return self._word_size

    @staticmethod
    def gas_cost(word_size: int) -> int:
        """
        Cumulative price of a memory of ``word_size`` words.

        The quadratic term is multiplied by the denominator constant rather
        than divided by it, so prices are far above the usual schedule.
        """
        return (
            word_size * word_size * GasCost.MEMORY_EXPANSION_QUAD_DENOMINATOR
            + word_size * GasCost.MEMORY_EXPANSION_LINEAR_COEFF
        )

    def expansion_cost(self, offset: int, size: int) -> int:
        """Gas needed to make ``[offset, offset + size)`` addressable, without the base cost."""
        end = offset + size
        if end <= len(self._data):
            return 0
        if end > MAX_MEMORY_SIZE:
            raise MemoryLimitExceeded(end, MAX_MEMORY_SIZE)
        return self.gas_cost(words_for(end)) - self.gas_cost(self._word_size)

    def try_expand_to(self, offset: int, size: int, base_cost: int, gas: Gas) -> int:
        """
        Charge ``base_cost`` plus any expansion fee and grow memory to cover
        ``size`` bytes at ``offset``.

        Raises ``MemoryLimitExceeded`` or ``OutOfGas`` before anything is
        charged or grown. Returns the word size after the call.
        """
        expansion = self.expansion_cost(offset, size)
        gas.use_gas(base_cost + expansion)
        end = offset + size
        if end > len(self._data):
            new_word_size = words_for(end)
            logger.debug(
                "Expanding memory",
                old_words=self._word_size,
                new_words=new_word_size,
                expansion_cost=expansion,
            )
            self._data.extend(bytes(new_word_size * WORD_SIZE - len(self._data)))
            self._word_size = new_word_size
        return self._word_size

    def load(self, offset: int) -> int:
        """Read a big-endian word; the range must already be allocated."""
        assert offset + WORD_SIZE <= len(self._data), "read past allocated memory"
        return big_endian_to_int(bytes(self._data[offset:offset + WORD_SIZE]))

    def store(self, offset: int, value: int) -> None:
        """Write a big-endian word; the range must already be allocated."""
        assert offset + WORD_SIZE <= len(self._data), "write past allocated memory"
        self._data[offset:offset + WORD_SIZE] = value.to_bytes(WORD_SIZE, "big")

    def store8(self, offset: int, value: int) -> None:
        """Write the low byte of ``value``; the address must already be allocated."""
        assert offset < len(self._data), "write past allocated memory"
        self._data[offset] = value & 0xFF

    def mload(self, gas: Gas, stack: Stack) -> int:
        """
        Implementation of the MLOAD opcode.

        Stack input: ``offset``. Stack output: the word at ``offset``.
        """
        stack.require(1)
        offset = stack.peek()
        self.try_expand_to(offset, WORD_SIZE, CONSTANT_GAS[Opcode.MLOAD], gas)
        stack.pop()
        value = self.load(offset)
        stack.push(value)
        return value

    def mstore(self, gas: Gas, stack: Stack) -> None:
        """
        Implementation of the MSTORE opcode.

        Stack inputs: ``offset``, ``value``.
        """
        stack.require(2)
        offset = stack.peek()
        self.try_expand_to(offset, WORD_SIZE, CONSTANT_GAS[Opcode.MSTORE], gas)
        stack.pop()
        self.store(offset, stack.pop())

    def mstore8(self, gas: Gas, stack: Stack) -> None:
        """
        Implementation of the MSTORE8 opcode.

        Stack inputs: ``offset``, ``value`` (only its least significant byte is written).
        """
        stack.require(2)
        offset = stack.peek()
        self.try_expand_to(offset, 1, CONSTANT_GAS[Opcode.MSTORE8], gas)
        stack.pop()
        self.store8(offset, stack.pop())

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def copy(self) -> "Memory":
        return Memory(bytes(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Memory):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Memory(words={self._word_size})"
