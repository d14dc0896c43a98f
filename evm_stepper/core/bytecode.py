"""Program representation: instructions and the bytecode they assemble into."""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from eth_utils import encode_hex

from .errors import MalformedProgram
from .opcodes import Opcode

PUSH_DATA_SIZE = 32


@dataclass(frozen=True)
class Instruction:
    """
    One opcode plus, for PUSH1..PUSH32, a fixed 32-byte payload.

    Only the first ``opcode.push_size()`` bytes of the payload are emitted
    into the bytecode; the rest is ignored.
    """

    opcode: Opcode
    push_data: Optional[bytes] = None

    def __post_init__(self):
        opcode = Opcode(self.opcode)
        object.__setattr__(self, "opcode", opcode)
        needs_payload = opcode.push_size() > 0
        if needs_payload and self.push_data is None:
            raise ValueError(f"{opcode.name} requires push data")
        if not needs_payload and self.push_data is not None:
            raise ValueError(f"{opcode.name} does not take push data")
        if self.push_data is not None:
            data = bytes(self.push_data)
            if len(data) != PUSH_DATA_SIZE:
                raise ValueError(
                    f"push data must be exactly {PUSH_DATA_SIZE} bytes, got {len(data)}"
                )
            object.__setattr__(self, "push_data", data)

    @classmethod
    def push(cls, size: int, value: int) -> "Instruction":
        """Build a PUSH<size> instruction carrying ``value`` big-endian."""
        if not 0 <= size <= 32:
            raise ValueError(f"push size must be within [0, 32], got {size}")
        opcode = Opcode(Opcode.PUSH0 + size)
        if size == 0:
            if value != 0:
                raise ValueError("PUSH0 can only push zero")
            return cls(opcode)
        if value < 0 or value >= 1 << (8 * size):
            raise ValueError(f"value {value} does not fit in {size} byte(s)")
        payload = value.to_bytes(size, "big").ljust(PUSH_DATA_SIZE, b"\x00")
        return cls(opcode, payload)

    @property
    def payload(self) -> bytes:
        """The bytes actually emitted after the opcode."""
        if self.push_data is None:
            return b""
        return self.push_data[: self.opcode.push_size()]

    @property
    def size(self) -> int:
        return 1 + self.opcode.push_size()

    def __str__(self) -> str:
        if self.push_data is None:
            return self.opcode.name
        return f"{self.opcode.name} {encode_hex(self.payload)}"


@dataclass(frozen=True)
class BytecodeElement:
    """A single byte of bytecode, flagged as opcode or push data."""

    value: int
    is_code: bool


class Bytecode:
    """Append-only sequence of bytecode elements."""

    def __init__(self, elements: Optional[Iterable[BytecodeElement]] = None):
        self._elements: List[BytecodeElement] = list(elements or [])

    @classmethod
    def from_instructions(cls, instructions: Iterable[Instruction]) -> "Bytecode":
        bytecode = cls()
        for instruction in instructions:
            bytecode.push(instruction)
        return bytecode

    def push(self, instruction: Instruction) -> None:
        """Append the opcode byte followed by its payload bytes."""
        self._elements.append(BytecodeElement(int(instruction.opcode), True))
        for byte in instruction.payload:
            self._elements.append(BytecodeElement(byte, False))

    def opcode_byte(self, index: int) -> int:
        """Raw byte at ``index``, which must be an opcode rather than push data."""
        element = self._elements[index]
        # the program counter only ever lands on opcode bytes
        assert element.is_code, f"index {index} points into push data"
        return element.value

    def get_opcode(self, index: int) -> Opcode:
        return Opcode(self.opcode_byte(index))

    def read_push_data(self, index: int, size: int) -> bytes:
        """Read ``size`` payload bytes starting at ``index``."""
        end = index + size
        if end > len(self._elements):
            raise MalformedProgram(
                f"push payload at {index} needs {size} byte(s), "
                f"only {max(len(self._elements) - index, 0)} available"
            )
        return bytes(element.value for element in self._elements[index:end])

    @property
    def elements(self) -> List[BytecodeElement]:
        return list(self._elements)

    def to_bytes(self) -> bytes:
        return bytes(element.value for element in self._elements)

    def hex(self) -> str:
        return encode_hex(self.to_bytes())

    def copy(self) -> "Bytecode":
        return Bytecode(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[BytecodeElement]:
        return iter(self._elements)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bytecode):
            return NotImplemented
        return self._elements == other._elements

    def __repr__(self) -> str:
        return f"Bytecode({self.hex()})"
