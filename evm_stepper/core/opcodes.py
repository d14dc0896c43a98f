"""
EVM opcode catalog.

Every byte value resolves to an ``OpcodeInfo`` with a static gas cost, a
stack effect and a dispatch family. Bytes the emulator does not execute
(including bytes that are not opcodes at all) resolve to the
``UNSUPPORTED`` family, so the table covers all 256 values.
"""

from enum import Enum, IntEnum
from typing import Dict, FrozenSet, NamedTuple, Optional, Tuple

from .gas import GasCost


class Opcode(IntEnum):
    """EVM Opcodes"""

    STOP = 0x00
    ADD = 0x01
    MUL = 0x02
    SUB = 0x03
    DIV = 0x04
    SDIV = 0x05
    MOD = 0x06
    SMOD = 0x07
    ADDMOD = 0x08
    MULMOD = 0x09
    EXP = 0x0A
    SIGNEXTEND = 0x0B

    LT = 0x10
    GT = 0x11
    SLT = 0x12
    SGT = 0x13
    EQ = 0x14
    ISZERO = 0x15
    AND = 0x16
    OR = 0x17
    XOR = 0x18
    NOT = 0x19
    BYTE = 0x1A
    SHL = 0x1B
    SHR = 0x1C
    SAR = 0x1D

    SHA3 = 0x20

    ADDRESS = 0x30
    BALANCE = 0x31
    ORIGIN = 0x32
    CALLER = 0x33
    CALLVALUE = 0x34
    CALLDATALOAD = 0x35
    CALLDATASIZE = 0x36
    CALLDATACOPY = 0x37
    CODESIZE = 0x38
    CODECOPY = 0x39
    GASPRICE = 0x3A
    EXTCODESIZE = 0x3B
    EXTCODECOPY = 0x3C
    RETURNDATASIZE = 0x3D
    RETURNDATACOPY = 0x3E
    EXTCODEHASH = 0x3F

    BLOCKHASH = 0x40
    COINBASE = 0x41
    TIMESTAMP = 0x42
    NUMBER = 0x43
    DIFFICULTY = 0x44
    GASLIMIT = 0x45
    CHAINID = 0x46
    SELFBALANCE = 0x47
    BASEFEE = 0x48

    POP = 0x50
    MLOAD = 0x51
    MSTORE = 0x52
    MSTORE8 = 0x53
    SLOAD = 0x54
    SSTORE = 0x55
    JUMP = 0x56
    JUMPI = 0x57
    PC = 0x58
    MSIZE = 0x59
    GAS = 0x5A
    JUMPDEST = 0x5B

    PUSH0 = 0x5F
    PUSH1 = 0x60
    PUSH2 = 0x61
    PUSH3 = 0x62
    PUSH4 = 0x63
    PUSH5 = 0x64
    PUSH6 = 0x65
    PUSH7 = 0x66
    PUSH8 = 0x67
    PUSH9 = 0x68
    PUSH10 = 0x69
    PUSH11 = 0x6A
    PUSH12 = 0x6B
    PUSH13 = 0x6C
    PUSH14 = 0x6D
    PUSH15 = 0x6E
    PUSH16 = 0x6F
    PUSH17 = 0x70
    PUSH18 = 0x71
    PUSH19 = 0x72
    PUSH20 = 0x73
    PUSH21 = 0x74
    PUSH22 = 0x75
    PUSH23 = 0x76
    PUSH24 = 0x77
    PUSH25 = 0x78
    PUSH26 = 0x79
    PUSH27 = 0x7A
    PUSH28 = 0x7B
    PUSH29 = 0x7C
    PUSH30 = 0x7D
    PUSH31 = 0x7E
    PUSH32 = 0x7F

    DUP1 = 0x80
    DUP2 = 0x81
    DUP3 = 0x82
    DUP4 = 0x83
    DUP5 = 0x84
    DUP6 = 0x85
    DUP7 = 0x86
    DUP8 = 0x87
    DUP9 = 0x88
    DUP10 = 0x89
    DUP11 = 0x8A
    DUP12 = 0x8B
    DUP13 = 0x8C
    DUP14 = 0x8D
    DUP15 = 0x8E
    DUP16 = 0x8F

    SWAP1 = 0x90
    SWAP2 = 0x91
    SWAP3 = 0x92
    SWAP4 = 0x93
    SWAP5 = 0x94
    SWAP6 = 0x95
    SWAP7 = 0x96
    SWAP8 = 0x97
    SWAP9 = 0x98
    SWAP10 = 0x99
    SWAP11 = 0x9A
    SWAP12 = 0x9B
    SWAP13 = 0x9C
    SWAP14 = 0x9D
    SWAP15 = 0x9E
    SWAP16 = 0x9F

    LOG0 = 0xA0
    LOG1 = 0xA1
    LOG2 = 0xA2
    LOG3 = 0xA3
    LOG4 = 0xA4

    CREATE = 0xF0
    CALL = 0xF1
    CALLCODE = 0xF2
    RETURN = 0xF3
    DELEGATECALL = 0xF4
    CREATE2 = 0xF5
    STATICCALL = 0xFA
    REVERT = 0xFD
    INVALID = 0xFE
    SELFDESTRUCT = 0xFF

    def is_push(self) -> bool:
        return Opcode.PUSH0 <= self <= Opcode.PUSH32

    def is_dup(self) -> bool:
        return Opcode.DUP1 <= self <= Opcode.DUP16

    def is_swap(self) -> bool:
        return Opcode.SWAP1 <= self <= Opcode.SWAP16

    def push_size(self) -> int:
        """Number of payload bytes following this opcode (0 for non-push opcodes)."""
        return self - Opcode.PUSH0 if self.is_push() else 0

    def dup_depth(self) -> int:
        """DUPn duplicates the element ``n - 1`` positions below the top."""
        return self - Opcode.DUP1

    def swap_depth(self) -> int:
        """SWAPn exchanges the top with the element ``n`` positions below it; returns ``n - 1``."""
        return self - Opcode.SWAP1


class OpcodeFamily(Enum):
    """Dispatch classification, computed once per byte value."""

    ARITHMETIC = "arithmetic"
    COMPARISON = "comparison"
    BITWISE = "bitwise"
    MEMORY = "memory"
    STACK = "stack"
    STORAGE = "storage"
    MISC = "misc"
    UNSUPPORTED = "unsupported"


class OpcodeInfo(NamedTuple):
    value: int
    opcode: Optional[Opcode]
    family: OpcodeFamily
    constant_gas: int
    stack_in: int
    stack_out: int

    @property
    def name(self) -> str:
        return self.opcode.name if self.opcode is not None else f"UNKNOWN_{self.value:02x}"

    @property
    def supported(self) -> bool:
        return self.family is not OpcodeFamily.UNSUPPORTED


# Map from opcode value to name
OPCODE_NAMES = {int(code): name for name, code in Opcode.__members__.items()}

# Static gas charged before any dynamic part
CONSTANT_GAS: Dict[Opcode, int] = {
    Opcode.STOP: GasCost.ZERO,
    Opcode.ADD: GasCost.FASTEST,
    Opcode.MUL: GasCost.FAST,
    Opcode.SUB: GasCost.FASTEST,
    Opcode.DIV: GasCost.FAST,
    Opcode.SDIV: GasCost.FAST,
    Opcode.MOD: GasCost.FAST,
    Opcode.SMOD: GasCost.FAST,
    Opcode.ADDMOD: GasCost.MID,
    Opcode.MULMOD: GasCost.MID,
    Opcode.EXP: GasCost.SLOW,
    Opcode.SIGNEXTEND: GasCost.FAST,
    Opcode.LT: GasCost.FASTEST,
    Opcode.GT: GasCost.FASTEST,
    Opcode.SLT: GasCost.FASTEST,
    Opcode.SGT: GasCost.FASTEST,
    Opcode.EQ: GasCost.FASTEST,
    Opcode.ISZERO: GasCost.FASTEST,
    Opcode.AND: GasCost.FASTEST,
    Opcode.OR: GasCost.FASTEST,
    Opcode.XOR: GasCost.FASTEST,
    Opcode.NOT: GasCost.FASTEST,
    Opcode.BYTE: GasCost.FASTEST,
    Opcode.SHL: GasCost.FASTEST,
    Opcode.SHR: GasCost.FASTEST,
    Opcode.SAR: GasCost.FASTEST,
    Opcode.SHA3: GasCost.SHA3,
    Opcode.POP: GasCost.QUICK,
    Opcode.MLOAD: GasCost.FASTEST,
    Opcode.MSTORE: GasCost.FASTEST,
    Opcode.MSTORE8: GasCost.FASTEST,
    # SLOAD and SSTORE are priced entirely by their dynamic part
    Opcode.SLOAD: GasCost.ZERO,
    Opcode.SSTORE: GasCost.ZERO,
    Opcode.JUMP: GasCost.MID,
    Opcode.JUMPI: GasCost.SLOW,
    Opcode.PC: GasCost.QUICK,
    Opcode.MSIZE: GasCost.QUICK,
    Opcode.GAS: GasCost.QUICK,
    Opcode.PUSH0: GasCost.QUICK,
}

for i in range(1, 33):
    CONSTANT_GAS[Opcode(Opcode.PUSH1 + i - 1)] = GasCost.FASTEST

for i in range(16):
    CONSTANT_GAS[Opcode(Opcode.DUP1 + i)] = GasCost.FASTEST
    CONSTANT_GAS[Opcode(Opcode.SWAP1 + i)] = GasCost.FASTEST

# Map from opcode to stack in, stack out counts
STACK_EFFECTS: Dict[Opcode, Tuple[int, int]] = {
    # 0s arithmetic
    Opcode.STOP: (0, 0),
    Opcode.ADD: (2, 1),
    Opcode.MUL: (2, 1),
    Opcode.SUB: (2, 1),
    Opcode.DIV: (2, 1),
    Opcode.SDIV: (2, 1),
    Opcode.MOD: (2, 1),
    Opcode.SMOD: (2, 1),
    Opcode.ADDMOD: (3, 1),
    Opcode.MULMOD: (3, 1),
    Opcode.EXP: (2, 1),
    Opcode.SIGNEXTEND: (2, 1),
    # 10s comparisons
    Opcode.LT: (2, 1),
    Opcode.GT: (2, 1),
    Opcode.SLT: (2, 1),
    Opcode.SGT: (2, 1),
    Opcode.EQ: (2, 1),
    Opcode.ISZERO: (1, 1),
    Opcode.AND: (2, 1),
    Opcode.OR: (2, 1),
    Opcode.XOR: (2, 1),
    Opcode.NOT: (1, 1),
    Opcode.BYTE: (2, 1),
    Opcode.SHL: (2, 1),
    Opcode.SHR: (2, 1),
    Opcode.SAR: (2, 1),
    # 20s hashing
    Opcode.SHA3: (2, 1),
    # 50s stack, memory, storage, flow
    Opcode.POP: (1, 0),
    Opcode.MLOAD: (1, 1),
    Opcode.MSTORE: (2, 0),
    Opcode.MSTORE8: (2, 0),
    Opcode.SLOAD: (1, 1),
    Opcode.SSTORE: (2, 0),
    Opcode.JUMP: (1, 0),
    Opcode.JUMPI: (2, 0),
    Opcode.PC: (0, 1),
    Opcode.MSIZE: (0, 1),
    Opcode.GAS: (0, 1),
    Opcode.JUMPDEST: (0, 0),
}

# Add PUSH operations
for i in range(0, 33):
    STACK_EFFECTS[Opcode(Opcode.PUSH0 + i)] = (0, 1)

# Add DUP operations
for i in range(1, 17):
    STACK_EFFECTS[Opcode(Opcode.DUP1 + i - 1)] = (i, i + 1)

# Add SWAP operations
for i in range(1, 17):
    STACK_EFFECTS[Opcode(Opcode.SWAP1 + i - 1)] = (i + 1, i + 1)

_FAMILIES: Dict[Opcode, OpcodeFamily] = {
    Opcode.ADD: OpcodeFamily.ARITHMETIC,
    Opcode.MUL: OpcodeFamily.ARITHMETIC,
    Opcode.SUB: OpcodeFamily.ARITHMETIC,
    Opcode.DIV: OpcodeFamily.ARITHMETIC,
    Opcode.SDIV: OpcodeFamily.ARITHMETIC,
    Opcode.MOD: OpcodeFamily.ARITHMETIC,
    Opcode.SMOD: OpcodeFamily.ARITHMETIC,
    Opcode.ADDMOD: OpcodeFamily.ARITHMETIC,
    Opcode.MULMOD: OpcodeFamily.ARITHMETIC,
    Opcode.SIGNEXTEND: OpcodeFamily.ARITHMETIC,
    Opcode.LT: OpcodeFamily.COMPARISON,
    Opcode.GT: OpcodeFamily.COMPARISON,
    Opcode.SLT: OpcodeFamily.COMPARISON,
    Opcode.SGT: OpcodeFamily.COMPARISON,
    Opcode.EQ: OpcodeFamily.COMPARISON,
    Opcode.AND: OpcodeFamily.BITWISE,
    Opcode.OR: OpcodeFamily.BITWISE,
    Opcode.XOR: OpcodeFamily.BITWISE,
    Opcode.NOT: OpcodeFamily.BITWISE,
    Opcode.BYTE: OpcodeFamily.BITWISE,
    Opcode.MLOAD: OpcodeFamily.MEMORY,
    Opcode.MSTORE: OpcodeFamily.MEMORY,
    Opcode.MSTORE8: OpcodeFamily.MEMORY,
    Opcode.SLOAD: OpcodeFamily.STORAGE,
    Opcode.SSTORE: OpcodeFamily.STORAGE,
    Opcode.PC: OpcodeFamily.MISC,
    Opcode.MSIZE: OpcodeFamily.MISC,
    Opcode.GAS: OpcodeFamily.MISC,
}

for _op in Opcode:
    if _op.is_push() or _op.is_dup() or _op.is_swap():
        _FAMILIES[_op] = OpcodeFamily.STACK


def _build_catalog() -> Tuple[OpcodeInfo, ...]:
    entries = []
    for value in range(256):
        opcode = Opcode(value) if value in OPCODE_NAMES else None
        if opcode is None:
            entries.append(OpcodeInfo(value, None, OpcodeFamily.UNSUPPORTED, 0, 0, 0))
            continue
        stack_in, stack_out = STACK_EFFECTS.get(opcode, (0, 0))
        entries.append(
            OpcodeInfo(
                value,
                opcode,
                _FAMILIES.get(opcode, OpcodeFamily.UNSUPPORTED),
                CONSTANT_GAS.get(opcode, GasCost.ZERO),
                stack_in,
                stack_out,
            )
        )
    return tuple(entries)


CATALOG: Tuple[OpcodeInfo, ...] = _build_catalog()

SUPPORTED_OPCODES: FrozenSet[Opcode] = frozenset(
    info.opcode for info in CATALOG if info.supported
)


def lookup_opcode(value: int) -> OpcodeInfo:
    """Return the catalog entry for a byte value."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"opcode byte out of range: {value}")
    return CATALOG[value]


def opcode_from_name(name: str) -> Opcode:
    """Resolve a mnemonic (case-insensitive, KECCAK256 accepted for SHA3)."""
    key = name.strip().upper()
    if key == "KECCAK256":
        key = "SHA3"
    try:
        return Opcode[key]
    except KeyError:
        raise ValueError(f"Unknown opcode mnemonic: {name}") from None
