"""Utilities for EVM word arithmetic on concrete 256-bit values."""
from typing import Tuple

TT256 = 2 ** 256
TT256M1 = 2 ** 256 - 1
TT255 = 2 ** 255


def to_signed(value: int) -> int:
    """Interpret a 256-bit word as a two's-complement signed integer."""
    return value - TT256 if value >= TT255 else value


def to_unsigned(value: int) -> int:
    """Wrap a (possibly negative) Python int back into a 256-bit word."""
    return value & TT256M1


def evm_add(a: int, b: int) -> int:
    """Perform EVM addition (wrapping at 2^256)."""
    return (a + b) & TT256M1


def evm_sub(a: int, b: int) -> int:
    """Perform EVM subtraction (wrapping at 2^256)."""
    return (a - b) & TT256M1


def evm_mul(a: int, b: int) -> int:
    """Perform EVM multiplication (wrapping at 2^256)."""
    return (a * b) & TT256M1


def evm_div(a: int, b: int) -> int:
    """Perform EVM division (x / 0 = 0)."""
    return 0 if b == 0 else a // b


def evm_mod(a: int, b: int) -> int:
    """Perform EVM modulo (x % 0 = 0)."""
    return 0 if b == 0 else a % b


def _signed_operands(a: int, b: int) -> Tuple[int, int]:
    return to_signed(a), to_signed(b)


def evm_sdiv(a: int, b: int) -> int:
    """Perform EVM signed division (x / 0 = 0), truncating towards zero."""
    if b == 0:
        return 0
    s0, s1 = _signed_operands(a, b)
    sign = -1 if (s0 < 0) != (s1 < 0) else 1
    return to_unsigned(sign * (abs(s0) // abs(s1)))


def evm_smod(a: int, b: int) -> int:
    """Perform EVM signed modulo (x % 0 = 0); the result takes the dividend's sign."""
    if b == 0:
        return 0
    s0, s1 = _signed_operands(a, b)
    sign = -1 if s0 < 0 else 1
    return to_unsigned(sign * (abs(s0) % abs(s1)))


def evm_addmod(a: int, b: int, n: int) -> int:
    """Perform EVM add-modulo (a + b) % n, (x % 0 = 0)."""
    return 0 if n == 0 else (a + b) % n


def evm_mulmod(a: int, b: int, n: int) -> int:
    """Perform EVM mul-modulo (a * b) % n, (x % 0 = 0)."""
    return 0 if n == 0 else (a * b) % n


def evm_signextend(byte_index: int, value: int) -> int:
    """Extend the sign bit of byte ``byte_index`` (0 = least significant) upwards."""
    if byte_index > 31:
        return value
    testbit = byte_index * 8 + 7
    if value & (1 << testbit):
        return value | (TT256 - (1 << testbit))
    return value & ((1 << testbit) - 1)


def evm_lt(a: int, b: int) -> int:
    """Unsigned less than comparison."""
    return 1 if a < b else 0


def evm_gt(a: int, b: int) -> int:
    """Unsigned greater than comparison."""
    return 1 if a > b else 0


def evm_slt(a: int, b: int) -> int:
    """Signed less than comparison."""
    return 1 if to_signed(a) < to_signed(b) else 0


def evm_sgt(a: int, b: int) -> int:
    """Signed greater than comparison."""
    return 1 if to_signed(a) > to_signed(b) else 0


def evm_eq(a: int, b: int) -> int:
    """Equal comparison."""
    return 1 if a == b else 0


def evm_and(a: int, b: int) -> int:
    """Bitwise AND."""
    return a & b


def evm_or(a: int, b: int) -> int:
    """Bitwise OR."""
    return a | b


def evm_xor(a: int, b: int) -> int:
    """Bitwise XOR."""
    return a ^ b


def evm_not(a: int) -> int:
    """Bitwise NOT."""
    return TT256M1 - a


def evm_byte(index: int, value: int) -> int:
    """Test the lowest bit of the index-th byte of value, counted from the most significant byte."""
    if index >= 32:
        return 0
    return 1 if value & (1 << (8 * (31 - index))) else 0
