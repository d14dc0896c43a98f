"""
Property tests for the concrete 256-bit word operations.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from evm_stepper.utils.evm_ops import (
    TT256,
    TT256M1,
    evm_add,
    evm_addmod,
    evm_byte,
    evm_div,
    evm_mod,
    evm_mul,
    evm_mulmod,
    evm_not,
    evm_sdiv,
    evm_sgt,
    evm_signextend,
    evm_slt,
    evm_smod,
    evm_sub,
    to_signed,
    to_unsigned,
)

words = st.integers(min_value=0, max_value=TT256M1)


def neg(value):
    return to_unsigned(-value)


@settings(max_examples=200, deadline=None)
@given(a=words, b=words)
def test_add_sub_wrap(a, b):
    assert evm_add(a, b) == (a + b) % TT256
    assert evm_sub(evm_add(a, b), b) == a
    assert 0 <= evm_mul(a, b) <= TT256M1


@settings(max_examples=100, deadline=None)
@given(a=words)
def test_division_by_zero_is_zero(a):
    assert evm_div(a, 0) == 0
    assert evm_mod(a, 0) == 0
    assert evm_sdiv(a, 0) == 0
    assert evm_smod(a, 0) == 0
    assert evm_addmod(a, a, 0) == 0
    assert evm_mulmod(a, a, 0) == 0


@settings(max_examples=100, deadline=None)
@given(a=words)
def test_not_is_involution(a):
    assert evm_not(evm_not(a)) == a
    assert evm_not(a) ^ a == TT256M1


def test_add_overflow():
    assert evm_add(TT256M1, 1) == 0
    assert evm_sub(0, 1) == TT256M1


def test_signed_division():
    assert evm_sdiv(neg(6), 2) == neg(3)
    assert evm_sdiv(6, neg(2)) == neg(3)
    assert evm_sdiv(neg(6), neg(2)) == 3
    assert evm_sdiv(neg(7), 2) == neg(3)


def test_signed_modulo_takes_dividend_sign():
    assert evm_smod(neg(7), 3) == neg(1)
    assert evm_smod(7, neg(3)) == 1
    assert evm_smod(neg(7), neg(3)) == neg(1)


def test_addmod_mulmod_do_not_wrap_first():
    assert evm_addmod(TT256M1, 1, 7) == TT256 % 7
    assert evm_mulmod(TT256M1, TT256M1, 12) == (TT256M1 * TT256M1) % 12


def test_signed_comparisons():
    assert evm_slt(neg(1), 0) == 1
    assert evm_sgt(neg(1), 0) == 0
    assert evm_sgt(1, neg(1)) == 1
    assert evm_slt(5, 5) == 0


def test_signextend():
    assert evm_signextend(0, 0xFF) == TT256M1
    assert evm_signextend(0, 0x7F) == 0x7F
    assert evm_signextend(1, 0x80FF) == to_unsigned(to_signed(0x80FF << 240) >> 240)
    assert evm_signextend(0, 0x1FF) == TT256M1
    assert evm_signextend(31, 12345) == 12345
    assert evm_signextend(200, 12345) == 12345


def test_byte_tests_lowest_bit_of_indexed_byte():
    assert evm_byte(31, 0xFF) == 1
    assert evm_byte(31, 0xFE) == 0
    assert evm_byte(30, 0x0100) == 1
    assert evm_byte(30, 0xFF) == 0
    assert evm_byte(0, 1 << 248) == 1
    assert evm_byte(0, TT256M1 ^ (1 << 248)) == 0
    assert evm_byte(32, TT256M1) == 0


@settings(max_examples=100, deadline=None)
@given(index=st.integers(min_value=0, max_value=300), value=words)
def test_byte_result_is_a_bit(index, value):
    assert evm_byte(index, value) in (0, 1)


@settings(max_examples=100, deadline=None)
@given(a=words)
def test_signed_round_trip(a):
    assert to_unsigned(to_signed(a)) == a


def test_sdiv_most_negative_by_minus_one_wraps():
    assert evm_sdiv(2**255, neg(1)) == 2**255


signed_words = st.integers(min_value=-(2**255), max_value=2**255 - 1)


@settings(max_examples=200, deadline=None)
@given(a=signed_words, b=signed_words.filter(lambda v: v != 0))
def test_signed_ops_match_truncating_reference(a, b):
    quotient = abs(a) // abs(b) * (-1 if (a < 0) != (b < 0) else 1)
    remainder = a - b * quotient
    assert evm_sdiv(to_unsigned(a), to_unsigned(b)) == to_unsigned(quotient)
    assert evm_smod(to_unsigned(a), to_unsigned(b)) == to_unsigned(remainder)
