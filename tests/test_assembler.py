import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from evm_stepper.assembler import disassemble, parse_assembly, parse_hex
from evm_stepper.core.bytecode import Bytecode, BytecodeElement, Instruction
from evm_stepper.core.opcodes import OPCODE_NAMES, Opcode

# Only bytes that name an opcode; the decoder rejects the rest
known_opcode_strategy = st.sampled_from(sorted(OPCODE_NAMES))


@composite
def generate_bytecode_sequence(draw):
    elements = []
    length = draw(st.integers(min_value=0, max_value=60))
    for _ in range(length):
        opcode_val = draw(known_opcode_strategy)
        elements.append(opcode_val.to_bytes(1, "big"))
        push_size = Opcode(opcode_val).push_size()
        if push_size:
            elements.append(draw(st.binary(min_size=push_size, max_size=push_size)))
    return b"".join(elements).hex()


valid_bytecode_strategy = generate_bytecode_sequence()


@settings(max_examples=200, deadline=None)
@given(bytecode_hex=valid_bytecode_strategy)
def test_parse_hex_reproduces_bytecode(bytecode_hex: str):
    """Decoded instructions assemble back into the same bytes."""
    try:
        instructions = parse_hex(bytecode_hex)
    except Exception as e:
        pytest.fail(f"parse_hex raised unexpected exception {type(e).__name__}: {e} on input {bytecode_hex}")
    assert Bytecode.from_instructions(instructions).to_bytes() == bytes.fromhex(bytecode_hex)


@settings(max_examples=200, deadline=None)
@given(bytecode_hex=valid_bytecode_strategy)
def test_disassemble_offsets_follow_instruction_sizes(bytecode_hex: str):
    instructions = parse_hex(bytecode_hex)
    rows = disassemble(Bytecode.from_instructions(instructions))

    assert len(rows) == len(instructions)
    offset = 0
    for (row_offset, text), instruction in zip(rows, instructions):
        assert row_offset == offset
        assert text == str(instruction)
        offset += instruction.size


@settings(max_examples=200, deadline=None)
@given(bytecode_hex=st.binary(min_size=0, max_size=200).map(lambda b: b.hex()))
def test_parse_hex_random_bytes_only_raises_value_error(bytecode_hex: str):
    try:
        parse_hex(bytecode_hex)
    except ValueError:
        pass
    except Exception as e:
        pytest.fail(f"parse_hex raised unexpected exception {type(e).__name__}: {e} on input {bytecode_hex}")


def test_parse_hex_with_prefix():
    instructions = parse_hex("0x600160020100")
    assert [str(i) for i in instructions] == ["PUSH1 0x01", "PUSH1 0x02", "ADD", "STOP"]
    assert instructions[0].push_data == b"\x01" + bytes(31)


def test_parse_hex_empty():
    assert parse_hex("") == []
    assert parse_hex("0x") == []


@pytest.mark.parametrize(
    "bytecode, message",
    [
        ("0xzz", "Not a hex string"),
        ("0x601", "even number"),
        ("0x0c", "Unknown opcode 0x0c at offset 0"),
        ("0x6101", "PUSH2 at offset 0"),
    ],
)
def test_parse_hex_errors(bytecode, message):
    with pytest.raises(ValueError, match=message):
        parse_hex(bytecode)


def test_parse_assembly():
    text = """
    # store 42 in slot 1
    PUSH1 42
    push1 0x01   ; key
    SSTORE
    PUSH0        // zero
    dup1
    """
    instructions = parse_assembly(text)
    assert instructions == [
        Instruction.push(1, 42),
        Instruction.push(1, 1),
        Instruction(Opcode.SSTORE),
        Instruction(Opcode.PUSH0),
        Instruction(Opcode.DUP1),
    ]


@pytest.mark.parametrize(
    "text, message",
    [
        ("PUSH1", "Line 1: PUSH1 takes exactly one operand"),
        ("ADD\nADD 1", "Line 2: ADD takes no operand"),
        ("PUSH1 banana", "Line 1: invalid push operand"),
        ("PUSH1 256", "Line 1: value 256 does not fit"),
        ("FROB", "Unknown opcode mnemonic"),
    ],
)
def test_parse_assembly_errors(text, message):
    with pytest.raises(ValueError, match=message):
        parse_assembly(text)


def test_disassemble_truncated_and_unknown_bytes():
    bytecode = Bytecode([
        BytecodeElement(0x0C, True),
        BytecodeElement(int(Opcode.PUSH2), True),
        BytecodeElement(0xAB, False),
    ])
    assert disassemble(bytecode) == [(0, "UNKNOWN_0c"), (1, "PUSH2 0xab")]
