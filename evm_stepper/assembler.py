"""
Assembly and disassembly helpers.

Turns raw bytecode hex or one-mnemonic-per-line assembly text into
``Instruction`` values the interpreter can load, and renders loaded
bytecode back as text.
"""

from typing import List, Tuple

import structlog
from eth_utils import decode_hex, encode_hex, is_hex, remove_0x_prefix

from .core.bytecode import PUSH_DATA_SIZE, Bytecode, Instruction
from .core.opcodes import OPCODE_NAMES, Opcode, lookup_opcode, opcode_from_name

logger = structlog.get_logger()

COMMENT_MARKERS = ("#", ";", "//")


def parse_hex(bytecode: str) -> List[Instruction]:
    """
    Decode EVM bytecode into a list of instructions.

    Args:
        bytecode: Hexadecimal string representing the bytecode, with or without 0x

    Returns:
        List of Instruction values in program order

    Raises:
        ValueError: On invalid hex, unknown opcode bytes or truncated push data
    """
    bytecode = bytecode.strip()
    if bytecode and not is_hex(bytecode):
        raise ValueError(f"Not a hex string: {bytecode!r}")
    if len(remove_0x_prefix(bytecode)) % 2:
        raise ValueError("Hex bytecode must have an even number of digits")

    bytecode_bytes = decode_hex(bytecode) if bytecode else b""
    instructions = []
    i = 0

    while i < len(bytecode_bytes):
        opcode_value = bytecode_bytes[i]
        offset = i
        i += 1

        if opcode_value not in OPCODE_NAMES:
            raise ValueError(f"Unknown opcode 0x{opcode_value:02x} at offset {offset}")
        opcode = Opcode(opcode_value)

        # Handle PUSH operations
        push_bytes = opcode.push_size()
        if push_bytes:
            if i + push_bytes > len(bytecode_bytes):
                raise ValueError(
                    f"{opcode.name} at offset {offset} needs {push_bytes} byte(s) of push data, "
                    f"only {len(bytecode_bytes) - i} available"
                )
            payload = bytecode_bytes[i:i + push_bytes]
            i += push_bytes
            instructions.append(Instruction(opcode, payload.ljust(PUSH_DATA_SIZE, b"\x00")))
        else:
            instructions.append(Instruction(opcode))

    logger.debug("Decoded bytecode", size=len(bytecode_bytes), instructions=len(instructions))
    return instructions


def _strip_comment(line: str) -> str:
    for marker in COMMENT_MARKERS:
        index = line.find(marker)
        if index != -1:
            line = line[:index]
    return line.strip()


def _parse_operand(token: str, line_number: int) -> int:
    try:
        return int(token, 0)
    except ValueError:
        raise ValueError(f"Line {line_number}: invalid push operand {token!r}") from None


def parse_assembly(text: str) -> List[Instruction]:
    """
    Parse assembly text, one instruction per line.

    Each line is a mnemonic optionally followed by an operand for PUSH1..PUSH32
    (decimal or 0x-prefixed hex). Blank lines and comments (``#``, ``;``, ``//``)
    are ignored.
    """
    instructions = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = _strip_comment(raw_line)
        if not line:
            continue
        tokens = line.split()
        opcode = opcode_from_name(tokens[0])
        size = opcode.push_size()
        if size:
            if len(tokens) != 2:
                raise ValueError(f"Line {line_number}: {opcode.name} takes exactly one operand")
            value = _parse_operand(tokens[1], line_number)
            try:
                instructions.append(Instruction.push(size, value))
            except ValueError as e:
                raise ValueError(f"Line {line_number}: {e}") from None
        else:
            if len(tokens) != 1:
                raise ValueError(f"Line {line_number}: {opcode.name} takes no operand")
            instructions.append(Instruction(opcode))
    return instructions


def disassemble(bytecode: Bytecode) -> List[Tuple[int, str]]:
    """
    Render loaded bytecode as ``(offset, text)`` rows.

    Push payloads that run past the end are shown as far as they go.
    """
    rows = []
    elements = bytecode.elements
    i = 0
    while i < len(elements):
        info = lookup_opcode(elements[i].value)
        size = info.opcode.push_size() if info.opcode is not None else 0
        if size:
            payload = bytes(e.value for e in elements[i + 1:i + 1 + size])
            rows.append((i, f"{info.name} {encode_hex(payload)}"))
        else:
            rows.append((i, info.name))
        i += 1 + size
    return rows
