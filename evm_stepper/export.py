"""
Interpreter state exporter.

Produces a plain, serializable view of an ``Evm`` for hosts that want to
persist or display an execution mid-run, and writes it as JSON or YAML.
"""

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

import structlog
import yaml
from eth_utils import encode_hex

from .assembler import disassemble
from .core.evm import Evm

logger = structlog.get_logger()


def _word(value: int) -> str:
    return hex(value)


@dataclass
class GasView:
    limit: int
    used: int
    left: int


@dataclass
class EvmSnapshot:
    """
    Serializable view of an interpreter.

    Words are rendered as 0x-hex strings. ``stack`` is bottom first; memory is
    one hex blob; storage and warm slots are sorted by slot.
    """

    program_counter: int
    finished: bool
    program: List[str]
    stack: List[str]
    memory: str
    memory_words: int
    storage: Dict[str, str]
    warm_slots: List[str]
    gas: GasView
    next_instruction: str = ""


def snapshot(evm: Evm) -> EvmSnapshot:
    """Build a snapshot of the interpreter's current state."""
    rows = disassemble(evm.bytecode)
    next_instruction = ""
    for offset, text in rows:
        if offset == evm.program_counter:
            next_instruction = text
            break
    return EvmSnapshot(
        program_counter=evm.program_counter,
        finished=evm.is_finished,
        program=[f"{offset:04x}: {text}" for offset, text in rows],
        stack=[_word(value) for value in evm.stack],
        memory=encode_hex(evm.memory.to_bytes()),
        memory_words=evm.memory.word_size,
        storage={_word(key): _word(value) for key, value in evm.storage.items()},
        warm_slots=[_word(slot) for slot in evm.access_list],
        gas=GasView(limit=evm.gas.limit, used=evm.gas.used, left=evm.gas.left()),
        next_instruction=next_instruction,
    )


def snapshot_dict(evm: Evm) -> Dict[str, Any]:
    return asdict(snapshot(evm))


def to_json(evm: Evm) -> str:
    return json.dumps(snapshot_dict(evm), indent=2)


def to_yaml(evm: Evm) -> str:
    return yaml.safe_dump(snapshot_dict(evm), sort_keys=False)


def export_to_json(evm: Evm, filename: str) -> None:
    """Export the interpreter state to a JSON file"""
    with open(filename, "w") as f:
        f.write(to_json(evm))
    logger.info("Exported state", path=filename, format="json")


def export_to_yaml(evm: Evm, filename: str) -> None:
    """Export the interpreter state to a YAML file"""
    with open(filename, "w") as f:
        f.write(to_yaml(evm))
    logger.info("Exported state", path=filename, format="yaml")


FORMATTERS = {
    "json": to_json,
    "yaml": to_yaml,
}
