from typing import Dict, Iterator, Optional, Tuple

import structlog

from .access_list import AccessList
from .gas import Gas, GasCost
from .opcodes import CONSTANT_GAS, Opcode
from .stack import Stack

logger = structlog.get_logger()


class Storage:
    """
    Persistent slot -> value mapping for a single execution context.

    Slots never written read as zero. There is no transaction-level
    "original value": it is always treated as zero, and no refunds are kept.
    """

    def __init__(self, slots: Optional[Dict[int, int]] = None):
        self._slots: Dict[int, int] = dict(slots or {})

    def raw_get(self, key: int) -> int:
        return self._slots.get(key, 0)

    def raw_set(self, key: int, value: int) -> int:
        """Set a slot and return its previous value."""
        previous = self._slots.get(key, 0)
        self._slots[key] = value
        return previous

    @staticmethod
    def sload_cost(access_list: AccessList, key: int) -> int:
        """Total SLOAD price for ``key`` given its warm/cold state."""
        dynamic_gas = GasCost.WARM_ACCESS if access_list.is_warm(key) else GasCost.COLD_SLOAD
        return CONSTANT_GAS[Opcode.SLOAD] + dynamic_gas

    def sstore_cost(self, access_list: AccessList, key: int) -> int:
        """Total SSTORE price for ``key`` given its current value and warm/cold state."""
        if self.raw_get(key) == 0:
            base_dynamic_gas = GasCost.SSTORE_SET
        else:
            base_dynamic_gas = GasCost.WARM_ACCESS
        if not access_list.is_warm(key):
            base_dynamic_gas += GasCost.COLD_SLOAD
        return CONSTANT_GAS[Opcode.SSTORE] + base_dynamic_gas

    def sload(self, access_list: AccessList, gas: Gas, stack: Stack) -> int:
        """
        Implementation of the SLOAD opcode.

        Stack input: ``key``. Stack output: the stored value, zero if never set.
        Raises ``StackUnderflow`` or ``OutOfGas`` before touching any state.
        """
        stack.require(1)
        key = stack.peek()
        cold = not access_list.is_warm(key)
        gas.use_gas(self.sload_cost(access_list, key))
        if cold:
            logger.debug("Cold storage read", slot=hex(key))
        access_list.mark_warm(key)
        stack.pop()
        value = self.raw_get(key)
        stack.push(value)
        return value

    def sstore(self, access_list: AccessList, gas: Gas, stack: Stack) -> int:
        """
        Implementation of the SSTORE opcode.

        Stack inputs: ``key``, ``value``. Returns the slot's previous value.
        Raises ``StackUnderflow`` or ``OutOfGas`` before touching any state.
        """
        stack.require(2)
        key = stack.peek()
        cold = not access_list.is_warm(key)
        gas.use_gas(self.sstore_cost(access_list, key))
        if cold:
            logger.debug("Cold storage write", slot=hex(key))
        access_list.mark_warm(key)
        stack.pop()
        value = stack.pop()
        return self.raw_set(key, value)

    @property
    def slots(self) -> Dict[int, int]:
        return dict(self._slots)

    def copy(self) -> "Storage":
        return Storage(self._slots)

    def items(self) -> Iterator[Tuple[int, int]]:
        return iter(sorted(self._slots.items()))

    def __contains__(self, key: int) -> bool:
        return key in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Storage):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        slots = {hex(k): hex(v) for k, v in sorted(self._slots.items())}
        return f"Storage({slots})"
