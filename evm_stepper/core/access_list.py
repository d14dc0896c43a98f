from typing import Iterable, Iterator, Optional, Set


class AccessList:
    """Storage slots already touched in the current execution. Slots are never removed."""

    def __init__(self, warm_slots: Optional[Iterable[int]] = None):
        self._warm_slots: Set[int] = set(warm_slots or ())

    def is_warm(self, slot: int) -> bool:
        return slot in self._warm_slots

    def mark_warm(self, slot: int) -> None:
        self._warm_slots.add(slot)

    @property
    def warm_slots(self) -> Set[int]:
        return set(self._warm_slots)

    def copy(self) -> "AccessList":
        return AccessList(self._warm_slots)

    def __contains__(self, slot: int) -> bool:
        return self.is_warm(slot)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._warm_slots))

    def __len__(self) -> int:
        return len(self._warm_slots)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AccessList):
            return NotImplemented
        return self._warm_slots == other._warm_slots

    def __repr__(self) -> str:
        return f"AccessList({sorted(self._warm_slots)})"
