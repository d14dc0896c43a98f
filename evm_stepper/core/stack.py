from typing import Iterable, Iterator, List, Optional

from .errors import StackOverflow, StackUnderflow

MAX_STACK_SIZE = 1024


class Stack:
    """A bounded stack of 256-bit words; the top is the last element."""

    def __init__(self, items: Optional[Iterable[int]] = None):
        self._items: List[int] = []
        for item in items or []:
            self.push(item)

    def push(self, value: int) -> None:
        """Push a value onto the stack."""
        if len(self._items) >= MAX_STACK_SIZE:
            raise StackOverflow(MAX_STACK_SIZE)
        self._items.append(value)

    def pop(self) -> int:
        """Pop the top value."""
        if not self._items:
            raise StackUnderflow(1, 0)
        return self._items.pop()

    def peek(self, index: int = 0) -> int:
        """Access stack item without popping (0 is top)."""
        self.require(index + 1)
        return self._items[-(index + 1)]

    def require(self, n: int) -> None:
        """Check the stack holds at least ``n`` elements."""
        if len(self._items) < n:
            raise StackUnderflow(n, len(self._items))

    def require_room(self, n: int) -> None:
        """Check ``n`` more elements can be pushed."""
        if len(self._items) + n > MAX_STACK_SIZE:
            raise StackOverflow(MAX_STACK_SIZE)

    def dup(self, n: int) -> None:
        """Duplicate the element ``n`` positions below the top (DUP1 is n=0)."""
        self.require(n + 1)
        self.push(self._items[-(n + 1)])

    def swap(self, n: int) -> None:
        """Exchange the top with the element ``n + 1`` positions below it (SWAP1 is n=0)."""
        self.require(n + 2)
        self._items[-1], self._items[-(n + 2)] = self._items[-(n + 2)], self._items[-1]

    def top_down(self) -> Iterator[int]:
        """Iterate from the top of the stack to the bottom."""
        return reversed(self._items)

    @property
    def items(self) -> List[int]:
        """Copy of the contents in insertion order (bottom first)."""
        return list(self._items)

    def copy(self) -> "Stack":
        return Stack(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Stack):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Stack({[hex(v) for v in self._items]})"
