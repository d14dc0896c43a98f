"""
Gas cost tiers and the gas meter.

The tier values encode a real fee schedule and must not be changed.
"""

import structlog

from .errors import OutOfGas

logger = structlog.get_logger()


class GasCost:
    """Named gas cost constants."""

    ZERO = 0
    QUICK = 2
    FASTEST = 3
    FAST = 5
    MID = 8
    SLOW = 10
    SHA3 = 30
    # per copied word
    COPY = 3
    COPY_SHA3 = 6
    WARM_ACCESS = 100
    COLD_SLOAD = 2100
    SSTORE_SENTRY = 2300
    SSTORE_SET = 20000
    SSTORE_RESET = 2900
    # EIP-3529 lowered it from 15000
    SSTORE_CLEARS_SCHEDULE = 4800
    MEMORY_EXPANSION_QUAD_DENOMINATOR = 512
    MEMORY_EXPANSION_LINEAR_COEFF = 3
    EXP_BYTE_TIMES = 50


class Gas:
    """
    Gas meter with a fixed limit and monotonically increasing usage.

    ``used`` never exceeds ``limit``: a charge that cannot be covered raises
    ``OutOfGas`` and leaves the meter untouched.
    """

    __slots__ = ("_limit", "_used")

    def __init__(self, limit: int, used: int = 0):
        if limit < 0:
            raise ValueError(f"gas limit must be non-negative, got {limit}")
        if not 0 <= used <= limit:
            raise ValueError(f"gas used must be within [0, {limit}], got {used}")
        self._limit = limit
        self._used = used

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def used(self) -> int:
        return self._used

    def left(self) -> int:
        """Gas still available."""
        return self._limit - self._used

    def enough(self, cost: int) -> bool:
        """Read-only check that ``cost`` can be covered."""
        return self.left() >= cost

    def use_gas(self, cost: int) -> None:
        """Charge ``cost``, raising ``OutOfGas`` without charging if it cannot be covered."""
        if cost < 0:
            raise ValueError(f"gas cost must be non-negative, got {cost}")
        if not self.enough(cost):
            logger.debug("Out of gas", cost=cost, left=self.left())
            raise OutOfGas(cost, self.left())
        self._used += cost

    def copy(self) -> "Gas":
        return Gas(self._limit, self._used)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Gas):
            return NotImplemented
        return self._limit == other._limit and self._used == other._used

    def __repr__(self) -> str:
        return f"Gas(limit={self._limit}, used={self._used})"
