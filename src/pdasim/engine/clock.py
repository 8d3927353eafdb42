"""Logical clock for PDA diagnostics.

The clock counts state-affecting mutations (pushes, pops, transitions,
transition-log appends, stack-top reads, alphabet checks). It is never
consulted for correctness; it exists so two runs of the same call
sequence can be compared tick-for-tick.

Unlike wall-clock time it is fully deterministic, so tests can assert
exact values.
"""

from __future__ import annotations


class MutationClock:
    """Monotonically increasing mutation counter.

    Example:
        clock = MutationClock()
        clock.tick()        # 1
        clock.tick(2)       # 3
        assert clock.value == 3
    """

    def __init__(self, start: int = 0) -> None:
        """Initialize clock at a given tick.

        Args:
            start: Initial tick value (default 0, must be non-negative).

        Raises:
            ValueError: If start is negative.
        """
        if start < 0:
            raise ValueError(f"Clock cannot start at a negative tick: {start}")
        self._value = start

    @property
    def value(self) -> int:
        return self._value

    def tick(self, count: int = 1) -> int:
        """Advance the clock and return the new value.

        Raises:
            ValueError: If count is not positive (the clock never goes back).
        """
        if count < 1:
            raise ValueError(f"Cannot advance clock by {count}")
        self._value += count
        return self._value

    def __repr__(self) -> str:
        return f"MutationClock(value={self._value})"
