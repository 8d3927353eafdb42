# src/pdasim/engine/buffer.py
"""Pending buffer for tokens that arrive ahead of the frontier.

Tokens may be presented out of order, but the transition function must
see them in position order. Tokens that cannot be applied yet wait here,
keyed by their absolute position, until the gap in front of them closes.

The buffer is a sparse mapping bounded by a capacity (the maximum input
length); positions at or beyond it are refused. It is NOT thread-safe on
its own: the owning engine serializes all access under its session lock.
"""

from __future__ import annotations

from pdasim.contracts.errors import CapacityExceededError


class PendingBuffer:
    """Capacity-bounded sparse buffer keyed by input position.

    Usage:
        buffer = PendingBuffer(capacity=16)

        buffer.offer(3, "b")     # True: stored
        buffer.offer(3, "x")     # False: slot occupied, never overwritten

        token = buffer.take(3)   # "b", slot is now empty
    """

    def __init__(self, capacity: int) -> None:
        """Initialize empty buffer.

        Args:
            capacity: Positions must be in [0, capacity)

        Raises:
            ValueError: If capacity < 1
        """
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: dict[int, str] = {}

    def check_capacity(self, position: int) -> None:
        """Raise CapacityExceededError if position is outside [0, capacity)."""
        if position >= self._capacity:
            raise CapacityExceededError(position, self._capacity)

    def offer(self, position: int, token: str) -> bool:
        """Store token at position unless the slot is occupied.

        Returns:
            True if stored, False if a token was already buffered there

        Raises:
            CapacityExceededError: If position is beyond capacity
        """
        self.check_capacity(position)
        if position in self._entries:
            return False
        self._entries[position] = token
        return True

    def get(self, position: int) -> str | None:
        """Return the token at position without removing it, or None."""
        return self._entries.get(position)

    def take(self, position: int) -> str | None:
        """Remove and return the token at position, or None if the slot is empty."""
        return self._entries.pop(position, None)

    def highest_position(self) -> int:
        """Highest buffered position, or -1 if the buffer is empty."""
        return max(self._entries, default=-1)

    def tokens(self) -> list[str]:
        """Buffered tokens in ascending position order."""
        return [self._entries[p] for p in sorted(self._entries)]

    def __contains__(self, position: object) -> bool:
        return position in self._entries

    def __len__(self) -> int:
        return len(self._entries)
