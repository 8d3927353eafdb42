# tests/engine/test_clock.py
"""Tests for the MutationClock diagnostic counter."""

import pytest

from pdasim.engine.clock import MutationClock


class TestMutationClock:
    def test_starts_at_zero(self) -> None:
        assert MutationClock().value == 0

    def test_custom_start(self) -> None:
        assert MutationClock(start=10).value == 10

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            MutationClock(start=-1)

    def test_tick_returns_new_value(self) -> None:
        clock = MutationClock()

        assert clock.tick() == 1
        assert clock.tick(2) == 3
        assert clock.value == 3

    @pytest.mark.parametrize("count", [0, -1])
    def test_clock_never_goes_back(self, count: int) -> None:
        """Advancing by zero or a negative count is an error, not a no-op."""
        clock = MutationClock(start=5)

        with pytest.raises(ValueError, match="Cannot advance"):
            clock.tick(count)

        assert clock.value == 5

    def test_repr(self) -> None:
        assert repr(MutationClock(start=7)) == "MutationClock(value=7)"
