"""Mutable per-run execution state.

One ExecutionState belongs to exactly one engine (and so one session).
Only the engine mutates it, through step() and its admission logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pdasim.core.table import TransitionTable
from pdasim.engine.buffer import PendingBuffer
from pdasim.engine.clock import MutationClock

# Sentinels for "nothing consumed yet" and "end of stream not declared"
NOTHING_CONSUMED = -1
EOS_UNDECLARED = -1


@dataclass
class ExecutionState:
    """Configuration of a running PDA.

    Attributes:
        current_state: Control state, always a member of the table's states
        stack: Stack symbols, last element is the top
        transitions_taken: States entered so far, starting with the start state
        frontier: Next expected input slot; NOTHING_CONSUMED (-1) before the
            first step. Consuming the token at position p sets it to p + 1.
        eos_position: Declared stream length, or EOS_UNDECLARED (-1)
        failed: Sticky failure flag, cleared only by a reset
        pending: Tokens buffered ahead of the frontier
        clock: Mutation counter (diagnostics only)
    """

    current_state: str
    pending: PendingBuffer
    clock: MutationClock
    stack: list[str] = field(default_factory=list)
    transitions_taken: list[str] = field(default_factory=list)
    frontier: int = NOTHING_CONSUMED
    eos_position: int = EOS_UNDECLARED
    failed: bool = False

    @classmethod
    def initial(
        cls,
        table: TransitionTable,
        max_input_length: int,
        clock: MutationClock | None = None,
    ) -> ExecutionState:
        """Create the state for a fresh run of table.

        Passing the previous run's clock keeps the counter monotonic across
        resets.
        """
        state = cls(
            current_state=table.start_state,
            pending=PendingBuffer(capacity=max_input_length),
            clock=clock if clock is not None else MutationClock(),
        )
        state.record_transition(table.start_state)
        return state

    @property
    def stack_top(self) -> str:
        """Top of the stack, or "" when the stack is empty."""
        return self.stack[-1] if self.stack else ""

    @property
    def next_slot(self) -> int:
        """Position that can be consumed right now."""
        return max(self.frontier, 0)

    @property
    def eos_declared(self) -> bool:
        return self.eos_position != EOS_UNDECLARED

    def push(self, symbol: str) -> None:
        self.stack.append(symbol)
        self.clock.tick()

    def pop(self) -> str | None:
        """Pop the top symbol; popping an empty stack is a no-op."""
        if not self.stack:
            return None
        self.clock.tick()
        return self.stack.pop()

    def record_transition(self, to_state: str) -> None:
        self.transitions_taken.append(to_state)
        self.clock.tick()

    def symbols_above_eos(self, eos: str) -> int:
        """Stack size with every occurrence of the EOS marker excluded."""
        return sum(1 for symbol in self.stack if symbol != eos)
