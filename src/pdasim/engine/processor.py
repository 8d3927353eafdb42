# src/pdasim/engine/processor.py
"""PdaEngine: ordered admission of out-of-order tokens into a PDA.

Callers present tokens with their absolute input position, in any order.
The engine applies them to the transition function strictly in position
order:

- A token at the next expected slot is consumed at once, then every
  buffered token directly behind it is drained, stopping at the first gap.
- A token further ahead waits in the pending buffer.
- An end-of-stream (EOS) declaration fixes the stream length. When the
  frontier reaches it (immediately, or later during a drain) the stack
  must hold nothing but the EOS marker, and the final epsilon pop fires.

Any step that finds no transition puts the run into sticky failure; every
later admission is refused until reset().

Thread Safety:
    Every public method runs under a per-engine lock. The frontier check,
    the buffer check and the drain form a single check-then-act sequence
    and must never interleave with another call on the same engine.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from threading import Lock
from typing import Any

from pdasim.contracts.enums import AdmitStatus
from pdasim.contracts.errors import (
    AlreadyFailedError,
    CapacityExceededError,
    IncompleteStackError,
    NoTransitionError,
    OutOfOrderError,
    PdaError,
    UnsupportedSymbolError,
)
from pdasim.contracts.results import AdmitResult, EndOfStreamResult, EvaluationResult, Snapshot
from pdasim.core.config import DEFAULT_MAX_INPUT_LENGTH, EngineSettings
from pdasim.core.logging import get_logger
from pdasim.core.table import TransitionTable
from pdasim.engine.state import NOTHING_CONSUMED, ExecutionState
from pdasim.engine.step import EPSILON, step

logger = get_logger(__name__)


class PdaEngine:
    """Executes one run of a transition table with out-of-order admission.

    Usage:
        engine = PdaEngine(table)

        engine.admit(1, "a")            # buffered: position 0 missing
        engine.admit(0, "a")            # consumes 0, drains 1
        engine.declare_end_of_stream(2)
        engine.is_accepted()
    """

    def __init__(self, table: TransitionTable, *, max_input_length: int = DEFAULT_MAX_INPUT_LENGTH) -> None:
        """Initialize engine at the table's start state.

        Args:
            table: Validated transition table (shared, never mutated)
            max_input_length: Positions must be below this bound

        Raises:
            ValueError: If max_input_length < 1
        """
        if max_input_length < 1:
            raise ValueError(f"max_input_length must be >= 1, got {max_input_length}")
        self._table = table
        self._max_input_length = max_input_length
        self._lock = Lock()
        self._state = ExecutionState.initial(table, max_input_length)
        self._log = logger.bind(pda=table.name)

    # --- Properties ---

    @property
    def table(self) -> TransitionTable:
        return self._table

    @property
    def max_input_length(self) -> int:
        return self._max_input_length

    @property
    def failed(self) -> bool:
        with self._lock:
            return self._state.failed

    @property
    def frontier(self) -> int:
        """Next expected input slot (-1 before anything was consumed)."""
        with self._lock:
            return self._state.frontier

    @property
    def eos_position(self) -> int:
        with self._lock:
            return self._state.eos_position

    @property
    def clock(self) -> int:
        with self._lock:
            return self._state.clock.value

    @property
    def transitions_taken(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._state.transitions_taken)

    @property
    def stack(self) -> tuple[str, ...]:
        """Full stack, bottom first."""
        with self._lock:
            return tuple(self._state.stack)

    # --- Admission ---

    def admit(self, position: int, token: str) -> AdmitResult:
        """Present token at its input position.

        Args:
            position: Absolute input position (0-indexed)
            token: Input symbol

        Returns:
            AdmitResult with status CONSUMED (token applied, plus any drained
            successors) or BUFFERED (waiting for earlier positions)

        Raises:
            AlreadyFailedError: Run is in sticky failure
            UnsupportedSymbolError: Token is outside the input alphabet
            OutOfOrderError: Position is negative, already consumed, or at
                or past the declared end of stream
            CapacityExceededError: Position is beyond max_input_length
            NoTransitionError: This token, or a drained one, had no transition
            IncompleteStackError: The drain reached the declared end of
                stream with symbols left above the EOS marker
        """
        with self._lock:
            return self._admit(position, token)

    def declare_end_of_stream(self, position: int) -> EndOfStreamResult:
        """Declare that the input stream ends before position.

        EOS at position n means the stream holds positions 0..n-1. If those
        are all consumed, reconciliation happens now; otherwise it happens
        when the drain reaches n. Declaring the same position twice is a
        no-op.

        Raises:
            AlreadyFailedError: Run is in sticky failure
            OutOfOrderError: Position is negative, behind consumed input,
                at or before a buffered token, more than one slot past the
                known input, or conflicts with an earlier declaration
            CapacityExceededError: Position is beyond max_input_length
            IncompleteStackError: Immediate reconciliation failed
        """
        with self._lock:
            return self._declare_end_of_stream(position)

    def reset(self) -> None:
        """Return to the start state with an empty stack and buffer.

        Always succeeds, including after a sticky failure. The mutation
        clock keeps counting.
        """
        with self._lock:
            self._reset()

    # --- Queries ---

    def is_accepted(self) -> bool:
        """True if in an accepting state with nothing above the EOS marker."""
        with self._lock:
            return self._is_accepted()

    def peek(self, k: int = 1) -> list[str]:
        """Return up to k symbols from the top of the stack, bottom first.

        k below 1 is treated as 1; k beyond the stack size returns the
        whole stack.
        """
        with self._lock:
            return self._peek(k)

    def queued_tokens(self) -> list[str]:
        """Buffered tokens in ascending position order."""
        with self._lock:
            return self._state.pending.tokens()

    def current_state(self) -> str:
        with self._lock:
            return self._state.current_state

    def stack_length(self) -> int:
        """Stack size excluding occurrences of the EOS marker."""
        with self._lock:
            return self._state.symbols_above_eos(self._table.eos)

    def snapshot(self, k: int = 1) -> Snapshot:
        with self._lock:
            return Snapshot(
                current_state=self._state.current_state,
                peek=tuple(self._peek(k)),
                queued_tokens=tuple(self._state.pending.tokens()),
            )

    # --- Whole-stream evaluation ---

    def evaluate(
        self,
        tokens: str | Sequence[str],
        arrival_order: Sequence[int] | None = None,
    ) -> EvaluationResult:
        """Run a complete token stream from a fresh start.

        Resets the engine, admits every token (in position order, or in
        the order given by arrival_order), then declares end of stream
        after the last token. Evaluation stops at the first error, which
        is returned in the result rather than raised.

        An empty stream takes no transitions at all: it is accepted exactly
        when the start state is accepting.

        Args:
            tokens: Token sequence, or a whitespace-separated string
            arrival_order: Permutation of positions giving the order in
                which tokens are presented

        Raises:
            ValueError: If arrival_order is not a permutation of positions
        """
        token_list = tuple(tokens.split() if isinstance(tokens, str) else tokens)
        order = list(range(len(token_list))) if arrival_order is None else list(arrival_order)
        if sorted(order) != list(range(len(token_list))):
            raise ValueError(f"arrival_order must be a permutation of 0..{len(token_list) - 1}, got {order}")

        with self._lock:
            self._reset()
            error: PdaError | None = None
            if not token_list:
                self._log.debug("Empty input, start state is final", state=self._state.current_state)
            else:
                try:
                    for position in order:
                        self._admit(position, token_list[position])
                    self._declare_end_of_stream(len(token_list))
                except PdaError as e:
                    error = e
                    self._log.info("Evaluation stopped", error_code=str(e.code), detail=e.message)

            return EvaluationResult(
                tokens=token_list,
                accepted=self._is_accepted(),
                final_state=self._state.current_state,
                stack=tuple(self._state.stack),
                transitions_taken=tuple(self._state.transitions_taken),
                error=error,
            )

    # --- Internals (caller holds the lock) ---

    def _admit(self, position: int, token: str) -> AdmitResult:
        state = self._state
        if state.failed:
            raise AlreadyFailedError()
        if position < 0:
            raise OutOfOrderError(position, "positions start at 0")
        if not self._table.is_input_symbol(token):
            raise UnsupportedSymbolError(token)
        state.clock.tick()

        if state.eos_declared and position >= state.eos_position:
            raise OutOfOrderError(position, f"end of stream was declared at position {state.eos_position}")
        if position < state.frontier:
            raise OutOfOrderError(position, f"tokens up to position {state.frontier - 1} are already consumed")
        state.pending.check_capacity(position)

        if position != state.next_slot:
            stored = state.pending.offer(position, token)
            if stored:
                self._log.debug("Token buffered", position=position, token=token, frontier=state.frontier)
            else:
                self._log.debug(
                    "Position already buffered, token ignored",
                    position=position,
                    token=token,
                    buffered=state.pending.get(position),
                )
            return AdmitResult(
                status=AdmitStatus.BUFFERED,
                position=position,
                token=token,
                state=state.current_state,
                duplicate=not stored,
            )

        if state.frontier == NOTHING_CONSUMED:
            self._bootstrap()
        consumed, reconciled = self._consume_run(position, token)
        return AdmitResult(
            status=AdmitStatus.CONSUMED,
            position=position,
            token=token,
            state=state.current_state,
            consumed=tuple(consumed),
            eos_reconciled=reconciled,
        )

    def _consume_run(self, position: int, token: str) -> tuple[list[int], bool]:
        """Consume token, then drain contiguous buffered successors.

        A buffered token leaves the buffer only once it has been applied.

        Returns:
            (positions consumed in order, whether EOS was reconciled)
        """
        state = self._state
        consumed: list[int] = []
        while True:
            self._consume(position, token)
            state.pending.take(position)
            consumed.append(position)

            if state.eos_declared and state.frontier == state.eos_position:
                self._reconcile_end_of_stream()
                return consumed, True

            next_token = state.pending.get(position + 1)
            if next_token is None:
                break
            position, token = position + 1, next_token

        if len(consumed) > 1:
            self._log.debug("Drained pending buffer", drained=consumed[1:], frontier=state.frontier)
        return consumed, False

    def _consume(self, position: int, token: str) -> None:
        state = self._state
        from_state, stack_top = state.current_state, state.stack_top
        if step(self._table, state, token, position + 1) is None:
            self._fail("no transition", position=position, token=token, state=from_state, stack_top=stack_top)
            raise NoTransitionError(position, token, from_state, stack_top)
        self._log.debug(
            "Token consumed",
            position=position,
            token=token,
            state=state.current_state,
            stack_symbols=list(state.stack),
        )

    def _bootstrap(self) -> None:
        """Establish the initial configuration before the first token.

        Tries an epsilon step first (tables may push their own bottom
        marker). If no rule applies, the EOS marker is pushed implicitly.
        """
        state = self._state
        if step(self._table, state, EPSILON, 0) is not None:
            self._log.debug("Bootstrap transition taken", state=state.current_state, stack_symbols=list(state.stack))
            return
        state.push(self._table.eos)
        state.frontier = 0
        self._log.debug("Stack-bottom marker pushed", eos=self._table.eos)

    def _reconcile_end_of_stream(self) -> None:
        """Check the stack holds only the EOS marker and apply the final pop."""
        state = self._state
        eos = self._table.eos
        remaining = state.symbols_above_eos(eos)
        if remaining:
            self._fail("incomplete stack", eos_position=state.eos_position, stack_symbols=list(state.stack))
            raise IncompleteStackError(
                state.eos_position,
                state.stack,
                f"the stack still holds {remaining} symbol(s) above the EOS marker",
            )
        if not state.stack:
            self._log.debug("End of stream reached with empty stack", eos_position=state.eos_position)
            return

        from_state = state.current_state
        if step(self._table, state, EPSILON, state.frontier) is None:
            self._fail("no final transition", eos_position=state.eos_position, state=from_state)
            raise IncompleteStackError(
                state.eos_position,
                state.stack,
                f"no epsilon transition from state {from_state!r} pops the EOS marker",
            )
        self._log.debug("End of stream reconciled", state=state.current_state, stack_symbols=list(state.stack))

    def _declare_end_of_stream(self, position: int) -> EndOfStreamResult:
        state = self._state
        if state.failed:
            raise AlreadyFailedError()
        if position < 0:
            raise OutOfOrderError(position, "positions start at 0")
        if state.eos_declared:
            if position == state.eos_position:
                return EndOfStreamResult(
                    position=position,
                    state=state.current_state,
                    reconciled=False,
                    already_declared=True,
                )
            raise OutOfOrderError(position, f"end of stream already declared at position {state.eos_position}")

        next_slot = state.next_slot
        if position < next_slot:
            raise OutOfOrderError(position, f"tokens up to position {next_slot - 1} are already consumed")
        highest = state.pending.highest_position()
        if highest >= position:
            raise OutOfOrderError(position, f"a token is already buffered at position {highest}")
        known_end = max(next_slot, highest + 1)
        if position > known_end + 1:
            raise OutOfOrderError(position, f"more than one slot missing after known input ending at {known_end}")
        if position > self._max_input_length:
            raise CapacityExceededError(position, self._max_input_length)

        state.eos_position = position
        if position != next_slot:
            self._log.debug("End of stream deferred", eos_position=position, frontier=state.frontier)
            return EndOfStreamResult(position=position, state=state.current_state, reconciled=False)

        if state.frontier == NOTHING_CONSUMED:
            self._bootstrap()
        self._reconcile_end_of_stream()
        return EndOfStreamResult(position=position, state=state.current_state, reconciled=True)

    def _reset(self) -> None:
        self._state = ExecutionState.initial(self._table, self._max_input_length, clock=self._state.clock)
        self._log.info("PDA reset", state=self._state.current_state)

    def _is_accepted(self) -> bool:
        state = self._state
        return (
            not state.failed
            and self._table.is_accepting(state.current_state)
            and state.symbols_above_eos(self._table.eos) == 0
        )

    def _peek(self, k: int) -> list[str]:
        stack = self._state.stack
        k = max(k, 1)
        if len(stack) <= k:
            return list(stack)
        return stack[-k:]

    def _fail(self, reason: str, **context: Any) -> None:
        self._state.failed = True
        self._log.warning("PDA run failed", reason=reason, **context)


def new_engine(
    table: TransitionTable | Mapping[str, Any],
    *,
    max_input_length: int | None = None,
    settings: EngineSettings | None = None,
) -> PdaEngine:
    """Create an engine for table.

    Args:
        table: A TransitionTable, or a raw mapping to validate
        max_input_length: Explicit bound (wins over settings)
        settings: Engine settings supplying max_input_length

    Raises:
        TableValidationError: If a mapping fails validation
    """
    if not isinstance(table, TransitionTable):
        table = TransitionTable.from_mapping(table)
    if max_input_length is None:
        max_input_length = settings.max_input_length if settings is not None else DEFAULT_MAX_INPUT_LENGTH
    return PdaEngine(table, max_input_length=max_input_length)
