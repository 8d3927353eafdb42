"""Operation outcomes and results.

These types answer: "What did an engine operation produce?"

All records are frozen and hold plain values (strings, ints, tuples) so
they can be handed to a transport layer without exposing engine internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pdasim.contracts.enums import AdmitStatus

if TYPE_CHECKING:
    from pdasim.contracts.errors import PdaError


@dataclass(frozen=True)
class AdmitResult:
    """Outcome of a successful admit() call.

    Fields:
        status: CONSUMED if the token was applied, BUFFERED if it waits for a gap
        position: Position the caller presented
        token: Token the caller presented
        state: Control state after the call
        consumed: Positions applied by this call in order (the presented one
            followed by any drained from the buffer); empty when buffered
        eos_reconciled: True if the call reached the declared end of stream
            and the final epsilon pop was applied
        duplicate: True if the position was already buffered and the call
            was a no-op
    """

    status: AdmitStatus
    position: int
    token: str
    state: str
    consumed: tuple[int, ...] = ()
    eos_reconciled: bool = False
    duplicate: bool = False

    @property
    def drained(self) -> tuple[int, ...]:
        """Positions taken from the pending buffer during this call."""
        return self.consumed[1:]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": str(self.status),
            "position": self.position,
            "token": self.token,
            "state": self.state,
            "consumed": list(self.consumed),
            "eos_reconciled": self.eos_reconciled,
            "duplicate": self.duplicate,
        }


@dataclass(frozen=True)
class EndOfStreamResult:
    """Outcome of a successful declare_end_of_stream() call."""

    position: int
    state: str
    reconciled: bool
    already_declared: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "state": self.state,
            "reconciled": self.reconciled,
            "already_declared": self.already_declared,
        }


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time view of a running PDA."""

    current_state: str
    peek: tuple[str, ...]
    queued_tokens: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_state": self.current_state,
            "peek": list(self.peek),
            "queued_tokens": list(self.queued_tokens),
        }


@dataclass(frozen=True)
class SessionInfo:
    """Identity of a session and the table it runs."""

    session_id: str
    table_id: int
    table_name: str
    stack: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "pda_id": self.table_id,
            "pda_name": self.table_name,
            "pda_stack": list(self.stack),
        }


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of evaluating a complete token stream.

    error holds the first PdaError raised during evaluation (None on a
    clean run). A rejected stream may have error=None: the run completed
    but did not end in an accepting configuration.
    """

    tokens: tuple[str, ...]
    accepted: bool
    final_state: str
    stack: tuple[str, ...]
    transitions_taken: tuple[str, ...]
    error: PdaError | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens": list(self.tokens),
            "accepted": self.accepted,
            "final_state": self.final_state,
            "stack": list(self.stack),
            "transitions_taken": list(self.transitions_taken),
            "error": self.error.to_dict() if self.error is not None else None,
        }
