"""Typed exceptions raised by the engine and the session registry.

Every error carries a stable ErrorCode and the structured values that
caused it, so callers (and any transport layer in front of them) can
branch on the type or marshal it via to_dict() without parsing messages.

Errors fall into three groups:
- Construction: TableValidationError (malformed table, not recoverable)
- Caller-correctable: UnsupportedSymbolError, OutOfOrderError,
  CapacityExceededError, AlreadyFailedError (state is left untouched)
- Run-terminating: NoTransitionError, IncompleteStackError (set the
  sticky failure flag; only reset() clears it)
"""

from __future__ import annotations

from typing import Any, ClassVar

from pdasim.contracts.enums import ErrorCode


class PdaError(Exception):
    """Base class for all pdasim errors.

    Attributes:
        code: Stable machine-readable error code
        details: Structured values describing the failure
    """

    code: ClassVar[ErrorCode]

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe representation for transport layers."""
        return {"code": str(self.code), "message": self.message, **self.details}


# =============================================================================
# Construction
# =============================================================================


class TableValidationError(PdaError):
    """Raised when a transition table violates its invariants.

    Attributes:
        errors: One human-readable line per violated invariant
    """

    code = ErrorCode.VALIDATION

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message, errors=self.errors)


# =============================================================================
# Admission errors
# =============================================================================


class UnsupportedSymbolError(PdaError):
    """Token is not part of the table's input alphabet."""

    code = ErrorCode.UNSUPPORTED_SYMBOL

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Input token {token!r} is not in the input alphabet", token=token)


class OutOfOrderError(PdaError):
    """Position conflicts with what has already been consumed or declared.

    Covers negative positions, positions behind the frontier, positions at
    or past a declared end of stream, and end-of-stream declarations that
    contradict the known input.
    """

    code = ErrorCode.OUT_OF_ORDER

    def __init__(self, position: int, reason: str) -> None:
        self.position = position
        self.reason = reason
        super().__init__(f"Position {position} rejected: {reason}", position=position, reason=reason)


class CapacityExceededError(PdaError):
    """Position lies beyond the configured maximum input length."""

    code = ErrorCode.CAPACITY_EXCEEDED

    def __init__(self, position: int, max_input_length: int) -> None:
        self.position = position
        self.max_input_length = max_input_length
        super().__init__(
            f"Position {position} exceeds max_input_length ({max_input_length})",
            position=position,
            max_input_length=max_input_length,
        )


class AlreadyFailedError(PdaError):
    """Run is in sticky failure; reset() is required before further admission."""

    code = ErrorCode.ALREADY_FAILED

    def __init__(self) -> None:
        super().__init__("PDA evaluation failed on an earlier token; reset the PDA before using it")


class NoTransitionError(PdaError):
    """No rule matched the current configuration and token.

    Raised for the token presented by the caller and for tokens drained
    from the pending buffer alike; position and token identify the one
    that failed.

    Attributes:
        position: Input position of the failing token
        token: The failing token
        state: Control state the PDA was in
        stack_top: Stack top at the time ("" for an empty stack)
    """

    code = ErrorCode.NO_TRANSITION

    def __init__(self, position: int, token: str, state: str, stack_top: str) -> None:
        self.position = position
        self.token = token
        self.state = state
        self.stack_top = stack_top
        super().__init__(
            f"PDA failed to make transition for input {token!r} at position {position} "
            f"(state={state!r}, stack_top={stack_top!r})",
            position=position,
            token=token,
            state=state,
            stack_top=stack_top,
        )


class IncompleteStackError(PdaError):
    """End of stream reached while the stack cannot be reduced to the EOS marker."""

    code = ErrorCode.INCOMPLETE_STACK

    def __init__(self, eos_position: int, stack: list[str], reason: str) -> None:
        self.eos_position = eos_position
        self.stack = list(stack)
        self.reason = reason
        super().__init__(
            f"PDA reached end of stream at position {eos_position} but {reason}",
            eos_position=eos_position,
            stack=self.stack,
            reason=reason,
        )


# =============================================================================
# Registry errors
# =============================================================================


class UnknownTableError(PdaError):
    code = ErrorCode.UNKNOWN_TABLE

    def __init__(self, table_id: int) -> None:
        self.table_id = table_id
        super().__init__(f"PDA with id {table_id} does not exist", table_id=table_id)


class DuplicateTableError(PdaError):
    code = ErrorCode.DUPLICATE_TABLE

    def __init__(self, table_id: int) -> None:
        self.table_id = table_id
        super().__init__(f"PDA id {table_id} is already in use", table_id=table_id)


class UnknownSessionError(PdaError):
    code = ErrorCode.UNKNOWN_SESSION

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Invalid session {session_id!r}", session_id=session_id)


class SessionTableMismatchError(PdaError):
    """Session exists but was opened against a different table."""

    code = ErrorCode.SESSION_TABLE_MISMATCH

    def __init__(self, session_id: str, expected_table_id: int, actual_table_id: int) -> None:
        self.session_id = session_id
        self.expected_table_id = expected_table_id
        self.actual_table_id = actual_table_id
        super().__init__(
            f"Session {session_id!r} belongs to PDA {actual_table_id}, not {expected_table_id}",
            session_id=session_id,
            expected_table_id=expected_table_id,
            actual_table_id=actual_table_id,
        )
