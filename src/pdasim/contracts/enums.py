"""Status codes and error codes used across subsystem boundaries.

Values are plain strings so a transport layer can marshal them as-is.
"""

from enum import StrEnum


class AdmitStatus(StrEnum):
    """Outcome of presenting a token to the engine."""

    CONSUMED = "consumed"
    BUFFERED = "buffered"


class ErrorCode(StrEnum):
    """Stable machine-readable code carried by every PdaError."""

    VALIDATION = "validation"
    UNSUPPORTED_SYMBOL = "unsupported_symbol"
    NO_TRANSITION = "no_transition"
    OUT_OF_ORDER = "out_of_order"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INCOMPLETE_STACK = "incomplete_stack"
    ALREADY_FAILED = "already_failed"
    UNKNOWN_TABLE = "unknown_table"
    DUPLICATE_TABLE = "duplicate_table"
    UNKNOWN_SESSION = "unknown_session"
    SESSION_TABLE_MISMATCH = "session_table_mismatch"
