"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.

Import patterns:
    from pdasim.contracts import AdmitResult, AdmitStatus, NoTransitionError
"""

from pdasim.contracts.enums import AdmitStatus, ErrorCode
from pdasim.contracts.errors import (
    AlreadyFailedError,
    CapacityExceededError,
    DuplicateTableError,
    IncompleteStackError,
    NoTransitionError,
    OutOfOrderError,
    PdaError,
    SessionTableMismatchError,
    TableValidationError,
    UnknownSessionError,
    UnknownTableError,
    UnsupportedSymbolError,
)
from pdasim.contracts.results import (
    AdmitResult,
    EndOfStreamResult,
    EvaluationResult,
    SessionInfo,
    Snapshot,
)

__all__ = [
    "AdmitResult",
    "AdmitStatus",
    "AlreadyFailedError",
    "CapacityExceededError",
    "DuplicateTableError",
    "EndOfStreamResult",
    "ErrorCode",
    "EvaluationResult",
    "IncompleteStackError",
    "NoTransitionError",
    "OutOfOrderError",
    "PdaError",
    "SessionInfo",
    "SessionTableMismatchError",
    "Snapshot",
    "TableValidationError",
    "UnknownSessionError",
    "UnknownTableError",
    "UnsupportedSymbolError",
]
