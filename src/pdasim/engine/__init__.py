"""PDA execution engine: transition step, ordered admission, sessions."""

from pdasim.engine.buffer import PendingBuffer
from pdasim.engine.clock import MutationClock
from pdasim.engine.processor import PdaEngine, new_engine
from pdasim.engine.registry import SessionRegistry
from pdasim.engine.state import EOS_UNDECLARED, NOTHING_CONSUMED, ExecutionState
from pdasim.engine.step import EPSILON, find_rule, step

__all__ = [
    "EOS_UNDECLARED",
    "EPSILON",
    "NOTHING_CONSUMED",
    "ExecutionState",
    "MutationClock",
    "PdaEngine",
    "PendingBuffer",
    "SessionRegistry",
    "find_rule",
    "new_engine",
    "step",
]
