# tests/fixtures/tables.py
"""Raw transition table mappings used across the test suite.

Usage:
    from tests.fixtures.tables import ANBN_TABLE, table_data

    broken = table_data(ANBN_TABLE, start_state="nowhere")

ANBN_TABLE relies on the engine pushing the EOS marker itself (no rule
applies before the first token). ZEROS_ONES_TABLE pushes its own bottom
marker with a leading epsilon rule.
"""

from __future__ import annotations

import copy
from typing import Any

ANBN_TABLE: dict[str, Any] = {
    "name": "anbn",
    "states": ["q0", "q1"],
    "input_alphabet": ["a", "b"],
    "stack_alphabet": ["a", "$"],
    "accepting_states": ["q1"],
    "start_state": "q0",
    "eos": "$",
    "transitions": [
        ["q0", "a", "", "q0", "a"],
        ["q0", "b", "a", "q1", ""],
        ["q1", "b", "a", "q1", ""],
        ["q1", "", "$", "q1", ""],
    ],
}

ZEROS_ONES_TABLE: dict[str, Any] = {
    "name": "zeros-ones",
    "states": ["q1", "q2", "q3", "q4"],
    "input_alphabet": ["0", "1"],
    "stack_alphabet": ["0", "1"],
    "accepting_states": ["q1", "q4"],
    "start_state": "q1",
    "eos": "$",
    "transitions": [
        ["q1", "", "", "q2", "$"],
        ["q2", "0", "", "q2", "0"],
        ["q2", "1", "0", "q3", ""],
        ["q3", "1", "0", "q3", ""],
        ["q3", "", "$", "q4", ""],
    ],
}


def table_data(base: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    """Deep copy of a raw table mapping with top-level fields replaced."""
    data = copy.deepcopy(base)
    data.update(overrides)
    return data


def anbn_tokens(n: int) -> list[str]:
    return ["a"] * n + ["b"] * n
