"""Transition step: one table lookup applied to an execution state.

Rules are scanned in declaration order and the first match wins, which
resolves non-deterministic configurations.
"""

from __future__ import annotations

from pdasim.core.table import TransitionRule, TransitionTable
from pdasim.engine.state import ExecutionState

EPSILON = ""


def find_rule(table: TransitionTable, state: str, stack_top: str, token: str) -> TransitionRule | None:
    """Return the first rule matching (state, stack_top, token), or None.

    A rule matches when its from_state is the current state and either:
    - its input symbol equals token and its stack_top is a wildcard ("")
      or equals the current top, or
    - token is epsilon, the current top is the EOS marker and the rule
      requires the EOS marker on top (final reduction at the stack bottom)
    """
    for rule in table.transitions:
        if rule.from_state != state:
            continue
        if rule.input_symbol == token and (rule.stack_top == "" or rule.stack_top == stack_top):
            return rule
        if token == EPSILON and stack_top == table.eos and rule.stack_top == table.eos:
            return rule
    return None


def step(table: TransitionTable, state: ExecutionState, token: str, position: int) -> str | None:
    """Apply the first matching rule to state.

    Args:
        table: Transition table
        state: Execution state to mutate
        token: Input token, or EPSILON
        position: Frontier value to record if a rule fires

    Returns:
        The state entered, or None if no rule matched (state is left
        unchanged apart from the diagnostic clock)
    """
    if state.stack:
        state.clock.tick()

    rule = find_rule(table, state.current_state, state.stack_top, token)
    if rule is None:
        return None

    if rule.pops:
        state.pop()
    else:
        state.push(rule.push)
    state.clock.tick()
    state.current_state = rule.to_state
    state.frontier = position
    state.record_transition(rule.to_state)
    return rule.to_state
