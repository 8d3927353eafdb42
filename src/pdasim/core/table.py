"""
Transition table schema and loading.

Uses Pydantic for validation. Tables are frozen (immutable) after
construction, so a single instance can be shared by any number of
concurrently running sessions without synchronization.

Rule order is significant: the engine scans rules in declaration order
and the first match wins. Nothing here reorders, deduplicates or indexes
the rules.
"""

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError, model_validator

from pdasim.contracts.errors import TableValidationError

# Field order of a rule given in the compact 5-element list layout:
# [from_state, input_symbol, stack_top, to_state, push]
_RULE_FIELDS: tuple[str, ...] = ("from_state", "input_symbol", "stack_top", "to_state", "push")


class TransitionRule(BaseModel):
    """A single PDA transition.

    Empty strings carry meaning:
    - input_symbol "" is an epsilon transition (consumes no token)
    - stack_top "" is a wildcard (matches any top, including an empty stack)
    - push "" pops the stack instead of pushing

    Example YAML (either form):
        transitions:
          - [q0, a, "", q0, a]
          - from_state: q0
            input_symbol: b
            stack_top: a
            to_state: q1
            push: ""
    """

    model_config = {"frozen": True, "extra": "forbid"}

    from_state: str = Field(min_length=1, description="State the rule applies in")
    input_symbol: str = Field("", description="Token consumed; empty for epsilon")
    stack_top: str = Field("", description="Required stack top; empty for wildcard")
    to_state: str = Field(min_length=1, description="State entered when the rule fires")
    push: str = Field("", description="Symbol pushed; empty to pop")

    @model_validator(mode="before")
    @classmethod
    def _accept_sequence_layout(cls, data: Any) -> Any:
        """Accept the [from, input, top, to, push] list layout."""
        if isinstance(data, list | tuple):
            if len(data) != len(_RULE_FIELDS):
                raise ValueError(f"transition must have exactly {len(_RULE_FIELDS)} elements, got {len(data)}")
            return dict(zip(_RULE_FIELDS, data, strict=True))
        return data

    @property
    def pops(self) -> bool:
        return self.push == ""

    def as_tuple(self) -> tuple[str, str, str, str, str]:
        return (self.from_state, self.input_symbol, self.stack_top, self.to_state, self.push)


class TransitionTable(BaseModel):
    """Immutable, validated description of a pushdown automaton.

    Invariants checked at construction:
    - states, input_alphabet, stack_alphabet and accepting_states are non-empty
    - no set contains the empty symbol
    - start_state is a member of states; eos is non-empty
    - accepting_states is a subset of states
    - every rule references known states, its input symbol is in the input
      alphabet (or epsilon), and its stack symbols are in the stack alphabet
      (or the EOS marker, or empty)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: int | None = Field(default=None, validation_alias=AliasChoices("id", "ID"))
    name: str = Field("pda", min_length=1)
    states: frozenset[str] = Field(min_length=1)
    input_alphabet: frozenset[str] = Field(min_length=1)
    stack_alphabet: frozenset[str] = Field(min_length=1)
    accepting_states: frozenset[str] = Field(min_length=1)
    start_state: str = Field(min_length=1)
    eos: str = Field(min_length=1, description="Stack-bottom end-of-stream marker")
    transitions: tuple[TransitionRule, ...] = ()

    @model_validator(mode="after")
    def _validate_references(self) -> Self:
        errors: list[str] = []

        # "" means epsilon / wildcard / pop in rules, so it cannot be a symbol
        for field_name in ("states", "input_alphabet", "stack_alphabet", "accepting_states"):
            if "" in getattr(self, field_name):
                errors.append(f"{field_name} must not contain an empty symbol")

        if self.start_state not in self.states:
            errors.append(f"start_state {self.start_state!r} is not a declared state")

        unknown_accepting = sorted(self.accepting_states - self.states)
        if unknown_accepting:
            errors.append(f"accepting_states {unknown_accepting} are not declared states")

        stack_symbols = self.stack_alphabet | {self.eos, ""}
        for index, rule in enumerate(self.transitions):
            for state in (rule.from_state, rule.to_state):
                if state not in self.states:
                    errors.append(f"transitions[{index}] references unknown state {state!r}")
            if rule.input_symbol and rule.input_symbol not in self.input_alphabet:
                errors.append(f"transitions[{index}] input {rule.input_symbol!r} is not in the input alphabet")
            for symbol in (rule.stack_top, rule.push):
                if symbol not in stack_symbols:
                    errors.append(f"transitions[{index}] stack symbol {symbol!r} is not in the stack alphabet")

        if errors:
            raise ValueError("; ".join(errors))
        return self

    @classmethod
    def from_mapping(cls, data: Any) -> "TransitionTable":
        """Validate a raw mapping, converting Pydantic errors to TableValidationError."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise TableValidationError(
                f"Invalid transition table ({e.error_count()} error(s))",
                errors=_format_validation_errors(e),
            ) from e

    def is_input_symbol(self, token: str) -> bool:
        return token in self.input_alphabet

    def is_accepting(self, state: str) -> bool:
        return state in self.accepting_states

    def summary(self) -> dict[str, Any]:
        """Describe the table for display (sets sorted for stable output)."""
        return {
            "name": self.name,
            "states": sorted(self.states),
            "input_alphabet": sorted(self.input_alphabet),
            "stack_alphabet": sorted(self.stack_alphabet),
            "accepting_states": sorted(self.accepting_states),
            "start_state": self.start_state,
            "eos": self.eos,
            "transitions": [list(rule.as_tuple()) for rule in self.transitions],
        }


def _format_validation_errors(error: ValidationError) -> list[str]:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        lines.append(f"{location}: {item['msg']}" if location else item["msg"])
    return lines


def load_table_file(path: Path) -> TransitionTable:
    """Load a transition table from a YAML or JSON file.

    JSON is a subset of YAML, so both go through yaml.safe_load. Top-level
    keys are states, input_alphabet, stack_alphabet, accepting_states,
    start_state, transitions and eos (plus optional name and id).

    Args:
        path: Path to the table file

    Returns:
        Validated TransitionTable

    Raises:
        FileNotFoundError: If the file doesn't exist
        TableValidationError: If the file can't be parsed or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Transition table file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise TableValidationError(f"Failed to parse {path.name}", errors=[str(e)]) from e

    if not isinstance(data, dict):
        raise TableValidationError(
            f"Transition table in {path.name} must be a mapping",
            errors=[f"top-level value is {type(data).__name__}"],
        )
    return TransitionTable.from_mapping(data)
