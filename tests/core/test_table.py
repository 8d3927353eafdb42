# tests/core/test_table.py
"""Tests for transition table validation and loading."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from pdasim.contracts.errors import TableValidationError
from pdasim.core.table import TransitionRule, TransitionTable, load_table_file
from tests.fixtures.tables import ANBN_TABLE, table_data


class TestTransitionRule:
    def test_list_layout(self) -> None:
        rule = TransitionRule.model_validate(["q0", "a", "", "q1", "a"])

        assert rule.from_state == "q0"
        assert rule.input_symbol == "a"
        assert rule.stack_top == ""
        assert rule.to_state == "q1"
        assert rule.push == "a"

    def test_mapping_layout(self) -> None:
        rule = TransitionRule.model_validate({"from_state": "q1", "stack_top": "$", "to_state": "q1"})

        assert rule.input_symbol == ""
        assert rule.pops
        assert rule.as_tuple() == ("q1", "", "$", "q1", "")

    def test_wrong_length(self) -> None:
        with pytest.raises(ValidationError, match="exactly 5 elements"):
            TransitionRule.model_validate(["q0", "a", "q1"])

    def test_states_required(self) -> None:
        with pytest.raises(ValidationError):
            TransitionRule.model_validate(["", "a", "", "q1", ""])


class TestTransitionTable:
    def test_valid_table(self, anbn_table: TransitionTable) -> None:
        assert anbn_table.name == "anbn"
        assert anbn_table.start_state == "q0"
        assert anbn_table.states == frozenset({"q0", "q1"})
        assert len(anbn_table.transitions) == 4
        assert anbn_table.id is None

    def test_rule_order_preserved(self, anbn_table: TransitionTable) -> None:
        assert [rule.as_tuple() for rule in anbn_table.transitions] == [tuple(r) for r in ANBN_TABLE["transitions"]]

    def test_id_alias(self) -> None:
        table = TransitionTable.from_mapping(table_data(ANBN_TABLE, ID=3))

        assert table.id == 3

    def test_table_is_frozen(self, anbn_table: TransitionTable) -> None:
        with pytest.raises(ValidationError):
            anbn_table.start_state = "q1"  # type: ignore[misc]

    def test_membership_helpers(self, anbn_table: TransitionTable) -> None:
        assert anbn_table.is_input_symbol("a")
        assert not anbn_table.is_input_symbol("$")
        assert anbn_table.is_accepting("q1")
        assert not anbn_table.is_accepting("q0")

    def test_summary_is_sorted(self, anbn_table: TransitionTable) -> None:
        summary = anbn_table.summary()

        assert summary["states"] == ["q0", "q1"]
        assert summary["stack_alphabet"] == ["$", "a"]
        assert summary["transitions"][0] == ["q0", "a", "", "q0", "a"]


class TestTableValidation:
    """Every violated invariant surfaces as a TableValidationError."""

    @pytest.mark.parametrize(
        "field",
        ["states", "input_alphabet", "stack_alphabet", "accepting_states"],
    )
    def test_empty_sets(self, field: str) -> None:
        with pytest.raises(TableValidationError):
            TransitionTable.from_mapping(table_data(ANBN_TABLE, **{field: []}))

    def test_empty_symbol_in_alphabet(self) -> None:
        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(table_data(ANBN_TABLE, input_alphabet=["a", "b", ""]))

        assert any("empty symbol" in line for line in exc_info.value.errors)

    def test_unknown_start_state(self) -> None:
        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(table_data(ANBN_TABLE, start_state="q9"))

        assert any("start_state" in line for line in exc_info.value.errors)

    def test_accepting_not_subset(self) -> None:
        with pytest.raises(TableValidationError, match="Invalid transition table"):
            TransitionTable.from_mapping(table_data(ANBN_TABLE, accepting_states=["q1", "q7"]))

    def test_missing_eos(self) -> None:
        data = table_data(ANBN_TABLE)
        del data["eos"]

        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(data)

        assert any(line.startswith("eos") for line in exc_info.value.errors)

    def test_rule_with_unknown_state(self) -> None:
        transitions = [*ANBN_TABLE["transitions"], ["q1", "a", "", "q5", "a"]]

        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(table_data(ANBN_TABLE, transitions=transitions))

        assert any("transitions[4]" in line and "'q5'" in line for line in exc_info.value.errors)

    def test_rule_input_outside_alphabet(self) -> None:
        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(table_data(ANBN_TABLE, transitions=[["q0", "c", "", "q0", "a"]]))

        assert any("input alphabet" in line for line in exc_info.value.errors)

    def test_rule_stack_symbol_outside_alphabet(self) -> None:
        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(table_data(ANBN_TABLE, transitions=[["q0", "a", "", "q0", "z"]]))

        assert any("stack alphabet" in line for line in exc_info.value.errors)

    def test_eos_allowed_in_rules(self) -> None:
        table = TransitionTable.from_mapping(
            table_data(ANBN_TABLE, stack_alphabet=["a"], transitions=[["q1", "", "$", "q1", ""]])
        )

        assert table.transitions[0].stack_top == "$"

    def test_unknown_field(self) -> None:
        with pytest.raises(TableValidationError):
            TransitionTable.from_mapping(table_data(ANBN_TABLE, alphabet=["a"]))

    def test_error_code(self) -> None:
        with pytest.raises(TableValidationError) as exc_info:
            TransitionTable.from_mapping(table_data(ANBN_TABLE, start_state="q9"))

        assert exc_info.value.to_dict()["code"] == "validation"


class TestLoadTableFile:
    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "anbn.yaml"
        path.write_text(yaml.safe_dump(ANBN_TABLE))

        table = load_table_file(path)

        assert table.name == "anbn"
        assert table.transitions[3].as_tuple() == ("q1", "", "$", "q1", "")

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / "anbn.json"
        path.write_text(json.dumps(ANBN_TABLE))

        assert load_table_file(path) == TransitionTable.from_mapping(ANBN_TABLE)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="not found"):
            load_table_file(tmp_path / "missing.yaml")

    def test_unparseable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("states: [q0, q1\n")

        with pytest.raises(TableValidationError, match="Failed to parse"):
            load_table_file(path)

    def test_top_level_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- q0\n- q1\n")

        with pytest.raises(TableValidationError) as exc_info:
            load_table_file(path)

        assert exc_info.value.errors == ["top-level value is list"]
