"""
Tests for the beautify engine.

Tests verify:
- actions run in order against the current working copy
- reordering actions changes the result
- the input record is never modified
- conditions are a conjunction; a missing field never matches
- placeholders become spaces in written values and patterns
"""

import pytest

from opac_spine.catalog.beautify import BeautifyEngine, beautify
from opac_spine.catalog.catalogues import CatalogRegistry
from opac_spine.catalog.models import Action, ActionMode, Condition, ConditionMode
from opac_spine.core.errors import UnknownModeError


def _action(tag, value, *conditions, subtag=None):
    return Action(tag=tag, subtag=subtag, value=value, conditions=tuple(conditions))


def _condition(tag, value, subtag=None):
    return Condition(tag=tag, subtag=subtag, value=value)


@pytest.fixture
def engine():
    return BeautifyEngine()


class TestOrdering:
    def test_earlier_action_enables_later(self, engine):
        a1 = _action("X", "1")
        a2 = _action("Y", "2", _condition("X", "1"))

        assert engine.apply({}, [a1, a2]) == {("X", None): "1", ("Y", None): "2"}

    def test_reordering_changes_result(self, engine):
        a1 = _action("X", "1")
        a2 = _action("Y", "2", _condition("X", "1"))

        assert engine.apply({}, [a2, a1]) == {("X", None): "1"}

    def test_earlier_action_disables_later(self, engine):
        record = {("002@", "0"): "Aa"}
        rules = [
            _action("002@", "Aau", _condition("002@", "Aa", subtag="0"), subtag="0"),
            _action("002@", "Aa-other", _condition("002@", "Aa", subtag="0"), subtag="0"),
        ]

        assert engine.apply(record, rules) == {("002@", "0"): "Aau"}

    def test_no_rules_returns_copy(self, engine):
        record = {("001A", None): "x"}
        result = engine.apply(record, [])
        assert result == record
        assert result is not record


class TestInputIsolation:
    def test_input_not_mutated(self, engine):
        record = {("002@", "0"): "Aa"}
        engine.apply(record, [_action("002@", "Aau", subtag="0")])
        assert record == {("002@", "0"): "Aa"}

    def test_empty_subtag_normalized(self, engine):
        result = engine.apply({("X", ""): "1"}, [_action("Y", "2", _condition("X", "1"))])
        assert result == {("X", None): "1", ("Y", None): "2"}


class TestConditions:
    def test_all_conditions_must_hold(self, engine):
        rule = _action("Z", "set", _condition("X", "1"), _condition("Y", "2"))

        assert engine.apply({("X", None): "1"}, [rule]) == {("X", None): "1"}
        assert engine.apply({("X", None): "1", ("Y", None): "2"}, [rule])[("Z", None)] == "set"

    def test_missing_field_is_false(self, engine):
        assert engine.evaluate_condition({}, _condition("X", ".*")) is False

    def test_full_match_required(self, engine):
        fields = {("002@", "0"): "Aau"}
        assert engine.evaluate_condition(fields, _condition("002@", "Aa", subtag="0")) is False
        assert engine.evaluate_condition(fields, _condition("002@", "Aa.*", subtag="0")) is True

    def test_literal_value_matches_itself(self, engine):
        fields = {("036E", "a"): "Series"}
        assert engine.evaluate_condition(fields, _condition("036E", "Series", subtag="a"))

    def test_placeholder_in_pattern(self, engine):
        fields = {("021A", "a"): "Alte Handschrift"}
        condition = _condition("021A", "Alte␣Handschrift", subtag="a")
        assert engine.evaluate_condition(fields, condition)


class TestPlaceholder:
    def test_written_value_has_spaces(self, engine):
        result = engine.apply({}, [_action("036E", "Series␣Title", subtag="a")])
        assert result == {("036E", "a"): "Series Title"}


class TestTrace:
    def test_outcomes_per_action(self, engine):
        blocked = _condition("X", "never")
        rules = [_action("X", "1"), _action("Y", "2", blocked)]

        result = engine.trace({}, rules)

        assert result.applied_count == 1
        assert [o.applied for o in result.outcomes] == [True, False]
        assert result.outcomes[1].failed_condition == blocked
        assert result.outcomes[1].index == 1


class TestModes:
    def test_string_modes_accepted(self, engine):
        condition = Condition(tag="X", subtag=None, value="1", mode="matches")
        rule = Action(tag="Y", subtag=None, value="2", mode="replace", conditions=(condition,))

        result = engine.trace({("X", None): "1"}, [rule])

        assert result.fields == {("X", None): "1", ("Y", None): "2"}
        assert result.outcomes[0].action.mode is ActionMode.REPLACE
        assert condition.mode is ConditionMode.MATCHES

    def test_unknown_action_mode_rejected(self):
        with pytest.raises(UnknownModeError):
            Action(tag="X", subtag=None, value="1", mode="append")

    def test_unknown_condition_mode_rejected(self):
        with pytest.raises(UnknownModeError):
            Condition(tag="X", subtag=None, value="1", mode="contains")


class TestConfiguredRules:
    def test_gbv_rules(self, yaml_store):
        endpoint = CatalogRegistry(yaml_store).get_catalog("GBV")
        record = {
            ("002@", "0"): "Aaxy",
            ("021A", "a"): "Eine Handschrift aus Halle",
        }

        result = beautify(record, endpoint.actions)

        assert result == {
            ("002@", "0"): "Aau",
            ("021A", "a"): "Eine Handschrift aus Halle",
            ("036E", "a"): "Series Title",
        }

    def test_gbv_rules_condition_fails(self, yaml_store):
        endpoint = CatalogRegistry(yaml_store).get_catalog("GBV")
        record = {("002@", "0"): "Aaxy"}

        result = beautify(record, endpoint.actions)

        assert result[("002@", "0")] == "Aaxy"
        assert result[("036E", "a")] == "Series Title"
