"""Beautify Engine — apply a catalogue's setvalue rules to a record.

A record is a mapping ``(tag, subtag) -> value``. Rules are applied one by
one, in configuration order, to a working copy of the record:

::

    for action in rules:
        if every condition holds against the *current* working copy:
            write action value (placeholder → space) per action mode

Earlier actions can therefore enable or disable later ones, and reordering
the rules changes the result. The input mapping is never modified and an
action either applies completely or not at all.

Condition modes:
    matches  the field exists and its whole value matches the pattern
             (``re.fullmatch``); a missing field never matches

Action modes:
    replace  overwrite the field with the action value

Example::

    from opac_spine.catalog.beautify import BeautifyEngine

    engine = BeautifyEngine()
    normalized = engine.apply(record, endpoint.actions)
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from opac_spine.catalog.models import (
    Action,
    ActionMode,
    Condition,
    ConditionMode,
    FieldKey,
    field_key,
)
from opac_spine.core.logging import get_logger

logger = get_logger(__name__)

Fields = dict[FieldKey, str]


def _matches(current: str | None, pattern: str) -> bool:
    if current is None:
        return False
    return re.fullmatch(pattern, current) is not None


def _replace(fields: Fields, key: FieldKey, value: str) -> None:
    fields[key] = value


CONDITION_EVALUATORS: dict[ConditionMode, Callable[[str | None, str], bool]] = {
    ConditionMode.MATCHES: _matches,
}

ACTION_APPLIERS: dict[ActionMode, Callable[[Fields, FieldKey, str], None]] = {
    ActionMode.REPLACE: _replace,
}


@dataclass(frozen=True)
class RuleOutcome:
    """What happened to one action during a pass."""

    index: int
    action: Action
    applied: bool
    failed_condition: Condition | None = None


@dataclass(frozen=True)
class BeautifyResult:
    """Normalized fields plus one outcome per action, in rule order."""

    fields: Fields
    outcomes: tuple[RuleOutcome, ...]

    @property
    def applied_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.applied)


class BeautifyEngine:
    """Stateless rule evaluator; safe to share between threads."""

    def apply(self, fields: Mapping[FieldKey, str], rules: Sequence[Action]) -> Fields:
        """Return a normalized copy of *fields* after applying *rules* in order."""
        return self.trace(fields, rules).fields

    def trace(self, fields: Mapping[FieldKey, str], rules: Sequence[Action]) -> BeautifyResult:
        """Apply *rules* and report, per action, whether and why it applied."""
        working: Fields = {field_key(tag, subtag): value for (tag, subtag), value in fields.items()}
        outcomes = []

        for index, action in enumerate(rules):
            failed = self._first_failed_condition(working, action.conditions)
            if failed is not None:
                outcomes.append(RuleOutcome(index, action, applied=False, failed_condition=failed))
                continue

            ACTION_APPLIERS[action.mode](working, action.key, action.literal_value)
            outcomes.append(RuleOutcome(index, action, applied=True))

            logger.debug(
                "beautify.rule_applied",
                index=index,
                tag=action.tag,
                subtag=action.subtag,
                mode=action.mode.value,
            )

        return BeautifyResult(fields=working, outcomes=tuple(outcomes))

    def evaluate_condition(self, fields: Mapping[FieldKey, str], condition: Condition) -> bool:
        """Evaluate one condition against *fields*."""
        evaluator = CONDITION_EVALUATORS[condition.mode]
        return evaluator(fields.get(condition.key), condition.literal_value)

    def _first_failed_condition(
        self, fields: Mapping[FieldKey, str], conditions: Sequence[Condition]
    ) -> Condition | None:
        for condition in conditions:
            if not self.evaluate_condition(fields, condition):
                return condition
        return None


_default_engine = BeautifyEngine()


def beautify(fields: Mapping[FieldKey, str], rules: Sequence[Action]) -> Fields:
    """Apply *rules* to *fields* with the shared engine."""
    return _default_engine.apply(fields, rules)
