"""Value types for catalogue endpoints, document types and beautify rules.

All types are frozen dataclasses built once per lookup and never mutated.
Sequences are tuples and keep configuration order, which for actions is
also the order in which they are applied.

Rule values are stored as configured. Configuration values cannot carry
leading, trailing or embedded spaces reliably, so a space is written as
``PLACEHOLDER`` (U+2423 OPEN BOX) and restored with :func:`restore_spaces`
wherever a rule value is consumed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from opac_spine.core.errors import UnknownModeError

PLACEHOLDER = "␣"

DEFAULT_CHARSET = "iso-8859-1"

# Prefix of a non-empty user clause suffix (ucnf) when appended to a query
USER_CLAUSE_SEPARATOR = "&"

# (tag, subtag); subtag None addresses the tag itself
FieldKey = tuple[str, str | None]


def restore_spaces(value: str) -> str:
    """Replace every placeholder character with a literal space."""
    return value.replace(PLACEHOLDER, " ")


def field_key(tag: str, subtag: str | None = None) -> FieldKey:
    """Normalized record field key; an empty subtag means the tag itself."""
    return tag, subtag or None


class ConditionMode(str, Enum):
    """How a condition compares a field against its value."""

    MATCHES = "matches"

    @classmethod
    def parse(cls, value: str | None) -> ConditionMode:
        """Parse a configured mode; missing means ``matches``."""
        if not value:
            return cls.MATCHES
        try:
            return cls(value)
        except ValueError:
            raise UnknownModeError("condition", value, [m.value for m in cls]) from None


class ActionMode(str, Enum):
    """How an action writes its value into a field."""

    REPLACE = "replace"

    @classmethod
    def parse(cls, value: str | None) -> ActionMode:
        """Parse a configured mode; missing means ``replace``."""
        if not value:
            return cls.REPLACE
        try:
            return cls(value)
        except ValueError:
            raise UnknownModeError("action", value, [m.value for m in cls]) from None


@dataclass(frozen=True)
class Condition:
    """Predicate over one record field guarding an action."""

    tag: str
    subtag: str | None
    value: str
    mode: ConditionMode = ConditionMode.MATCHES

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", ConditionMode.parse(self.mode))

    @property
    def key(self) -> FieldKey:
        return field_key(self.tag, self.subtag)

    @property
    def literal_value(self) -> str:
        return restore_spaces(self.value)


@dataclass(frozen=True)
class Action:
    """Field rewrite applied when all of its conditions hold (a "setvalue")."""

    tag: str
    subtag: str | None
    value: str
    mode: ActionMode = ActionMode.REPLACE
    conditions: tuple[Condition, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", ActionMode.parse(self.mode))
        object.__setattr__(self, "conditions", tuple(self.conditions))

    @property
    def key(self) -> FieldKey:
        return field_key(self.tag, self.subtag)

    @property
    def literal_value(self) -> str:
        return restore_spaces(self.value)

    @property
    def is_unconditional(self) -> bool:
        return not self.conditions


@dataclass(frozen=True)
class SpecialMapping:
    """Catalogue-scoped override: external ``code`` means ``doctype_title``."""

    code: str
    doctype_title: str


@dataclass(frozen=True)
class CatalogEndpoint:
    """A configured remote catalogue and the rules normalizing its records."""

    title: str
    description: str
    address: str
    database: str
    port: int
    charset: str = DEFAULT_CHARSET
    user_clause_suffix: str = ""
    actions: tuple[Action, ...] = ()
    special_mappings: tuple[SpecialMapping, ...] = ()


@dataclass(frozen=True)
class DocumentType:
    """Classification of bibliographic material with its external codes."""

    title: str
    is_periodical: bool = False
    is_multi_volume: bool = False
    is_contained_work: bool = False
    mappings: tuple[str, ...] = ()

    def has_mapping(self, code: str) -> bool:
        return code in self.mappings
