"""Pydantic schema for catalogue and doctype entries.

The configuration store only checks the outline of a definition. The
contents of an entry are validated here, when the entry is actually
resolved, and converted into the frozen value types of
:mod:`opac_spine.catalog.models`::

    endpoint = parse_catalogue(handle.find_catalogue("GBV"))
    doctype = parse_doctype(handle.find_doctype("monograph"))

Any schema violation (missing address, a port that is not a positive
integer, an unknown mode, a condition pattern that is not a valid regular
expression) is raised as ``ConfigurationParseError``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from opac_spine.catalog.models import (
    DEFAULT_CHARSET,
    USER_CLAUSE_SEPARATOR,
    Action,
    ActionMode,
    CatalogEndpoint,
    Condition,
    ConditionMode,
    DocumentType,
    SpecialMapping,
    restore_spaces,
)
from opac_spine.config.store import as_list, thaw
from opac_spine.core.errors import ConfigurationParseError


class _EntrySpec(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        populate_by_name=True,
    )


class ConditionSpec(_EntrySpec):
    tag: str = Field(..., min_length=1)
    subtag: str | None = None
    value: str
    mode: str | None = None

    def to_condition(self) -> Condition:
        mode = ConditionMode.parse(self.mode)
        if mode is ConditionMode.MATCHES:
            try:
                re.compile(restore_spaces(self.value))
            except re.error as e:
                raise ConfigurationParseError(
                    f"Condition on {self.tag}/{self.subtag or ''} has an invalid pattern "
                    f"{self.value!r}: {e}",
                    cause=e,
                )
        return Condition(tag=self.tag, subtag=self.subtag or None, value=self.value, mode=mode)


class SetvalueSpec(_EntrySpec):
    tag: str = Field(..., min_length=1)
    subtag: str | None = None
    value: str
    mode: str | None = None
    condition: list[ConditionSpec] = Field(default_factory=list)

    @field_validator("condition", mode="before")
    @classmethod
    def _single_condition(cls, value: Any) -> Any:
        return as_list(value)

    def to_action(self) -> Action:
        return Action(
            tag=self.tag,
            subtag=self.subtag or None,
            value=self.value,
            mode=ActionMode.parse(self.mode),
            conditions=tuple(c.to_condition() for c in self.condition),
        )


class BeautifySpec(_EntrySpec):
    setvalue: list[SetvalueSpec] = Field(default_factory=list)

    @field_validator("setvalue", mode="before")
    @classmethod
    def _single_setvalue(cls, value: Any) -> Any:
        return as_list(value)


class SpecialMappingSpec(_EntrySpec):
    type: str = Field(..., min_length=1, description="Internal document-type title")
    value: str = Field(..., min_length=1, description="External code used by the catalogue")

    def to_special_mapping(self) -> SpecialMapping:
        return SpecialMapping(code=self.value, doctype_title=self.type)


class CatalogueConfigSpec(_EntrySpec):
    description: str = ""
    address: str
    database: str
    port: int = Field(..., gt=0)
    ucnf: str = ""
    charset: str | None = None

    @field_validator("port", mode="before")
    @classmethod
    def _reject_bool_port(cls, value: Any) -> Any:
        # YAML reads yes/true as a bool, which int() would turn into 1
        if isinstance(value, bool):
            raise ValueError("port must be an integer, not a boolean")
        return value


class CatalogueSpec(_EntrySpec):
    title: str
    config: CatalogueConfigSpec
    beautify: BeautifySpec = Field(default_factory=BeautifySpec)
    specialmapping: list[SpecialMappingSpec] = Field(default_factory=list)

    @field_validator("beautify", mode="before")
    @classmethod
    def _empty_beautify(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("specialmapping", mode="before")
    @classmethod
    def _single_specialmapping(cls, value: Any) -> Any:
        return as_list(value)

    def to_endpoint(self) -> CatalogEndpoint:
        config = self.config
        suffix = f"{USER_CLAUSE_SEPARATOR}{config.ucnf}" if config.ucnf else ""
        return CatalogEndpoint(
            title=self.title,
            description=config.description,
            address=config.address,
            database=config.database,
            port=config.port,
            charset=config.charset or DEFAULT_CHARSET,
            user_clause_suffix=suffix,
            actions=tuple(s.to_action() for s in self.beautify.setvalue),
            special_mappings=tuple(m.to_special_mapping() for m in self.specialmapping),
        )


class DoctypeSpec(_EntrySpec):
    title: str
    is_periodical: bool = Field(default=False, alias="isPeriodical")
    is_multi_volume: bool = Field(default=False, alias="isMultiVolume")
    is_contained_work: bool = Field(default=False, alias="isContainedWork")
    mapping: list[str] = Field(default_factory=list)

    @field_validator("mapping", mode="before")
    @classmethod
    def _single_mapping(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return [] if value is None else value

    def to_document_type(self) -> DocumentType:
        return DocumentType(
            title=self.title,
            is_periodical=self.is_periodical,
            is_multi_volume=self.is_multi_volume,
            is_contained_work=self.is_contained_work,
            mappings=tuple(self.mapping),
        )


def parse_catalogue(entry: Mapping[str, Any]) -> CatalogEndpoint:
    """Validate a raw catalogue entry and build its endpoint with all rules."""
    title = entry.get("title")
    try:
        return CatalogueSpec.model_validate(thaw(entry)).to_endpoint()
    except ValidationError as e:
        raise ConfigurationParseError(
            f"Catalogue '{title}' is malformed: {e}", cause=e
        ).with_context(catalogue=title)
    except ConfigurationParseError as e:
        e.with_context(catalogue=title)
        raise


def parse_special_mappings(entry: Mapping[str, Any]) -> tuple[SpecialMapping, ...]:
    """Only the special mappings of a raw catalogue entry, in document order."""
    title = entry.get("title")
    try:
        specs = [
            SpecialMappingSpec.model_validate(item)
            for item in as_list(thaw(entry.get("specialmapping")))
        ]
    except ValidationError as e:
        raise ConfigurationParseError(
            f"Special mappings of catalogue '{title}' are malformed: {e}", cause=e
        ).with_context(catalogue=title)
    return tuple(spec.to_special_mapping() for spec in specs)


def parse_doctype(entry: Mapping[str, Any]) -> DocumentType:
    """Validate a raw doctype entry and build its document type."""
    title = entry.get("title")
    try:
        return DoctypeSpec.model_validate(thaw(entry)).to_document_type()
    except ValidationError as e:
        raise ConfigurationParseError(
            f"Document type '{title}' is malformed: {e}", cause=e
        ).with_context(doctype=title)
