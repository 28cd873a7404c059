"""
Catalogue descriptions, document types and record beautification.

- models: frozen value types and mode enums
- specs: pydantic schema turning raw entries into models
- catalogues: CatalogRegistry
- doctypes: DocumentTypeRegistry
- beautify: BeautifyEngine
- client: CatalogClient protocol and fetch_normalized_record
"""

from opac_spine.catalog.beautify import BeautifyEngine, BeautifyResult, RuleOutcome, beautify
from opac_spine.catalog.catalogues import CatalogRegistry, get_catalog, list_catalog_names
from opac_spine.catalog.client import CatalogClient, fetch_normalized_record
from opac_spine.catalog.doctypes import (
    DocumentTypeRegistry,
    get_document_type,
    resolve_by_external_mapping,
)
from opac_spine.catalog.models import (
    PLACEHOLDER,
    Action,
    ActionMode,
    CatalogEndpoint,
    Condition,
    ConditionMode,
    DocumentType,
    FieldKey,
    SpecialMapping,
    field_key,
    restore_spaces,
)

__all__ = [
    "BeautifyEngine",
    "BeautifyResult",
    "RuleOutcome",
    "beautify",
    "CatalogRegistry",
    "get_catalog",
    "list_catalog_names",
    "CatalogClient",
    "fetch_normalized_record",
    "DocumentTypeRegistry",
    "get_document_type",
    "resolve_by_external_mapping",
    "PLACEHOLDER",
    "Action",
    "ActionMode",
    "CatalogEndpoint",
    "Condition",
    "ConditionMode",
    "DocumentType",
    "FieldKey",
    "SpecialMapping",
    "field_key",
    "restore_spaces",
]
