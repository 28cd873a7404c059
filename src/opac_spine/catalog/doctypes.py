"""Document Type Registry — resolve document types by title or external code.

Catalogues report the kind of a record with their own codes (``Aa``,
``Ab``, ``Oa`` ...). The global ``doctypes`` table maps those codes to
document types for every catalogue. A catalogue can redefine an ambiguous
code with ``specialmapping`` entries without touching the global table::

    resolve_by_external_mapping(code, catalog_name)
        1. specialmapping entries of the catalogue, in order → first code match
        2. doctypes in title order → first whose mappings contain the code
        3. None

All lookups of one call read the same ``ConfigurationHandle``. A title that
the configuration references but that does not resolve inside that snapshot
is a ``ConfigurationInconsistencyError``.
"""

from __future__ import annotations

from opac_spine.catalog.models import DocumentType
from opac_spine.catalog.specs import parse_doctype, parse_special_mappings
from opac_spine.config.store import ConfigurationHandle, ConfigurationStore, get_store
from opac_spine.core.errors import ConfigurationInconsistencyError
from opac_spine.core.logging import get_logger

logger = get_logger(__name__)


class DocumentTypeRegistry:
    """Read-only view of the document types in a configuration store."""

    def __init__(self, store: ConfigurationStore | None = None):
        self._store = store

    def _definition(self) -> ConfigurationHandle:
        store = self._store if self._store is not None else get_store()
        return store.get_definition()

    def list_document_type_titles(self) -> list[str]:
        """Titles of all configured document types, in configuration order."""
        return self._definition().doctype_titles()

    def get_document_type(self, title: str) -> DocumentType | None:
        """Resolve a document type by exact title; None if not configured."""
        return self._resolve(self._definition(), title)

    def list_document_types(self) -> list[DocumentType]:
        """Every configured document type, in configuration order."""
        handle = self._definition()
        return [self._require(handle, title) for title in handle.doctype_titles()]

    def resolve_by_external_mapping(
        self, mapping_code: str, catalog_name: str
    ) -> DocumentType | None:
        """
        Resolve the document type a catalogue means by *mapping_code*.

        The catalogue's special mappings win over the global mapping table.

        Raises:
            ConfigurationInconsistencyError: If a special mapping names a
                document type that is not configured
        """
        handle = self._definition()

        entry = handle.find_catalogue(catalog_name)
        if entry is not None:
            for special in parse_special_mappings(entry):
                if special.code == mapping_code:
                    doctype = self._require(handle, special.doctype_title, catalogue=catalog_name)
                    logger.debug(
                        "doctype.special_mapping",
                        catalogue=catalog_name,
                        code=mapping_code,
                        doctype=doctype.title,
                    )
                    return doctype

        for title in handle.doctype_titles():
            doctype = self._require(handle, title)
            if doctype.has_mapping(mapping_code):
                logger.debug(
                    "doctype.global_mapping",
                    catalogue=catalog_name,
                    code=mapping_code,
                    doctype=doctype.title,
                )
                return doctype

        logger.debug("doctype.mapping_not_found", catalogue=catalog_name, code=mapping_code)
        return None

    @staticmethod
    def _resolve(handle: ConfigurationHandle, title: str) -> DocumentType | None:
        entry = handle.find_doctype(title)
        if entry is None:
            return None
        return parse_doctype(entry)

    def _require(
        self, handle: ConfigurationHandle, title: str, catalogue: str | None = None
    ) -> DocumentType:
        doctype = self._resolve(handle, title)
        if doctype is None:
            raise ConfigurationInconsistencyError(
                f"Document type '{title}' is referenced but not configured"
            ).with_context(doctype=title, catalogue=catalogue, source_path=str(handle.source))
        return doctype


def get_document_type(title: str) -> DocumentType | None:
    """Resolve a document type from the process-wide configuration."""
    return DocumentTypeRegistry().get_document_type(title)


def resolve_by_external_mapping(mapping_code: str, catalog_name: str) -> DocumentType | None:
    """Resolve an external code from the process-wide configuration."""
    return DocumentTypeRegistry().resolve_by_external_mapping(mapping_code, catalog_name)
