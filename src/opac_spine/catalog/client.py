"""Boundary to the network client that queries a catalogue.

opac-spine never talks to the network itself. A client only has to
satisfy :class:`CatalogClient`; its transport and protocol errors pass
through :func:`fetch_normalized_record` untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from opac_spine.catalog.beautify import BeautifyEngine, Fields
from opac_spine.catalog.catalogues import CatalogRegistry
from opac_spine.catalog.models import CatalogEndpoint, FieldKey
from opac_spine.core.logging import LogContext, get_logger

logger = get_logger(__name__)


@runtime_checkable
class CatalogClient(Protocol):
    """Fetches the raw fields of one record from a catalogue endpoint."""

    def fetch_record(self, endpoint: CatalogEndpoint, query: Any) -> Mapping[FieldKey, str]:
        ...


def fetch_normalized_record(
    client: CatalogClient,
    catalog_name: str,
    query: Any,
    *,
    catalogues: CatalogRegistry | None = None,
    engine: BeautifyEngine | None = None,
) -> Fields | None:
    """
    Resolve *catalog_name*, fetch a record through *client* and beautify it.

    Returns:
        The normalized fields, or None if the catalogue is not configured
    """
    catalogues = catalogues or CatalogRegistry()
    engine = engine or BeautifyEngine()

    endpoint = catalogues.get_catalog(catalog_name)
    if endpoint is None:
        logger.warning("record.unknown_catalogue", catalogue=catalog_name)
        return None

    with LogContext(catalogue=catalog_name):
        raw = client.fetch_record(endpoint, query)
        result = engine.trace(raw, endpoint.actions)
        logger.info(
            "record.normalized",
            fields=len(result.fields),
            rules=len(result.outcomes),
            applied=result.applied_count,
        )
    return result.fields
