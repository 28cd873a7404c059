"""Catalogue Registry — resolve configured OPAC catalogues by title.

ARCHITECTURE
────────────
::

    list_catalog_names()   → titles in configuration order
    get_catalog(name)      → CatalogEndpoint (with actions) or None
    get_catalogs()         → every CatalogEndpoint, in order
    check_catalogs()       → {title: Ok(endpoint) | Err(error)}

Lookups scan the catalogue entries in document order and the first exact,
case-sensitive title match wins. Duplicate titles are not rejected; the
earliest entry shadows the later ones. Each call works on one
``ConfigurationHandle`` so a concurrent reload never mixes two versions of
the file.

A missing catalogue is ``None``. A catalogue that exists but is malformed
raises ``ConfigurationParseError``.

Example::

    from opac_spine.catalog.catalogues import CatalogRegistry

    registry = CatalogRegistry()
    endpoint = registry.get_catalog("GBV")
    if endpoint is not None:
        print(endpoint.address, endpoint.port, len(endpoint.actions))
"""

from __future__ import annotations

from opac_spine.catalog.models import CatalogEndpoint
from opac_spine.catalog.specs import parse_catalogue
from opac_spine.config.store import ConfigurationHandle, ConfigurationStore, get_store
from opac_spine.core.errors import ConfigurationParseError
from opac_spine.core.logging import get_logger
from opac_spine.core.result import Result, try_result

logger = get_logger(__name__)


class CatalogRegistry:
    """Read-only view of the catalogues in a configuration store.

    Args:
        store: Store to read from; defaults to the process-wide store,
            looked up on every call so ``reset_store()`` takes effect.
    """

    def __init__(self, store: ConfigurationStore | None = None):
        self._store = store

    def _definition(self) -> ConfigurationHandle:
        store = self._store if self._store is not None else get_store()
        return store.get_definition()

    def list_catalog_names(self) -> list[str]:
        """Titles of all configured catalogues, in configuration order."""
        return self._definition().catalogue_titles()

    def get_catalog(self, name: str) -> CatalogEndpoint | None:
        """
        Resolve a catalogue by exact title.

        Returns:
            The endpoint with its ordered actions, or None if not configured

        Raises:
            ConfigurationParseError: If the matching entry is malformed
        """
        handle = self._definition()
        entry = handle.find_catalogue(name)
        if entry is None:
            logger.debug("catalog.not_found", catalogue=name, version=handle.version)
            return None

        endpoint = parse_catalogue(entry)
        logger.debug(
            "catalog.resolved",
            catalogue=name,
            version=handle.version,
            actions=len(endpoint.actions),
            special_mappings=len(endpoint.special_mappings),
        )
        return endpoint

    def get_catalogs(self) -> list[CatalogEndpoint]:
        """Every configured catalogue, resolved in configuration order.

        A title shadowed by an earlier duplicate resolves to the earlier entry.
        """
        handle = self._definition()
        return [parse_catalogue(handle.find_catalogue(title)) for title in handle.catalogue_titles()]

    def check_catalogs(self) -> dict[str, Result[CatalogEndpoint]]:
        """Resolve every catalogue, collecting parse failures instead of raising."""
        handle = self._definition()
        results: dict[str, Result[CatalogEndpoint]] = {}
        for title in handle.catalogue_titles():
            if title in results:
                continue
            entry = handle.find_catalogue(title)
            results[title] = try_result(lambda: parse_catalogue(entry), ConfigurationParseError)

        failed = [title for title, result in results.items() if result.is_err()]
        if failed:
            logger.warning("catalog.check_failed", version=handle.version, catalogues=failed)
        return results


def list_catalog_names() -> list[str]:
    """Titles of all catalogues in the process-wide configuration."""
    return CatalogRegistry().list_catalog_names()


def get_catalog(name: str) -> CatalogEndpoint | None:
    """Resolve a catalogue from the process-wide configuration."""
    return CatalogRegistry().get_catalog(name)
