"""
Configuration Store — cached, self-reloading catalogue definition.

Manifesto:
Every catalogue and document-type lookup reads the same definition file.
Parsing it on every lookup is wasteful, but caching it forever means a
running process never sees an edited file. The store keeps one immutable
``ConfigurationHandle`` per process and swaps it atomically whenever the
file's modification marker changes.

ARCHITECTURE
────────────
::

    get_definition()
        │
        ├── fast path (no lock): cached handle, marker unchanged → return it
        │
        └── slow path (lock): re-check, then load / reload
                read_source(path) → _validate_document() → ConfigurationHandle
                self._handle = handle          (atomic reference swap)

    ConfigurationHandle  ── frozen, deep read-only snapshot of one load
    get_store()          ── process-wide store built from OpacSettings
    reset_store()        ── drop the process-wide store (tests)

FAILURE POLICY
──────────────
- Missing file at first load → ``ConfigurationNotFoundError``.
- File vanishes after a load → keep serving the cached handle (warning).
- Unparseable file → ``ConfigurationParseError``; the previous state
  (no handle, or the previous handle) is kept and the next call retries.
- ``fallback_to_empty=True`` restores the legacy behaviour of swallowing
  parse failures into an empty definition. It is logged as an error and is
  off by default, because it turns misconfiguration into "nothing matched".

Example::

    from opac_spine.config.store import ConfigurationStore

    store = ConfigurationStore("/etc/kitodo/opac.yaml")
    handle = store.get_definition()
    handle.catalogue_titles()

Tags:
    opac-spine, configuration, cache, reload, singleton, thread-safe
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from opac_spine.config.sources import read_source
from opac_spine.core.errors import (
    ConfigError,
    ConfigurationNotFoundError,
    ConfigurationParseError,
)
from opac_spine.core.logging import get_logger
from opac_spine.core.result import Result, try_result
from opac_spine.core.settings import get_settings

logger = get_logger(__name__)

# (st_mtime_ns, st_size) of the backing file
SourceMarker = tuple[int, int]


def as_list(value: Any) -> Any:
    """Accept a single mapping where a list of entries is expected."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    return value


def freeze(value: Any) -> Any:
    """Deep read-only copy: dicts become mapping proxies, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Plain dict/list copy of a frozen value, for validation or export."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


# =============================================================================
# Document-level schema
# =============================================================================


class _TitledEntry(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    title: str


class _DoctypesBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: list[_TitledEntry] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _single_type(cls, value: Any) -> Any:
        return as_list(value)


class _DocumentSpec(BaseModel):
    """Shape every definition must have; entry contents are checked on lookup."""

    model_config = ConfigDict(extra="allow")

    catalogue: list[_TitledEntry] = Field(default_factory=list)
    doctypes: _DoctypesBlock = Field(default_factory=_DoctypesBlock)

    @field_validator("catalogue", mode="before")
    @classmethod
    def _single_catalogue(cls, value: Any) -> Any:
        return as_list(value)

    @field_validator("doctypes", mode="before")
    @classmethod
    def _empty_doctypes(cls, value: Any) -> Any:
        return {} if value is None else value


def _validate_document(
    document: dict[str, Any], source: Path
) -> tuple[tuple[Any, ...], tuple[Any, ...]]:
    try:
        spec = _DocumentSpec.model_validate(document)
    except ValidationError as e:
        raise ConfigurationParseError(
            f"Configuration {source} does not match the catalogue schema: {e}",
            cause=e,
        ).with_context(source_path=str(source))

    # titles as validated, so numeric YAML titles are looked up as strings
    catalogues = [
        {**entry, "title": checked.title}
        for entry, checked in zip(as_list(document.get("catalogue")), spec.catalogue)
    ]
    doctype_entries = as_list((document.get("doctypes") or {}).get("type"))
    doctypes = [
        {**entry, "title": checked.title}
        for entry, checked in zip(doctype_entries, spec.doctypes.type)
    ]
    return freeze(catalogues), freeze(doctypes)


# =============================================================================
# Handle
# =============================================================================


@dataclass(frozen=True)
class ConfigurationHandle:
    """One immutable snapshot of the catalogue definition.

    ``catalogues`` and ``doctypes`` hold the raw entries in document order.
    Lookups resolve against a single handle so a reload in between cannot
    mix two versions of the file.
    """

    source: Path
    version: int
    marker: SourceMarker | None
    catalogues: tuple[Mapping[str, Any], ...] = ()
    doctypes: tuple[Mapping[str, Any], ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def catalogue_titles(self) -> list[str]:
        return [entry["title"] for entry in self.catalogues]

    def doctype_titles(self) -> list[str]:
        return [entry["title"] for entry in self.doctypes]

    def find_catalogue(self, title: str) -> Mapping[str, Any] | None:
        """First catalogue entry whose title equals *title*, in document order."""
        for entry in self.catalogues:
            if entry["title"] == title:
                return entry
        return None

    def find_doctype(self, title: str) -> Mapping[str, Any] | None:
        """First doctype entry whose title equals *title*, in document order."""
        for entry in self.doctypes:
            if entry["title"] == title:
                return entry
        return None

    @property
    def is_empty(self) -> bool:
        return not self.catalogues and not self.doctypes


# =============================================================================
# Store
# =============================================================================


class ConfigurationStore:
    """Thread-safe lazy cache of one catalogue definition file."""

    def __init__(self, path: Path | str, *, fallback_to_empty: bool = False):
        self._path = Path(path)
        self._fallback_to_empty = fallback_to_empty
        self._lock = threading.Lock()
        self._handle: ConfigurationHandle | None = None
        self._version = 0
        self._read_count = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def read_count(self) -> int:
        """How many times the backing file has been read."""
        return self._read_count

    def get_definition(self) -> ConfigurationHandle:
        """
        Return the current definition, loading or reloading it if needed.

        Raises:
            ConfigurationNotFoundError: If the file is missing at first load
            ConfigurationParseError: If the file cannot be parsed
        """
        handle = self._handle
        if handle is not None and not self._is_stale(handle):
            return handle

        with self._lock:
            handle = self._handle
            if handle is None or self._is_stale(handle):
                handle = self._load(previous=handle)
                self._handle = handle
            return handle

    def try_get_definition(self) -> Result[ConfigurationHandle]:
        """Like :meth:`get_definition`, but configuration errors come back as ``Err``."""
        return try_result(self.get_definition, ConfigError)

    def invalidate(self) -> None:
        """Drop the cached handle; the next access reloads the file."""
        with self._lock:
            self._handle = None
        logger.debug("config.invalidated", path=str(self._path))

    def _read_marker(self) -> SourceMarker | None:
        try:
            stat = self._path.stat()
        except FileNotFoundError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def _is_stale(self, handle: ConfigurationHandle) -> bool:
        marker = self._read_marker()
        if marker is None:
            if handle.marker is not None:
                logger.warning("config.source_missing", path=str(self._path), version=handle.version)
            return False
        return marker != handle.marker

    def _load(self, previous: ConfigurationHandle | None) -> ConfigurationHandle:
        marker = self._read_marker()
        if marker is None:
            raise ConfigurationNotFoundError(str(self._path))

        self._read_count += 1
        try:
            document = read_source(self._path)
            catalogues, doctypes = _validate_document(document, self._path)
        except ConfigurationParseError as e:
            if not self._fallback_to_empty:
                logger.error(
                    "config.parse_failed",
                    path=str(self._path),
                    error=e.to_dict(),
                    keeping_version=previous.version if previous else None,
                )
                raise
            logger.error("config.parse_failed_using_empty", path=str(self._path), error=e.to_dict())
            catalogues, doctypes = (), ()

        self._version += 1
        handle = ConfigurationHandle(
            source=self._path,
            version=self._version,
            marker=marker,
            catalogues=catalogues,
            doctypes=doctypes,
        )

        logger.info(
            "config.reloaded" if previous is not None else "config.loaded",
            path=str(self._path),
            version=handle.version,
            catalogues=len(catalogues),
            doctypes=len(doctypes),
        )
        return handle


# =============================================================================
# Process-wide store
# =============================================================================

_store: ConfigurationStore | None = None
_store_lock = threading.Lock()


def get_store() -> ConfigurationStore:
    """Return the process-wide store, creating it from settings on first use."""
    global _store
    store = _store
    if store is None:
        with _store_lock:
            if _store is None:
                settings = get_settings()
                _store = ConfigurationStore(
                    settings.config_path,
                    fallback_to_empty=settings.fallback_to_empty,
                )
                logger.debug("config.store_created", path=str(settings.config_path))
            store = _store
    return store


def configure_store(path: Path | str, *, fallback_to_empty: bool = False) -> ConfigurationStore:
    """Point the process-wide store at an explicit file."""
    global _store
    with _store_lock:
        _store = ConfigurationStore(path, fallback_to_empty=fallback_to_empty)
        return _store


def reset_store() -> None:
    """Forget the process-wide store. Primarily for testing."""
    global _store
    with _store_lock:
        _store = None


def get_definition() -> ConfigurationHandle:
    """Current definition from the process-wide store."""
    return get_store().get_definition()
