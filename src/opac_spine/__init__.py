"""
opac-spine - catalogue descriptions and record beautification.

Resolves OPAC catalogue endpoints and document types from a cached,
self-reloading definition file and normalizes fetched records with each
catalogue's ordered setvalue rules.

- opac_spine.core: errors, result, logging, settings
- opac_spine.config: definition readers and the configuration store
- opac_spine.catalog: registries, beautify engine, client boundary
"""

__version__ = "0.1.0"

from opac_spine.catalog import *  # noqa
from opac_spine.config import configure_store, get_definition, reset_store  # noqa
from opac_spine.core.errors import (  # noqa
    ConfigurationInconsistencyError,
    ConfigurationNotFoundError,
    ConfigurationParseError,
    OpacError,
    UnknownModeError,
)
