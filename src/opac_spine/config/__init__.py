"""
Catalogue definition loading and caching.

- sources: YAML / legacy XML readers
- store: ConfigurationStore, ConfigurationHandle, process-wide store
"""

from opac_spine.config.sources import read_source
from opac_spine.config.store import (
    ConfigurationHandle,
    ConfigurationStore,
    configure_store,
    get_definition,
    get_store,
    reset_store,
)

__all__ = [
    "read_source",
    "ConfigurationHandle",
    "ConfigurationStore",
    "configure_store",
    "get_definition",
    "get_store",
    "reset_store",
]
