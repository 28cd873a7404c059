"""
Shared pytest fixtures and configuration for opac-spine tests.

This module provides:
- Process-wide store cleanup for test isolation
- Paths to the YAML and XML fixture definitions
- Helpers writing ad-hoc definitions into a temporary directory

Usage:
    def test_something(write_definition):
        store = write_definition({"catalogue": [...]})
        ...
"""

import shutil
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

# Ensure opac_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from opac_spine.config.store import ConfigurationStore, reset_store
from opac_spine.core.settings import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Store Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_store_fixture() -> Generator[None, None, None]:
    """
    Forget the process-wide store and cached settings around each test.

    No test can leak a configured store or OPAC_* settings into another.
    """
    reset_store()
    get_settings.cache_clear()
    yield
    reset_store()
    get_settings.cache_clear()


# =============================================================================
# Definition Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def yaml_path(tmp_path: Path) -> Path:
    """Writable copy of the YAML fixture definition."""
    target = tmp_path / "opac.yaml"
    shutil.copy(FIXTURES_DIR / "opac.yaml", target)
    return target


@pytest.fixture
def xml_path(tmp_path: Path) -> Path:
    """Writable copy of the legacy XML fixture definition."""
    target = tmp_path / "opac.xml"
    shutil.copy(FIXTURES_DIR / "opac.xml", target)
    return target


@pytest.fixture
def yaml_store(yaml_path: Path) -> ConfigurationStore:
    return ConfigurationStore(yaml_path)


@pytest.fixture
def write_definition(tmp_path: Path) -> Callable[..., ConfigurationStore]:
    """
    Write a definition dict as YAML and return a store reading it.

    Usage:
        store = write_definition({"catalogue": [...], "doctypes": {...}})
    """

    def _write(document: dict[str, Any], name: str = "definition.yaml") -> ConfigurationStore:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(document, sort_keys=False, allow_unicode=True), encoding="utf-8")
        return ConfigurationStore(path)

    return _write


def _catalogue_entry(title: str, **overrides: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "title": title,
        "config": {
            "description": f"{title} catalogue",
            "address": f"{title.lower()}.example.org",
            "database": "1.1",
            "port": 80,
        },
    }
    entry.update(overrides)
    return entry


def _doctype_entry(title: str, mappings: list[str], **flags: bool) -> dict[str, Any]:
    return {
        "title": title,
        "isPeriodical": flags.get("periodical", False),
        "isMultiVolume": flags.get("multi_volume", False),
        "isContainedWork": flags.get("contained_work", False),
        "mapping": mappings,
    }


@pytest.fixture
def catalogue_entry() -> Callable[..., dict[str, Any]]:
    """Builder for a minimal valid catalogue entry: ``catalogue_entry("GBV", beautify=...)``."""
    return _catalogue_entry


@pytest.fixture
def doctype_entry() -> Callable[..., dict[str, Any]]:
    """Builder for a doctype entry: ``doctype_entry("monograph", ["Aa"], periodical=False)``."""
    return _doctype_entry
