"""
Readers turning a catalogue definition file into a raw document.

Two on-disk formats produce the same document shape, so nothing downstream
cares which one was used:

YAML (``.yaml`` / ``.yml``)::

    catalogue:
      - title: GBV
        config:
          description: Gemeinsamer Bibliotheksverbund
          address: sru.gbv.de
          database: "2.1"
          port: 80
          ucnf: XPNOFF=1
        beautify:
          setvalue:
            - tag: "002@"
              subtag: "0"
              value: Aau
              condition:
                - {tag: "002@", subtag: "0", value: "Aa.*"}
        specialmapping:
          - {type: periodical, value: Ab}
    doctypes:
      type:
        - title: monograph
          isPeriodical: false
          isMultiVolume: false
          isContainedWork: false
          mapping: [Aa, Oa]

Legacy XML (``.xml``)::

    <opacCatalogues>
      <doctypes>
        <type title="monograph" isPeriodical="false" isMultiVolume="false"
              isContainedWork="false">
          <mapping>Aa</mapping>
        </type>
      </doctypes>
      <catalogue title="GBV">
        <config description="..." address="sru.gbv.de" database="2.1" port="80"/>
        <beautify>
          <setvalue tag="002@" subtag="0" value="Aau">
            <condition tag="002@" subtag="0" value="Aa.*"/>
          </setvalue>
        </beautify>
        <specialmapping type="periodical">Ab</specialmapping>
      </catalogue>
    </opacCatalogues>

In XML, attributes become keys, the elements listed in ``LIST_ELEMENTS``
always become lists (even when they occur once) and the text of an element
carrying attributes is stored under ``value``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from xml.etree import ElementTree

import yaml

from opac_spine.core.errors import (
    ConfigError,
    ConfigurationNotFoundError,
    ConfigurationParseError,
)
from opac_spine.core.logging import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
XML_SUFFIXES = {".xml"}

# Repeated elements of the legacy layout
LIST_ELEMENTS = {"catalogue", "setvalue", "condition", "specialmapping", "type", "mapping"}

# Elements whose whole content is their text
TEXT_ELEMENTS = {"mapping"}


def read_source(path: Path | str) -> dict[str, Any]:
    """
    Read a catalogue definition file into a raw document.

    Args:
        path: Path to a ``.yaml``, ``.yml`` or ``.xml`` file

    Returns:
        The document as nested dicts/lists/scalars

    Raises:
        ConfigurationNotFoundError: If the file does not exist
        ConfigurationParseError: If the file cannot be parsed
        ConfigError: If the file exists but cannot be read
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in YAML_SUFFIXES:
        reader = _read_yaml
    elif suffix in XML_SUFFIXES:
        reader = _read_xml
    else:
        raise ConfigurationParseError(
            f"Unsupported configuration format '{suffix}'. "
            f"Supported: {', '.join(sorted(YAML_SUFFIXES | XML_SUFFIXES))}"
        ).with_context(source_path=str(path))

    try:
        document = reader(path)
    except FileNotFoundError as e:
        raise ConfigurationNotFoundError(str(path), cause=e)
    except OSError as e:
        raise ConfigError(
            f"Cannot read configuration file {path}: {e}", cause=e
        ).with_context(source_path=str(path))

    logger.debug("config.source_read", path=str(path), format=suffix.lstrip("."))
    return document


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationParseError(
                f"Invalid YAML in {path}: {e}", cause=e
            ).with_context(source_path=str(path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationParseError(
            f"Expected a mapping at the root of {path}, got {type(data).__name__}"
        ).with_context(source_path=str(path), field_path="root")
    return data


def _read_xml(path: Path) -> dict[str, Any]:
    try:
        tree = ElementTree.parse(path)
    except ElementTree.ParseError as e:
        raise ConfigurationParseError(
            f"Invalid XML in {path}: {e}", cause=e
        ).with_context(source_path=str(path))

    document = element_to_dict(tree.getroot())
    if not isinstance(document, dict):
        return {}
    return document


def element_to_dict(element: ElementTree.Element) -> dict[str, Any] | str:
    """Convert one XML element (recursively) into the raw document shape."""
    text = (element.text or "").strip()
    if element.tag in TEXT_ELEMENTS:
        return text

    node: dict[str, Any] = dict(element.attrib)
    for child in element:
        if not isinstance(child.tag, str):
            continue  # comments and processing instructions
        value = element_to_dict(child)
        if child.tag in LIST_ELEMENTS:
            node.setdefault(child.tag, []).append(value)
        else:
            node[child.tag] = value

    if text:
        node.setdefault("value", text)
    return node
