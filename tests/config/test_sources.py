"""Tests for the YAML and legacy XML definition readers."""

from xml.etree import ElementTree

import pytest

from opac_spine.config.sources import element_to_dict, read_source
from opac_spine.core.errors import (
    ConfigurationNotFoundError,
    ConfigurationParseError,
)


class TestReadYaml:
    def test_reads_fixture(self, yaml_path):
        document = read_source(yaml_path)
        assert [c["title"] for c in document["catalogue"]] == ["GBV", "SWB", "GBV"]
        assert document["doctypes"]["type"][0]["mapping"] == ["Aa", "Af", "Oa"]

    def test_empty_file_is_empty_document(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert read_source(path) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("catalogue: [title: GBV\n  - : :", encoding="utf-8")
        with pytest.raises(ConfigurationParseError) as exc_info:
            read_source(path)
        assert exc_info.value.context.source_path == str(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationParseError, match="Expected a mapping") as exc_info:
            read_source(path)
        assert exc_info.value.context.field_path == "root"


class TestReadXml:
    def test_reads_fixture_into_yaml_shape(self, xml_path):
        document = read_source(xml_path)

        gbv = document["catalogue"][0]
        assert gbv["title"] == "GBV"
        assert gbv["config"]["port"] == "80"
        assert gbv["beautify"]["setvalue"][0]["condition"] == [
            {"tag": "002@", "subtag": "0", "value": "Aa.*"}
        ]
        assert gbv["specialmapping"] == [{"type": "periodical", "value": "Aa"}]

        monograph = document["doctypes"]["type"][0]
        assert monograph["isPeriodical"] == "false"
        assert monograph["mapping"] == ["Aa", "Oa"]

    def test_single_repeated_element_is_a_list(self):
        element = ElementTree.fromstring(
            '<catalogue title="X"><specialmapping type="t">c</specialmapping></catalogue>'
        )
        assert element_to_dict(element) == {
            "title": "X",
            "specialmapping": [{"type": "t", "value": "c"}],
        }

    def test_invalid_xml(self, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_text("<opacCatalogues><catalogue>", encoding="utf-8")
        with pytest.raises(ConfigurationParseError, match="Invalid XML"):
            read_source(path)


class TestReadSourceErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationNotFoundError):
            read_source(tmp_path / "missing.yaml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "opac.ini"
        path.write_text("[catalogue]", encoding="utf-8")
        with pytest.raises(ConfigurationParseError, match="Unsupported configuration format"):
            read_source(path)
