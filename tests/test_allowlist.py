from __future__ import annotations

import unittest

from svgscrub.allowlist import (
    DEFAULT_ALLOW_LIST,
    DEFAULT_TABLE,
    MATHML_ELEMENTS,
    SVG_ELEMENTS,
    AllowList,
    AllowListError,
    build_namespace_index,
)
from svgscrub.namespaces import NS, NamespaceRegistry


class TestAllowListLookup(unittest.TestCase):
    def test_known_tag_returns_attribute_names(self) -> None:
        attrs = DEFAULT_ALLOW_LIST.lookup("rect")
        assert attrs is not None
        assert {"x", "y", "width", "height", "fill", "stroke-width", "style"} <= attrs
        assert "onclick" not in attrs

    def test_unknown_tag_is_absent(self) -> None:
        assert DEFAULT_ALLOW_LIST.lookup("script") is None
        assert DEFAULT_ALLOW_LIST.lookup_ns("script") is None
        assert "script" not in DEFAULT_ALLOW_LIST

    def test_tag_lookup_is_case_sensitive(self) -> None:
        assert "linearGradient" in DEFAULT_ALLOW_LIST
        assert "lineargradient" not in DEFAULT_ALLOW_LIST

    def test_empty_attribute_sets(self) -> None:
        assert DEFAULT_ALLOW_LIST.lookup("defs") == frozenset()
        assert DEFAULT_ALLOW_LIST.lookup("title") == frozenset()
        assert DEFAULT_ALLOW_LIST.lookup_ns("mn") == {}

    def test_table_covers_svg_and_mathml(self) -> None:
        assert len(DEFAULT_ALLOW_LIST) == len(SVG_ELEMENTS) + len(MATHML_ELEMENTS)
        assert DEFAULT_ALLOW_LIST.tags == frozenset(DEFAULT_TABLE)
        assert {"svg", "math", "annotation-xml", "mtable"} <= DEFAULT_ALLOW_LIST.tags

    def test_use_has_no_opacity(self) -> None:
        attrs = DEFAULT_ALLOW_LIST.lookup("use")
        assert attrs is not None
        assert "opacity" not in attrs
        assert "fill-opacity" in attrs


class TestNamespaceIndex(unittest.TestCase):
    def test_qualified_names_map_to_registered_namespaces(self) -> None:
        svg = DEFAULT_ALLOW_LIST.lookup_ns("svg")
        assert svg is not None
        assert svg["xmlns"] == NS.XMLNS
        assert svg["se"] == NS.XMLNS
        assert svg["xlink"] == NS.XMLNS
        assert svg["width"] is None

        use = DEFAULT_ALLOW_LIST.lookup_ns("use")
        assert use is not None
        assert use["href"] == NS.XLINK

        text = DEFAULT_ALLOW_LIST.lookup_ns("text")
        assert text is not None
        assert text["space"] == NS.XML

    def test_unknown_prefix_fails_at_build_time(self) -> None:
        with self.assertRaises(AllowListError):
            build_namespace_index(["bogus:attr"])
        with self.assertRaises(AllowListError):
            AllowList.from_table({"rect": ["x", "nope:y"]})

    def test_empty_local_name_is_rejected(self) -> None:
        with self.assertRaises(AllowListError):
            build_namespace_index(["xlink:"])

    def test_string_attribute_list_is_rejected(self) -> None:
        with self.assertRaises(AllowListError):
            AllowList.from_table({"rect": "width"})

    def test_allow_list_error_is_value_error(self) -> None:
        assert issubclass(AllowListError, ValueError)

    def test_custom_registry(self) -> None:
        registry = NamespaceRegistry({"ex": "urn:example"})
        allow = AllowList.from_table({"thing": ["ex:attr", "plain"]}, registry)
        assert allow.lookup_ns("thing") == {"attr": "urn:example", "plain": None}

    def test_allow_list_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            DEFAULT_ALLOW_LIST.attributes["script"] = frozenset()  # type: ignore[index]
        ns = DEFAULT_ALLOW_LIST.lookup_ns("rect")
        assert ns is not None
        with self.assertRaises(TypeError):
            ns["onclick"] = None  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
