from __future__ import annotations

import unittest

from svgscrub.namespaces import NS
from svgscrub.node import Comment, Document, Element, Text


class TestTreeEditing(unittest.TestCase):
    def test_append_sets_parent_and_owner_document(self) -> None:
        doc = Document()
        svg = doc.append_child(Element("svg", namespace=NS.SVG))
        rect = Element("rect")
        label = Text("x")
        rect.append_child(label)
        svg.append_child(rect)

        assert rect.parent is svg
        assert rect.owner_document is doc
        assert label.owner_document is doc
        assert doc.document_element is svg

    def test_insert_before_keeps_order(self) -> None:
        g = Element("g")
        a, b, c = Element("a"), Element("b"), Element("c")
        g.append_child(a)
        g.append_child(c)
        g.insert_before(b, c)
        assert g.children == [a, b, c]

        g.insert_before(c, a)
        assert g.children == [c, a, b]

    def test_insert_before_none_appends(self) -> None:
        g = Element("g")
        a = g.append_child(Element("a"))
        b = g.insert_before(Element("b"), None)
        assert g.children == [a, b]

    def test_insert_before_moves_node_from_old_parent(self) -> None:
        old, new = Element("g"), Element("g")
        child = old.append_child(Element("rect"))
        ref = new.append_child(Element("circle"))
        new.insert_before(child, ref)
        assert old.children == []
        assert new.children == [child, ref]
        assert child.parent is new

    def test_insert_before_foreign_reference_raises(self) -> None:
        g = Element("g")
        with self.assertRaises(ValueError):
            g.insert_before(Element("a"), Element("b"))

    def test_cycles_are_rejected(self) -> None:
        outer = Element("g")
        inner = outer.append_child(Element("g"))
        with self.assertRaises(ValueError):
            inner.append_child(outer)
        with self.assertRaises(ValueError):
            outer.append_child(outer)

    def test_remove_detaches(self) -> None:
        g = Element("g")
        rect = g.append_child(Element("rect"))
        rect.remove()
        assert g.children == []
        assert rect.parent is None
        rect.remove()  # already detached

    def test_character_data_has_no_children(self) -> None:
        with self.assertRaises(ValueError):
            Text("x").append_child(Comment("y"))

    def test_empty_name_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Element("")

    def test_iter_is_document_order(self) -> None:
        g = Element("g")
        a = g.append_child(Element("a"))
        t = a.append_child(Text("t"))
        b = g.append_child(Element("b"))
        assert list(g.iter()) == [g, a, t, b]
        assert list(g.iter_elements()) == [g, a, b]


class TestAttributes(unittest.TestCase):
    def test_constructor_resolves_known_prefixes(self) -> None:
        el = Element("use", {"xlink:href": "#a", "xmlns": NS.SVG, "width": "3", "foo:bar": "1"})
        assert el.get_attribute_ns(NS.XLINK, "href") == "#a"
        assert el.get_attribute_ns(NS.XMLNS, "xmlns") == NS.SVG
        assert el.get_attribute_ns(None, "width") == "3"
        # Unknown prefixes are kept as a plain name.
        assert el.get_attribute_ns(None, "foo:bar") == "1"
        assert el.attrs == {"xlink:href": "#a", "xmlns": NS.SVG, "width": "3", "foo:bar": "1"}

    def test_set_attribute_overwrites_by_qualified_name(self) -> None:
        el = Element("rect", {"fill": "red"})
        el.set_attribute("fill", "blue")
        el.set_attribute("stroke", "black")
        assert el.attrs == {"fill": "blue", "stroke": "black"}

    def test_set_attribute_ns_updates_existing(self) -> None:
        el = Element("use")
        el.set_attribute_ns(NS.XLINK, "xlink:href", "#a")
        el.set_attribute_ns(NS.XLINK, "xl:href", "#b")
        assert len(el.attributes) == 1
        assert el.attributes[0].name == "xl:href"
        assert el.get_attribute_ns(NS.XLINK, "href") == "#b"

    def test_remove_attribute_variants(self) -> None:
        el = Element("use", {"xlink:href": "#a", "width": "1"})
        el.remove_attribute_ns(NS.XLINK, "href")
        el.remove_attribute("width")
        el.remove_attribute("missing")
        assert el.attributes == []

    def test_element_prefix_and_local_name(self) -> None:
        el = Element("svg:rect", namespace=NS.SVG)
        assert el.prefix == "svg"
        assert el.local_name == "rect"
        assert Element("rect").prefix is None


if __name__ == "__main__":
    unittest.main()
