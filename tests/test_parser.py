from __future__ import annotations

import unittest

from svgscrub.namespaces import NS
from svgscrub.node import Comment, Document, Element, ProcessingInstruction, Text
from svgscrub.parser import MarkupParseError, parse
from svgscrub.serialize import sanitize_markup, to_xml

_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
    '<g id="a"><use xlink:href="#b"/></g><text x="1">a &amp; b</text></svg>'
)


class TestParse(unittest.TestCase):
    def test_namespaces_are_resolved(self) -> None:
        doc = parse(_SVG)
        svg = doc.document_element
        assert svg is not None
        assert svg.name == "svg"
        assert svg.namespace == NS.SVG
        assert svg.owner_document is doc
        assert svg.parent is doc

        xmlns, xlink = svg.attributes
        assert (xmlns.namespace, xmlns.name, xmlns.value) == (NS.XMLNS, "xmlns", NS.SVG)
        assert (xlink.namespace, xlink.local_name, xlink.name) == (NS.XMLNS, "xlink", "xmlns:xlink")

        use = svg.children[0].children[0]
        assert isinstance(use, Element)
        assert use.get_attribute_ns(NS.XLINK, "href") == "#b"
        assert use.attributes[0].name == "xlink:href"

    def test_text_and_cdata(self) -> None:
        doc = parse('<svg xmlns="http://www.w3.org/2000/svg"><text><![CDATA[1 < 2]]></text></svg>')
        text = doc.document_element.children[0]
        assert isinstance(text, Element)
        assert "".join(child.data for child in text.children if isinstance(child, Text)) == "1 < 2"

    def test_bytes_input(self) -> None:
        doc = parse(b'<?xml version="1.0" encoding="UTF-8"?><svg xmlns="http://www.w3.org/2000/svg"/>')
        assert doc.document_element is not None

    def test_comments_and_processing_instructions_are_kept(self) -> None:
        doc = parse('<?xml-stylesheet href="a.css"?><svg xmlns="http://www.w3.org/2000/svg"><!--c--></svg>')
        pi = doc.children[0]
        assert isinstance(pi, ProcessingInstruction)
        assert pi.target == "xml-stylesheet"
        assert isinstance(doc.document_element.children[0], Comment)

    def test_doctype_is_dropped(self) -> None:
        doc = parse('<!DOCTYPE svg><svg xmlns="http://www.w3.org/2000/svg"/>')
        assert [child.name for child in doc.children] == ["svg"]

    def test_malformed_markup(self) -> None:
        with self.assertRaises(MarkupParseError) as ctx:
            parse("<svg><g></svg>")
        assert ctx.exception.line == 1
        assert ctx.exception.column is not None
        assert str(ctx.exception).startswith("(1,")

    def test_entity_declarations_are_refused(self) -> None:
        bomb = '<!DOCTYPE svg [<!ENTITY a "aaaa"><!ENTITY b "&a;&a;&a;">]><svg>&b;</svg>'
        with self.assertRaises(MarkupParseError):
            parse(bomb)

    def test_parse_error_is_value_error(self) -> None:
        assert issubclass(MarkupParseError, ValueError)


class TestToXml(unittest.TestCase):
    def test_round_trip(self) -> None:
        assert to_xml(parse(_SVG)) == _SVG

    def test_escaping(self) -> None:
        doc = Document()
        rect = doc.append_child(Element("rect", {"id": 'a"b<&'}))
        rect.append_child(Text("1 < 2 & 3 > 2"))
        assert to_xml(doc) == '<rect id="a&quot;b&lt;&amp;">1 &lt; 2 &amp; 3 &gt; 2</rect>'

    def test_missing_declarations_are_added(self) -> None:
        svg = Element("svg", namespace=NS.SVG)
        rect = svg.append_child(Element("rect", namespace=NS.SVG))
        rect.set_attribute_ns(NS.SE, "se:foo", "1")
        rect.set_attribute_ns(NS.SE, "data-x", "2")
        rect.set_attribute_ns("urn:other", "thing", "3")
        assert to_xml(svg) == (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<rect xmlns:se="http://svg-edit.googlecode.com" xmlns:ns1="urn:other" '
            'se:foo="1" se:data-x="2" ns1:thing="3"/></svg>'
        )

    def test_prefix_bound_to_another_namespace_is_not_redeclared(self) -> None:
        rect = Element("rect", {"xmlns:se": NS.XLINK})
        rect.set_attribute_ns(NS.SE, "se:foo", "1")
        rect.set_attribute_ns(NS.SE, "data-x", "2")
        assert to_xml(rect) == (
            '<rect xmlns:ns1="http://svg-edit.googlecode.com" xmlns:se="http://www.w3.org/1999/xlink" '
            'ns1:foo="1" ns1:data-x="2"/>'
        )

    def test_xml_prefix_needs_no_declaration(self) -> None:
        text = Element("text")
        text.set_attribute_ns(NS.XML, "xml:space", "preserve")
        assert to_xml(text) == '<text xml:space="preserve"/>'

    def test_comment_and_processing_instruction(self) -> None:
        doc = Document()
        doc.append_child(ProcessingInstruction("xml-stylesheet", 'href="a.css"'))
        doc.append_child(Comment(" c "))
        doc.append_child(ProcessingInstruction("empty", ""))
        assert to_xml(doc) == '<?xml-stylesheet href="a.css"?><!-- c --><?empty?>'


class TestSanitizeMarkup(unittest.TestCase):
    def test_report_messages(self) -> None:
        messages: list[str] = []

        def report(msg: str, *, node: object | None = None) -> None:
            messages.append(msg)

        out = sanitize_markup(
            '<svg xmlns="http://www.w3.org/2000/svg"><use/><rect onclick="x"/></svg>',
            report=report,
        )
        assert out == '<svg xmlns="http://www.w3.org/2000/svg"><rect/></svg>'
        assert "Removed <use> without a local reference" in messages
        assert "Removed attribute 'onclick' from <rect>" in messages

    def test_editor_prefix_bound_to_another_namespace(self) -> None:
        markup = (
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:se="http://www.w3.org/1999/xlink"'
            ' se:foo="1" data-id="2"/>'
        )
        out = sanitize_markup(markup)

        svg = parse(out).document_element
        assert svg is not None
        assert svg.get_attribute_ns(NS.SE, "foo") == "1"
        assert svg.get_attribute_ns(NS.SE, "data-id") == "2"
        assert svg.get_attribute_ns(NS.XMLNS, "se") == NS.XLINK
        assert sanitize_markup(out) == out

    def test_unsupported_root_is_unwrapped(self) -> None:
        out = sanitize_markup('<html><svg xmlns="http://www.w3.org/2000/svg"/></html>')
        assert out == '<svg xmlns="http://www.w3.org/2000/svg"/>'

    def test_deeply_nested_markup(self) -> None:
        depth = 2000
        markup = '<svg xmlns="http://www.w3.org/2000/svg">' + "<g>" * depth + "<rect/>" + "</g>" * depth + "</svg>"
        out = sanitize_markup(markup)
        assert out == markup


if __name__ == "__main__":
    unittest.main()
