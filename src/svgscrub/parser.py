"""Load untrusted XML text into an svgscrub tree.

Parsing goes through defusedxml, so entity expansion and external
entity/DTD fetching are refused instead of being resolved.
"""

from __future__ import annotations

from xml.dom import Node as DomNode
from xml.parsers.expat import ExpatError

from defusedxml import DefusedXmlException
from defusedxml import minidom as defused_minidom

from .node import Attr, Comment, Document, Element, Node, ProcessingInstruction, Text


class MarkupParseError(ValueError):
    """Raised when markup cannot be parsed, or uses forbidden XML features."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"({self.line},{self.column}): {self.message}"
        return self.message


def _convert(dom_node: DomNode, document: Document) -> Node | None:
    kind = dom_node.nodeType
    if kind == DomNode.ELEMENT_NODE:
        element = Element(dom_node.tagName, namespace=dom_node.namespaceURI, owner_document=document)
        attributes = dom_node.attributes
        for i in range(attributes.length):
            a = attributes.item(i)
            element.attributes.append(
                Attr(a.localName or a.name, a.value, namespace=a.namespaceURI, prefix=a.prefix or None)
            )
        return element
    if kind in (DomNode.TEXT_NODE, DomNode.CDATA_SECTION_NODE):
        return Text(dom_node.data, owner_document=document)
    if kind == DomNode.COMMENT_NODE:
        return Comment(dom_node.data, owner_document=document)
    if kind == DomNode.PROCESSING_INSTRUCTION_NODE:
        return ProcessingInstruction(dom_node.target, dom_node.data, owner_document=document)
    # Doctype and anything else has no counterpart in the tree.
    return None


def parse(markup: str | bytes) -> Document:
    """Parse XML markup into a `Document`.

    Raises `MarkupParseError` for malformed XML and for entity declarations
    or external references.
    """
    try:
        dom = defused_minidom.parseString(markup)
    except ExpatError as exc:
        raise MarkupParseError(str(exc), line=exc.lineno, column=exc.offset) from exc
    except DefusedXmlException as exc:
        raise MarkupParseError(str(exc)) from exc

    document = Document()
    stack: list[tuple[DomNode, Node]] = [(child, document) for child in reversed(dom.childNodes)]
    while stack:
        dom_node, parent = stack.pop()
        node = _convert(dom_node, document)
        if node is None:
            continue
        parent.append_child(node)
        if dom_node.nodeType == DomNode.ELEMENT_NODE:
            stack.extend((child, node) for child in reversed(dom_node.childNodes))
    return document
