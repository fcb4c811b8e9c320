"""XML serialization for svgscrub trees."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .namespaces import DEFAULT_REGISTRY, NS
from .node import Comment, Document, Element, Node, ProcessingInstruction, Text
from .parser import parse
from .sanitize import DEFAULT_POLICY, SanitizationPolicy, sanitize

if TYPE_CHECKING:
    from .sanitize import ReportCallback

# Prefixes bound without a declaration.
_IMPLICIT_SCOPE = {"xml": NS.XML, "xmlns": NS.XMLNS}


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if value is None:
        return ""
    return _escape_text(value).replace('"', "&quot;")


def _attr_prefix(namespace: str, prefix: str | None, scope: dict[str, str], pending: dict[str, str]) -> str:
    """Pick a prefix for a namespaced attribute, declaring it if needed.

    A prefix already bound to another URI is never rebound: the element may
    carry that binding itself, and a second declaration would be a duplicate
    attribute.
    """
    if prefix is None:
        prefix = DEFAULT_REGISTRY.reverse_lookup(namespace)
    if prefix is not None and scope.get(prefix, namespace) != namespace:
        prefix = None
    if prefix is None:
        for bound, uri in scope.items():
            if bound and uri == namespace:
                return bound
        n = 1
        while f"ns{n}" in scope:
            n += 1
        prefix = f"ns{n}"
    if prefix not in scope:
        scope[prefix] = namespace
        pending[prefix] = namespace
    return prefix


def serialize_start_tag(element: Element, scope: dict[str, str]) -> tuple[str, dict[str, str]]:
    """Return the start tag (without the closing `>`) and the scope for its children."""
    scope = dict(scope)
    for attr in element.attributes:
        if attr.namespace == NS.XMLNS:
            scope[attr.local_name if attr.prefix else ""] = attr.value

    pending: dict[str, str] = {}
    el_prefix = element.prefix or ""
    if element.namespace is not None and scope.get(el_prefix) != element.namespace:
        scope[el_prefix] = element.namespace
        pending[el_prefix] = element.namespace

    attr_parts: list[str] = []
    for attr in element.attributes:
        if attr.namespace is None or attr.namespace == NS.XMLNS:
            name = attr.name
        elif attr.namespace == NS.XML:
            name = f"xml:{attr.local_name}"
        else:
            name = f"{_attr_prefix(attr.namespace, attr.prefix, scope, pending)}:{attr.local_name}"
        attr_parts.append(f'{name}="{_escape_attr_value(attr.value)}"')

    # Declarations the tree lacks go first, ahead of the attributes using them.
    parts: list[str] = []
    for prefix, uri in pending.items():
        name = f"xmlns:{prefix}" if prefix else "xmlns"
        parts.append(f'{name}="{_escape_attr_value(uri)}"')
    parts.extend(attr_parts)

    if parts:
        return f"<{element.name} {' '.join(parts)}", scope
    return f"<{element.name}", scope


def to_xml(node: Node) -> str:
    """Serialize `node` (and its subtree) to XML text."""
    parts: list[str] = []
    stack: list[tuple[Node | str, dict[str, str]]] = [(node, dict(_IMPLICIT_SCOPE))]
    while stack:
        item, scope = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Document):
            stack.extend((child, scope) for child in reversed(item.children))
        elif isinstance(item, Text):
            parts.append(_escape_text(item.data))
        elif isinstance(item, Comment):
            parts.append(f"<!--{item.data}-->")
        elif isinstance(item, ProcessingInstruction):
            parts.append(f"<?{item.target} {item.data}?>" if item.data else f"<?{item.target}?>")
        elif isinstance(item, Element):
            start, child_scope = serialize_start_tag(item, scope)
            if not item.children:
                parts.append(f"{start}/>")
                continue
            parts.append(f"{start}>")
            stack.append((f"</{item.name}>", scope))
            stack.extend((child, child_scope) for child in reversed(item.children))
    return "".join(parts)


def sanitize_markup(
    markup: str | bytes,
    *,
    policy: SanitizationPolicy = DEFAULT_POLICY,
    report: ReportCallback | None = None,
) -> str:
    """Parse `markup`, sanitize its document element and return it as XML text."""
    document = parse(markup)
    root = document.document_element
    if root is not None:
        sanitize(root, policy=policy, report=report)
    return to_xml(document)
