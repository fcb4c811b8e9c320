"""Allow-list sanitization of SVG/MathML trees.

`sanitize()` edits a tree in place so that only allow-listed elements and
attributes remain:

- Unsupported elements are removed; their children are promoted into the
  parent at the same position and sanitized in turn.
- Attributes must match the element's allow-list by local name and
  namespace URI. Namespace declarations survive only for namespaces known to
  the registry. Attributes with a passthrough prefix (`se:`, `data-`), or already in
  the editor's own namespace, are re-attached under that namespace.
- `style` declarations are turned into presentation attributes when the
  property is itself an allow-listed attribute; the `style` attribute is
  always dropped.
- Hyperlink and paint-server references must point into the document
  (`#id`). A `use` without such a reference is removed with its subtree.
- Text nodes are trimmed; whitespace-only text is removed.

Nothing is reported through exceptions. Pass `report=` to receive a message
per edit, or enable DEBUG logging for this module.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .allowlist import DEFAULT_ALLOW_LIST, AllowList
from .namespaces import DEFAULT_REGISTRY, NS, NamespaceRegistry
from .node import Element, Node, Text
from .references import get_href, is_local_reference, iter_url_targets

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any, Protocol

    from .node import Attr

    class ReportCallback(Protocol):
        def __call__(self, msg: str, *, node: Any | None = None) -> None: ...


logger = logging.getLogger(__name__)

# Elements whose xlink:href must be a same-document reference. <a> and
# <image> may point elsewhere.
LOCAL_HREF_TAGS = frozenset({"filter", "linearGradient", "pattern", "radialGradient", "textPath", "use"})

# Presentation attributes that may carry url(...) references.
LOCAL_URL_ATTRIBUTES = (
    "clip-path",
    "fill",
    "filter",
    "marker-end",
    "marker-mid",
    "marker-start",
    "mask",
    "stroke",
)

TRANSFORM_ATTRIBUTES = frozenset({"transform", "gradientTransform", "patternTransform"})

_DIGIT_MINUS_RE = re.compile(r"(\d)-")

# ECMAScript `\s`: unlike str.isspace(), includes U+FEFF and excludes U+001C-U+001F and U+0085.
_WHITESPACE = r"\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
_TRIM_RE = re.compile(rf"\A[{_WHITESPACE}]+|[{_WHITESPACE}]+\Z")


@dataclass(frozen=True, slots=True)
class SanitizationPolicy:
    """Configuration for `sanitize()`.

    - `allow_list`: element -> attribute allow-list with its namespace index.
    - `registry`: namespaces whose `xmlns` declarations are kept.
    - `passthrough_prefixes`: qualified-name prefixes that bypass the
      allow-list and are re-attached in `passthrough_namespace`.
    - `local_href_tags` / `local_url_attributes`: where references must stay
      inside the document.
    - `space_negative_numbers`: insert a space between a digit and a
      following minus sign in transform lists, for renderers that misparse
      `5-3` as a single token.
    """

    allow_list: AllowList = DEFAULT_ALLOW_LIST
    registry: NamespaceRegistry = DEFAULT_REGISTRY
    passthrough_prefixes: Collection[str] = ("se:", "data-")
    passthrough_namespace: str = NS.SE
    local_href_tags: Collection[str] = LOCAL_HREF_TAGS
    local_url_attributes: Collection[str] = LOCAL_URL_ATTRIBUTES
    space_negative_numbers: bool = False

    def __post_init__(self) -> None:
        # str.startswith() needs a tuple; membership checks want a frozenset.
        if isinstance(self.passthrough_prefixes, str):
            object.__setattr__(self, "passthrough_prefixes", (self.passthrough_prefixes,))
        elif not isinstance(self.passthrough_prefixes, tuple):
            object.__setattr__(self, "passthrough_prefixes", tuple(self.passthrough_prefixes))

        if not isinstance(self.local_href_tags, frozenset):
            object.__setattr__(self, "local_href_tags", frozenset(self.local_href_tags))

        if not isinstance(self.local_url_attributes, tuple):
            object.__setattr__(self, "local_url_attributes", tuple(self.local_url_attributes))

        object.__setattr__(self, "space_negative_numbers", bool(self.space_negative_numbers))


DEFAULT_POLICY: SanitizationPolicy = SanitizationPolicy()


def space_negative_numbers(value: str) -> str:
    """Separate a digit from a following minus sign.

    >>> space_negative_numbers("translate(5-3)")
    'translate(5 -3)'
    """
    return _DIGIT_MINUS_RE.sub(r"\1 -", value)


def trim_whitespace(value: str) -> str:
    """Strip leading and trailing whitespace, using the ECMAScript `\s` set.

    >>> trim_whitespace("\\ufeff label \\n")
    'label'
    """
    return _TRIM_RE.sub("", value)


def parse_style_declarations(value: str) -> list[tuple[str, str]]:
    """Split an inline style into (property, value) pairs.

    Declarations without a colon, a property name or a value are dropped.
    """
    out: list[tuple[str, str]] = []
    for declaration in value.split(";"):
        name, sep, val = declaration.partition(":")
        name = name.strip()
        val = val.strip()
        if not sep or not name or not val:
            continue
        out.append((name, val))
    return out


class _Sanitizer:
    __slots__ = ("policy", "report")

    def __init__(self, policy: SanitizationPolicy, report: ReportCallback | None) -> None:
        self.policy = policy
        self.report = report

    def _emit(self, msg: str, node: Node) -> None:
        logger.debug("%s", msg)
        if self.report is not None:
            self.report(msg, node=node)

    def run(self, root: Node) -> None:
        # Explicit stack: nesting depth of untrusted input must not be bounded
        # by the interpreter's recursion limit.
        stack: list[Node] = [root]
        while stack:
            node = stack.pop()
            if isinstance(node, Text):
                self._sanitize_text(node)
            elif isinstance(node, Element):
                stack.extend(self._sanitize_element(node))

    def _sanitize_text(self, node: Text) -> None:
        trimmed = trim_whitespace(node.data)
        if trimmed != node.data:
            node.data = trimmed
        if not trimmed:
            node.remove()

    def _sanitize_element(self, node: Element) -> list[Node]:
        """Sanitize one element and return the nodes to visit next."""
        parent = node.parent
        if node.owner_document is None or parent is None:
            return []

        allowed_ns = self.policy.allow_list.lookup_ns(node.name)
        if allowed_ns is None:
            return self._unwrap(node, parent)

        self._sanitize_attributes(node, allowed_ns)

        if node.name in self.policy.local_href_tags:
            href = get_href(node)
            if href and not is_local_reference(href):
                node.remove_attribute_ns(NS.XLINK, "href")
                self._emit(f"Removed external reference {href!r} from <{node.name}>", node)

        if node.name == "use" and not get_href(node):
            node.remove()
            self._emit("Removed <use> without a local reference", node)
            return []

        for attr_name in self.policy.local_url_attributes:
            value = node.get_attribute_ns(None, attr_name)
            if not value:
                continue
            if any(not is_local_reference(target) for target in iter_url_targets(value)):
                node.remove_attribute_ns(None, attr_name)
                self._emit(f"Removed external reference in '{attr_name}' from <{node.name}>", node)

        return list(node.children)

    def _unwrap(self, node: Element, parent: Node) -> list[Node]:
        promoted: list[Node] = []
        while node.children:
            promoted.append(parent.insert_before(node.children[0], node))
        node.remove()
        self._emit(f"Removed unsupported element <{node.name}>", node)
        return promoted

    def _keeps(self, attr: Attr, allowed_ns: Mapping[str, str | None]) -> bool:
        if attr.namespace == NS.XMLNS:
            return attr.value in self.policy.registry
        return attr.local_name in allowed_ns and allowed_ns[attr.local_name] == attr.namespace

    def _sanitize_attributes(self, node: Element, allowed_ns: Mapping[str, str | None]) -> None:
        policy = self.policy
        passthrough: list[tuple[str, str]] = []

        for attr in list(node.attributes):
            name = attr.name
            if not self._keeps(attr, allowed_ns):
                if name.startswith(policy.passthrough_prefixes) or attr.namespace == policy.passthrough_namespace:
                    passthrough.append((name, attr.value))
                else:
                    self._emit(f"Removed attribute '{name}' from <{node.name}>", node)
                node.remove_attribute_ns(attr.namespace, attr.local_name)
            elif policy.space_negative_numbers and name in TRANSFORM_ATTRIBUTES:
                spaced = space_negative_numbers(attr.value)
                if spaced != attr.value:
                    attr.value = spaced

            if name == "style" and attr.namespace is None:
                self._promote_style(node, attr.value, allowed_ns)
                node.remove_attribute_ns(None, "style")

        for name, value in passthrough:
            node.set_attribute_ns(policy.passthrough_namespace, name, value)

    def _promote_style(self, node: Element, style: str, allowed_ns: Mapping[str, str | None]) -> None:
        seen: set[str] = set()
        for prop, value in parse_style_declarations(style):
            # The first declaration of a property wins.
            if prop in seen:
                continue
            seen.add(prop)
            # Only plain attributes can be set from a declaration; `xlink:href`
            # and friends would end up in the wrong namespace.
            if prop != "style" and prop in allowed_ns and allowed_ns[prop] is None:
                node.set_attribute_ns(None, prop, value)
            else:
                self._emit(f"Dropped style declaration '{prop}' on <{node.name}>", node)


def sanitize(
    node: Node,
    *,
    policy: SanitizationPolicy = DEFAULT_POLICY,
    report: ReportCallback | None = None,
) -> None:
    """Sanitize `node` and its descendants in place according to `policy`.

    Elements that are not attached to a document (no owner document or no
    parent) are left untouched. Returns None; inspect the tree for results.
    """
    _Sanitizer(policy, report).run(node)
