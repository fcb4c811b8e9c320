from .allowlist import DEFAULT_ALLOW_LIST, AllowList, AllowListError
from .namespaces import NS, REVERSE_NS, NamespaceRegistry, reverse_lookup
from .node import Comment, Document, Element, ProcessingInstruction, Text
from .parser import MarkupParseError, parse
from .references import get_href, get_url_from_attr, set_href
from .sanitize import DEFAULT_POLICY, SanitizationPolicy, sanitize
from .serialize import sanitize_markup, to_xml

__all__ = [
    "DEFAULT_ALLOW_LIST",
    "DEFAULT_POLICY",
    "NS",
    "REVERSE_NS",
    "AllowList",
    "AllowListError",
    "Comment",
    "Document",
    "Element",
    "MarkupParseError",
    "NamespaceRegistry",
    "ProcessingInstruction",
    "SanitizationPolicy",
    "Text",
    "get_href",
    "get_url_from_attr",
    "parse",
    "reverse_lookup",
    "sanitize",
    "sanitize_markup",
    "set_href",
    "to_xml",
]
