"""Namespace URIs known to svgscrub and their canonical prefixes."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


class NS:
    HTML = "http://www.w3.org/1999/xhtml"
    MATH = "http://www.w3.org/1998/Math/MathML"
    SE = "http://svg-edit.googlecode.com"
    SVG = "http://www.w3.org/2000/svg"
    XLINK = "http://www.w3.org/1999/xlink"
    OI = "http://www.optimistik.fr/namespace/svg/OIdata"
    XML = "http://www.w3.org/XML/1998/namespace"
    # See https://www.w3.org/TR/xml-names/#xmlReserved
    XMLNS = "http://www.w3.org/2000/xmlns/"


def _ns_items() -> dict[str, str]:
    return {name: value for name, value in vars(NS).items() if name.isupper()}


class NamespaceRegistry:
    """Bidirectional prefix <-> URI lookup over a fixed set of namespaces."""

    __slots__ = ("_by_prefix", "_by_uri")

    def __init__(self, namespaces: Mapping[str, str]) -> None:
        by_prefix = {str(prefix).lower(): uri for prefix, uri in namespaces.items()}
        self._by_prefix = MappingProxyType(by_prefix)
        self._by_uri = MappingProxyType({uri: prefix for prefix, uri in by_prefix.items()})

    def __contains__(self, uri: object) -> bool:
        return uri in self._by_uri

    def __repr__(self) -> str:
        return f"NamespaceRegistry({dict(self._by_prefix)!r})"

    def lookup(self, prefix: str) -> str | None:
        return self._by_prefix.get(prefix.lower())

    def reverse_lookup(self, uri: str | None) -> str | None:
        if uri is None:
            return None
        return self._by_uri.get(uri)

    @property
    def reverse(self) -> Mapping[str, str]:
        return self._by_uri


DEFAULT_REGISTRY = NamespaceRegistry(_ns_items())
REVERSE_NS: Mapping[str, str] = DEFAULT_REGISTRY.reverse


def reverse_lookup(uri: str | None) -> str | None:
    """Return the canonical prefix for `uri`, or None if it is not one of ours."""
    return DEFAULT_REGISTRY.reverse_lookup(uri)
