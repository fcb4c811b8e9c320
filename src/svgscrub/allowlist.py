"""Element and attribute allow-list for SVG and MathML content.

The table maps an element's tag name to the attribute names it may carry.
Qualified names (`xlink:href`, `xml:space`, `xmlns:se`) name an attribute in
the namespace registered for that prefix; everything else lives in no
namespace, except for a bare `xmlns`.

`AllowList` wraps the table together with a namespace-aware index derived
from it, so the sanitizer can check local name and namespace URI together.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .namespaces import DEFAULT_REGISTRY, NS, NamespaceRegistry


class AllowListError(ValueError):
    """Raised when an allow-list table cannot be turned into an index."""


_PRESENTATION = (
    "clip-path",
    "clip-rule",
    "fill",
    "fill-opacity",
    "fill-rule",
    "filter",
    "mask",
    "opacity",
    "stroke",
    "stroke-dasharray",
    "stroke-dashoffset",
    "stroke-linecap",
    "stroke-linejoin",
    "stroke-miterlimit",
    "stroke-opacity",
    "stroke-width",
)

_MARKERS = ("marker-end", "marker-mid", "marker-start")
_FONT = ("font-family", "font-size", "font-style", "font-weight")
_CONDITIONAL = ("requiredFeatures", "systemLanguage")


SVG_ELEMENTS: dict[str, tuple[str, ...]] = {
    "a": ("class", "id", "style", "systemLanguage", "transform", "xlink:href", "xlink:title", *_PRESENTATION),
    "circle": ("class", "cx", "cy", "id", "r", "style", "transform", *_CONDITIONAL, *_PRESENTATION),
    "clipPath": ("class", "clipPathUnits", "id"),
    "defs": (),
    "desc": (),
    "ellipse": ("class", "cx", "cy", "id", "rx", "ry", "style", "transform", *_CONDITIONAL, *_PRESENTATION),
    "feGaussianBlur": ("class", "color-interpolation-filters", "id", "requiredFeatures", "stdDeviation"),
    "feMorphology": ("class", "in", "operator", "radius"),
    "filter": (
        "class",
        "color-interpolation-filters",
        "filterRes",
        "filterUnits",
        "height",
        "id",
        "primitiveUnits",
        "requiredFeatures",
        "width",
        "x",
        "xlink:href",
        "y",
    ),
    "foreignObject": (
        "class",
        "font-size",
        "height",
        "id",
        "opacity",
        "requiredFeatures",
        "style",
        "transform",
        "width",
        "x",
        "y",
    ),
    "g": ("class", "display", "id", "style", "text-anchor", "transform", *_CONDITIONAL, *_FONT, *_PRESENTATION),
    "image": (
        "class",
        "clip-path",
        "clip-rule",
        "filter",
        "height",
        "id",
        "mask",
        "opacity",
        "style",
        "transform",
        "width",
        "x",
        "xlink:href",
        "xlink:title",
        "y",
        *_CONDITIONAL,
    ),
    "line": ("class", "id", "style", "transform", "x1", "x2", "y1", "y2", *_CONDITIONAL, *_MARKERS, *_PRESENTATION),
    "linearGradient": (
        "class",
        "gradientTransform",
        "gradientUnits",
        "id",
        "spreadMethod",
        "x1",
        "x2",
        "xlink:href",
        "y1",
        "y2",
        *_CONDITIONAL,
    ),
    "marker": (
        "class",
        "id",
        "markerHeight",
        "markerUnits",
        "markerWidth",
        "orient",
        "preserveAspectRatio",
        "refX",
        "refY",
        "systemLanguage",
        "viewBox",
    ),
    "mask": ("class", "height", "id", "maskContentUnits", "maskUnits", "width", "x", "y"),
    "metadata": ("class", "id"),
    "path": ("class", "d", "id", "style", "transform", *_CONDITIONAL, *_MARKERS, *_PRESENTATION),
    "pattern": (
        "class",
        "height",
        "id",
        "patternContentUnits",
        "patternTransform",
        "patternUnits",
        "style",
        "viewBox",
        "width",
        "x",
        "xlink:href",
        "y",
        *_CONDITIONAL,
    ),
    "polygon": ("class", "id", "points", "style", "transform", *_CONDITIONAL, *_MARKERS, *_PRESENTATION),
    "polyline": ("class", "id", "points", "style", "transform", *_CONDITIONAL, *_MARKERS, *_PRESENTATION),
    "radialGradient": (
        "class",
        "cx",
        "cy",
        "fx",
        "fy",
        "gradientTransform",
        "gradientUnits",
        "id",
        "r",
        "spreadMethod",
        "xlink:href",
        *_CONDITIONAL,
    ),
    "rect": ("class", "height", "id", "rx", "ry", "style", "transform", "width", "x", "y", *_CONDITIONAL, *_PRESENTATION),
    "stop": ("class", "id", "offset", "stop-color", "stop-opacity", "style", *_CONDITIONAL),
    "style": ("type",),
    "svg": (
        "class",
        "clip-path",
        "clip-rule",
        "filter",
        "height",
        "id",
        "mask",
        "preserveAspectRatio",
        "style",
        "viewBox",
        "width",
        "x",
        "xmlns",
        "xmlns:se",
        "xmlns:xlink",
        "y",
        *_CONDITIONAL,
    ),
    "switch": ("class", "id", *_CONDITIONAL),
    "symbol": (
        "class",
        "fill",
        "fill-opacity",
        "fill-rule",
        "filter",
        "id",
        "opacity",
        "preserveAspectRatio",
        "stroke",
        "stroke-dasharray",
        "stroke-dashoffset",
        "stroke-linecap",
        "stroke-linejoin",
        "stroke-miterlimit",
        "stroke-opacity",
        "stroke-width",
        "style",
        "transform",
        "viewBox",
        *_CONDITIONAL,
        *_FONT,
    ),
    "text": ("class", "id", "style", "text-anchor", "transform", "x", "xml:space", "y", *_CONDITIONAL, *_FONT, *_PRESENTATION),
    "textPath": (
        "class",
        "id",
        "method",
        "spacing",
        "startOffset",
        "style",
        "transform",
        "xlink:href",
        *_CONDITIONAL,
    ),
    "title": (),
    "tspan": (
        "class",
        "dx",
        "dy",
        "id",
        "rotate",
        "style",
        "text-anchor",
        "textLength",
        "transform",
        "x",
        "xml:space",
        "y",
        *_CONDITIONAL,
        *_FONT,
        *_PRESENTATION,
    ),
    "use": (
        "class",
        "height",
        "id",
        "style",
        "transform",
        "width",
        "x",
        "xlink:href",
        "y",
        *(name for name in _PRESENTATION if name != "opacity"),
    ),
}

MATHML_ELEMENTS: dict[str, tuple[str, ...]] = {
    "annotation": ("encoding",),
    "annotation-xml": ("encoding",),
    "maction": ("actiontype", "other", "selection"),
    "math": ("class", "display", "id", "xmlns"),
    "menclose": ("notation",),
    "merror": (),
    "mfrac": ("linethickness",),
    "mi": ("mathvariant",),
    "mmultiscripts": (),
    "mn": (),
    "mo": ("fence", "lspace", "maxsize", "minsize", "rspace", "stretchy"),
    "mover": (),
    "mpadded": ("depth", "height", "lspace", "voffset", "width"),
    "mphantom": (),
    "mprescripts": (),
    "mroot": (),
    "mrow": ("xlink:href", "xlink:type", "xmlns:xlink"),
    "mspace": ("depth", "height", "width"),
    "msqrt": (),
    "mstyle": ("displaystyle", "mathbackground", "mathcolor", "mathvariant", "scriptlevel"),
    "msub": (),
    "msubsup": (),
    "msup": (),
    "mtable": (
        "align",
        "columnalign",
        "columnlines",
        "columnspacing",
        "displaystyle",
        "equalcolumns",
        "equalrows",
        "frame",
        "rowalign",
        "rowlines",
        "rowspacing",
        "width",
    ),
    "mtd": ("columnalign", "columnspan", "rowalign", "rowspan"),
    "mtext": (),
    "mtr": ("columnalign", "rowalign"),
    "munder": (),
    "munderover": (),
    "none": (),
    "semantics": (),
}

DEFAULT_TABLE: dict[str, tuple[str, ...]] = {**SVG_ELEMENTS, **MATHML_ELEMENTS}


def build_namespace_index(
    attributes: Collection[str], registry: NamespaceRegistry = DEFAULT_REGISTRY
) -> dict[str, str | None]:
    """Map each attribute's local name to the namespace URI it must carry."""
    index: dict[str, str | None] = {}
    for name in attributes:
        if ":" in name:
            prefix, local = name.split(":", 1)
            uri = registry.lookup(prefix)
            if uri is None or not local:
                raise AllowListError(f"Unknown namespace prefix in allow-listed attribute {name!r}")
            index[local] = uri
        else:
            index[name] = NS.XMLNS if name == "xmlns" else None
    return index


@dataclass(frozen=True, slots=True)
class AllowList:
    """Immutable element/attribute allow-list plus its namespace-aware index.

    - `attributes[tag]` is the set of attribute names as written in the table.
    - `namespaces[tag]` maps attribute local names to the namespace URI they
      must be in (None for no namespace).

    Tags missing from the table are unsupported.
    """

    attributes: Mapping[str, frozenset[str]]
    namespaces: Mapping[str, Mapping[str, str | None]]

    @classmethod
    def from_table(
        cls,
        table: Mapping[str, Collection[str]],
        registry: NamespaceRegistry = DEFAULT_REGISTRY,
    ) -> AllowList:
        attributes: dict[str, frozenset[str]] = {}
        namespaces: dict[str, Mapping[str, str | None]] = {}
        for tag, names in table.items():
            if isinstance(names, str):
                raise AllowListError(f"Attributes for <{tag}> must be a collection of names, not a string")
            attributes[str(tag)] = frozenset(names)
            namespaces[str(tag)] = MappingProxyType(build_namespace_index(names, registry))
        return cls(attributes=MappingProxyType(attributes), namespaces=MappingProxyType(namespaces))

    def __contains__(self, tag: object) -> bool:
        return tag in self.attributes

    def __len__(self) -> int:
        return len(self.attributes)

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(self.attributes)

    def lookup(self, tag: str) -> frozenset[str] | None:
        return self.attributes.get(tag)

    def lookup_ns(self, tag: str) -> Mapping[str, str | None] | None:
        return self.namespaces.get(tag)


DEFAULT_ALLOW_LIST: AllowList = AllowList.from_table(DEFAULT_TABLE)
