"""Accessors for hyperlink and paint-server references on elements."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

from .namespaces import NS

if TYPE_CHECKING:
    from .node import Element

# url(#a), url('#a'), url("#a"), with optional inner whitespace.
_URL_RE = re.compile(r"url\(\s*(?:\"([^\"]*)\"|'([^']*)'|([^)]*?))\s*\)", re.IGNORECASE)


def get_href(element: Element) -> str | None:
    return element.get_attribute_ns(NS.XLINK, "href")


def set_href(element: Element, value: str) -> None:
    element.set_attribute_ns(NS.XLINK, "xlink:href", value)


def iter_url_targets(value: str | None) -> Iterator[str]:
    """Yield the target of every `url(...)` reference in a presentation value."""
    if not value:
        return
    for match in _URL_RE.finditer(value):
        double, single, bare = match.groups()
        target = double if double is not None else single if single is not None else bare
        yield target.strip()


def get_url_from_attr(value: str | None) -> str | None:
    """Return the first `url(...)` target in `value`, or None.

    >>> get_url_from_attr("url('#grad')")
    '#grad'
    >>> get_url_from_attr("red") is None
    True
    """
    return next(iter_url_targets(value), None)


def is_local_reference(target: str | None) -> bool:
    return bool(target) and target[0] == "#"
