"""
GDB Schema Inspector — Ordered-Candidate XML Lookup
====================================================
Esri definition XML spells the same concept several ways depending on the
product and release (``ShapeField`` vs ``GeometryFieldName``, ``Subtypes``
vs ``SubtypeInfos`` …).  Every probe of a definition document goes through
the helpers in this module: each takes an ordered list of candidate tag
names and returns the match for the first candidate that is *present*
(an element that exists with empty text still wins).

Tag names are compared by local name, so namespaced documents
(``typens:``, ``xs:``) resolve the same way as bare ones.  "Descendant"
lookups never match the starting element itself.

Usage::

    root = parse_definition(xml_text)
    column = descendant_text(root, "ShapeField", "GeometryFieldName")
    container = first_descendant(root, "Fields", "FieldArray")
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Iterator

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_definition(xml_text: str) -> ET.Element:
    """Parse a definition document and return its root element.

    Raises:
        xml.etree.ElementTree.ParseError: If *xml_text* is not well-formed.
    """
    return ET.fromstring(xml_text)


def local_name(element: ET.Element) -> str:
    """Return *element*'s tag without its ``{namespace}`` prefix."""
    tag = element.tag
    if not isinstance(tag, str):
        # Comments and processing instructions carry a factory as tag.
        return ""
    return tag.rsplit("}", 1)[-1]


def element_text(element: ET.Element) -> str:
    """Concatenated text content of *element* and all its descendants."""
    return "".join(element.itertext())


def iter_descendants(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield descendants of *element* whose local name is *name*, in document order."""
    for candidate in element.iter():
        if candidate is not element and local_name(candidate) == name:
            yield candidate


def first_descendant(element: ET.Element, *names: str) -> ET.Element | None:
    """First descendant matching the first present candidate name."""
    for name in names:
        for candidate in iter_descendants(element, name):
            return candidate
    return None


def first_child(element: ET.Element, *names: str) -> ET.Element | None:
    """First direct child matching the first present candidate name."""
    for name in names:
        for child in element:
            if local_name(child) == name:
                return child
    return None


def children(element: ET.Element, *names: str) -> list[ET.Element]:
    """Direct children whose local name is any of *names*, in document order."""
    wanted = set(names)
    return [child for child in element if local_name(child) in wanted]


def descendant_text(element: ET.Element, *names: str, default: str | None = None) -> str | None:
    """Text of :func:`first_descendant`, or *default* when no candidate is present."""
    found = first_descendant(element, *names)
    return element_text(found) if found is not None else default


def child_text(element: ET.Element, *names: str, default: str | None = None) -> str | None:
    """Text of :func:`first_child`, or *default* when no candidate is present."""
    found = first_child(element, *names)
    return element_text(found) if found is not None else default


def has_descendant(element: ET.Element, *names: str) -> bool:
    """``True`` if any candidate name occurs below *element*."""
    return first_descendant(element, *names) is not None


def parse_int(text: str | None) -> int | None:
    """Best-effort integer parse; ``None`` unless *text* is a plain signed integer."""
    if text is None:
        return None
    stripped = text.strip()
    if not _INTEGER.fullmatch(stripped):
        return None
    return int(stripped)


def parse_bool(text: str | None) -> bool | None:
    """Best-effort ``true`` / ``false`` parse, case-insensitive."""
    if text is None:
        return None
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return None
