"""Reverse index from source ranges to the JSX elements that render them."""

from __future__ import annotations

import logging

from tree_sitter import Node

from snippet_engine.core.ast import SourceText, iter_nodes, named_children, string_literal_value
from snippet_engine.core.jsx import JSX_ELEMENT_TYPES, Location, element_name, expression_content, is_fragment, smallest_containing
from snippet_engine.core.parser import parse_source
from snippet_engine.errors import ParserLoadError
from snippet_engine.models import InspectIndex, InspectIndexEntry, InspectMatch, TextRange

logger = logging.getLogger(__name__)

MAX_TEXT_RANGES = 120


def _text_children(element: Node) -> list[Node]:
    """Direct children carrying visible text: ``jsx_text`` or ``{"literal"}``."""
    found: list[Node] = []
    for child in named_children(element):
        if len(found) >= MAX_TEXT_RANGES:
            break
        if child.type == "jsx_text":
            if child.text and child.text.strip():
                found.append(child)
        elif child.type == "jsx_expression":
            content = expression_content(child)
            if content is not None and content.type == "string":
                value = string_literal_value(content)
                if value and value.strip():
                    found.append(content)
    return found


def _entry(node: Node, text: SourceText) -> InspectIndexEntry:
    fragment = is_fragment(node)
    return InspectIndexEntry(
        element_range=text.text_range(node),
        text_ranges=[text.text_range(child) for child in _text_children(node)],
        element_type="fragment" if fragment else "element",
        element_name=None if fragment else element_name(node),
    )


def build_inspect_index(source: str) -> InspectIndex | None:
    """Index every JSX element and fragment in ``source``.

    Returns ``None`` when the parser is unavailable or the document cannot be
    parsed at all.
    """
    if not source or not source.strip():
        return InspectIndex()
    try:
        root = parse_source(source).root_node
    except ParserLoadError as exc:
        logger.warning("Inspect index unavailable: %s", exc)
        return None
    if root.type == "ERROR":
        return None

    text = SourceText(source)
    elements = [_entry(node, text) for node in iter_nodes(root) if node.type in JSX_ELEMENT_TYPES]
    return InspectIndex(elements=elements)


def _location(text_range: TextRange) -> Location:
    return Location(
        start_line=text_range.start_line,
        start_column=text_range.start_column - 1,
        end_line=text_range.end_line,
        end_column=text_range.end_column - 1,
    )


class InspectLookup:
    """Point queries against a prebuilt :class:`InspectIndex`."""

    def __init__(self, index: InspectIndex) -> None:
        self.index = index
        self._candidates = [(_location(entry.element_range), entry) for entry in index.elements]

    def find_match(self, line: int, column: int = 1) -> InspectMatch | None:
        if line <= 0:
            return None
        found = smallest_containing(self._candidates, int(line), max(1, int(column)) - 1)
        if not isinstance(found, InspectIndexEntry):
            return None
        return InspectMatch(
            range=found.element_range,
            element_range=found.element_range,
            text_ranges=found.text_ranges,
            element_type=found.element_type,
            element_name=found.element_name,
        )
