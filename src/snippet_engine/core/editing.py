"""Shared cursor targeting for the structural editors."""

from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node

from snippet_engine.core.ast import SourceText
from snippet_engine.core.jsx import find_jsx_element_at, opening_element
from snippet_engine.core.parser import parse_source
from snippet_engine.models import EditResult


@dataclass
class EditTarget:
    text: SourceText
    element: Node
    opening: Node


def refuse(source: str, reason: str | None = None, notice: str | None = None) -> EditResult:
    return EditResult(source=source, changed=False, reason=reason, notice=notice)


def locate_element(source: str, line: int, column: int) -> EditTarget | EditResult:
    """Parse ``source`` and find the element under the cursor, or a refusal."""
    if not source.strip():
        return refuse(source, "Source is empty.")
    text = SourceText(source)
    root = parse_source(source).root_node
    if root.type == "ERROR":
        return refuse(source, "Source could not be parsed.")
    element = find_jsx_element_at(root, text, line, column)
    if element is None:
        return refuse(source, "Unable to locate JSX element.")
    if element.has_error:
        return refuse(source, "Selected element contains syntax errors.")
    opening = opening_element(element)
    if opening is None or opening.is_missing:
        return refuse(source, "Selected element is missing a JSX opening tag.")
    return EditTarget(text=text, element=element, opening=opening)

