"""JSX-specific node helpers and cursor targeting."""

from __future__ import annotations

import re
from dataclasses import dataclass

from tree_sitter import Node

from snippet_engine.core.ast import SourceText, first_named_child, iter_nodes, named_children, node_text

JSX_ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")

# multi-line elements always rank after single-line ones with the same line span
_MULTILINE_COLUMN_SPAN = 10_000


def opening_element(node: Node) -> Node | None:
    """The opening tag of a JSX element (the element itself when self-closing)."""
    if node.type == "jsx_self_closing_element":
        return node
    if node.type != "jsx_element":
        return None
    tag = node.child_by_field_name("open_tag")
    if tag is not None:
        return tag
    return next((child for child in node.children if child.type == "jsx_opening_element"), None)


def closing_element(node: Node) -> Node | None:
    if node.type != "jsx_element":
        return None
    tag = node.child_by_field_name("close_tag")
    if tag is not None:
        return tag
    return next((child for child in node.children if child.type == "jsx_closing_element"), None)


def _name_node(tag: Node) -> Node | None:
    name = tag.child_by_field_name("name")
    if name is not None:
        return name
    return next(
        (
            child
            for child in tag.named_children
            if child.type in ("identifier", "member_expression", "nested_identifier", "jsx_namespace_name")
        ),
        None,
    )


def element_name(node: Node) -> str | None:
    """Dotted (``Foo.Bar``) or namespaced (``svg:rect``) tag name; ``None`` for fragments."""
    tag = opening_element(node)
    if tag is None:
        return None
    name = _name_node(tag)
    if name is None:
        return None
    if name.type == "jsx_namespace_name":
        return ":".join(node_text(part) for part in named_children(name))
    return re.sub(r"\s+", "", node_text(name))


def is_fragment(node: Node) -> bool:
    if node.type != "jsx_element":
        return False
    tag = opening_element(node)
    return tag is not None and _name_node(tag) is None


def jsx_attributes(tag: Node) -> list[Node]:
    return [child for child in tag.named_children if child.type == "jsx_attribute"]


def attribute_name(attribute: Node) -> str | None:
    name = first_named_child(attribute)
    if name is None:
        return None
    if name.type == "jsx_namespace_name":
        return ":".join(node_text(part) for part in named_children(name))
    if name.type in ("property_identifier", "identifier"):
        return node_text(name)
    return None


def attribute_value(attribute: Node) -> Node | None:
    children = named_children(attribute)
    return children[1] if len(children) > 1 else None


def find_attribute(tag: Node, *names: str) -> Node | None:
    for attribute in jsx_attributes(tag):
        if attribute_name(attribute) in names:
            return attribute
    return None


def expression_content(container: Node | None) -> Node | None:
    """The expression wrapped by a ``{...}`` JSX expression container."""
    if container is None or container.type != "jsx_expression":
        return None
    return first_named_child(container)


@dataclass(frozen=True)
class Location:
    """1-based line, 0-based character column span of a node."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def of(cls, node: Node, text: SourceText) -> Location:
        return cls(
            start_line=node.start_point[0] + 1,
            start_column=text.column(node.start_point) - 1,
            end_line=node.end_point[0] + 1,
            end_column=text.column(node.end_point) - 1,
        )

    def contains(self, line: int, column: int) -> bool:
        if line < self.start_line or line > self.end_line:
            return False
        if line == self.start_line and column < self.start_column:
            return False
        return not (line == self.end_line and column > self.end_column)

    def span_score(self) -> tuple[int, int]:
        line_span = self.end_line - self.start_line
        column_span = self.end_column - self.start_column if line_span == 0 else _MULTILINE_COLUMN_SPAN + line_span
        return line_span, column_span


def smallest_containing(candidates: list[tuple[Location, object]], line: int, column: int) -> object | None:
    """Pick the candidate with the smallest span containing the point; earlier wins ties."""
    best: tuple[Location, object] | None = None
    for location, item in candidates:
        if not location.contains(line, column):
            continue
        if best is None or location.span_score() < best[0].span_score():
            best = (location, item)
    return best[1] if best is not None else None


def find_jsx_element_at(root: Node, text: SourceText, line: int, column: int) -> Node | None:
    """Innermost JSX element (fragments excluded) containing a 1-based ``(line, column)``."""
    target_line = max(1, int(line))
    target_column = max(0, int(column) - 1)
    candidates: list[tuple[Location, object]] = [
        (Location.of(node, text), node)
        for node in iter_nodes(root)
        if node.type in JSX_ELEMENT_TYPES and not is_fragment(node)
    ]
    found = smallest_containing(candidates, target_line, target_column)
    return found if isinstance(found, Node) else None
