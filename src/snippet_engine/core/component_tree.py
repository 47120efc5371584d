"""Layer tree of the JSX an exported component renders."""

from __future__ import annotations

from tree_sitter import Node

from snippet_engine.core.ast import SourceText, named_children, node_text, unwrap_expression
from snippet_engine.core.exports import DEFAULT_EXPORT, FUNCTION_TYPES, get_exported_function
from snippet_engine.core.jsx import (
    JSX_ELEMENT_TYPES,
    attribute_value,
    element_name,
    find_attribute,
    is_fragment,
    opening_element,
)
from snippet_engine.core.parser import parse_source
from snippet_engine.core.style import static_class_value
from snippet_engine.models import ComponentTreeNode, SourcePoint

LOGICAL_OPERATORS = ("&&", "||", "??")

# Depth cap for the recursive walks below.
MAX_TREE_DEPTH = 100


def collect_jsx(expression: Node | None, bucket: list[Node], depth: int = 0) -> None:
    """JSX reachable from an expression through ternaries, logical operators, arrays and sequences."""
    node = unwrap_expression(expression)
    if node is None or depth > MAX_TREE_DEPTH:
        return
    if node.type in JSX_ELEMENT_TYPES:
        bucket.append(node)
    elif node.type == "ternary_expression":
        collect_jsx(node.child_by_field_name("consequence"), bucket, depth + 1)
        collect_jsx(node.child_by_field_name("alternative"), bucket, depth + 1)
    elif node.type == "binary_expression":
        if node_text(node.child_by_field_name("operator")) in LOGICAL_OPERATORS:
            collect_jsx(node.child_by_field_name("left"), bucket, depth + 1)
            collect_jsx(node.child_by_field_name("right"), bucket, depth + 1)
    elif node.type in ("array", "sequence_expression"):
        for child in named_children(node):
            collect_jsx(child, bucket, depth + 1)


def _returned_expressions(body: Node) -> list[Node]:
    """Arguments of ``return`` statements in ``body``, not descending into nested functions."""
    found: list[Node] = []
    stack = [body]
    while stack:
        node = stack.pop()
        if node.type == "return_statement":
            argument = next((child for child in named_children(node) if child.type != "comment"), None)
            if argument is not None:
                found.append(argument)
            continue
        stack.extend(child for child in reversed(named_children(node)) if child.type not in FUNCTION_TYPES)
    return found


def component_roots(component: Node | None) -> list[Node]:
    if component is None:
        return []
    if component.type in JSX_ELEMENT_TYPES:
        return [component]
    if component.type not in FUNCTION_TYPES:
        return []
    body = component.child_by_field_name("body")
    if body is None:
        return []
    expressions = _returned_expressions(body) if body.type == "statement_block" else [body]
    roots: list[Node] = []
    for expression in expressions:
        collect_jsx(expression, roots)
    return roots


def _class_name(element: Node) -> str | None:
    tag = opening_element(element)
    attribute = find_attribute(tag, "className", "class") if tag is not None else None
    value = attribute_value(attribute) if attribute is not None else None
    return static_class_value(value) if value is not None else None


def _element_children(element: Node) -> list[Node]:
    if element.type != "jsx_element":
        return []
    children: list[Node] = []
    for child in named_children(element):
        if child.type in JSX_ELEMENT_TYPES:
            children.append(child)
        elif child.type == "jsx_expression":
            collect_jsx(next(iter(named_children(child)), None), children)
    return children


def _tree_node(element: Node, path: str, text: SourceText, depth: int = 0) -> ComponentTreeNode:
    fragment = is_fragment(element)
    children = _element_children(element) if depth < MAX_TREE_DEPTH else []
    return ComponentTreeNode(
        id=path,
        name="Fragment" if fragment else element_name(element) or "Unknown",
        class_name=None if fragment else _class_name(element),
        source=SourcePoint(line=element.start_point[0] + 1, column=text.column(element.start_point)),
        children=[_tree_node(child, f"{path}.{index}", text, depth + 1) for index, child in enumerate(children)],
    )


def build_component_tree(source: str, export_name: str | None = None) -> list[ComponentTreeNode]:
    """The element tree rendered by ``export_name`` (the default export when omitted).

    Ids are dotted child paths (``"0.1.2"``); ``source`` points at the element's
    start with a 1-based line and column.
    """
    if not source.strip():
        return []
    root = parse_source(source).root_node
    if root.type == "ERROR":
        return []
    name = (export_name or "").strip() or DEFAULT_EXPORT
    component = get_exported_function(root, name)
    text = SourceText(source)
    return [_tree_node(element, str(index), text) for index, element in enumerate(component_roots(component))]
