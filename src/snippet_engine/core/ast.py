"""Node helpers shared by the analyzers and editors.

tree-sitter nodes are identified by their ``type`` string; the helpers here
cover the node kinds the engine actually reads (literals, patterns, TypeScript
types) and treat everything else as opaque.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from tree_sitter import Node

from snippet_engine.models import PropType, TextRange

MAX_WALK_DEPTH = 400

_WRAPPER_TYPES = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "type_assertion",
}


class _Missing:
    """Marker for "no static value" (``None`` stands for a JS ``null`` literal)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


# --- Source text and positions ---


class SourceText:
    """UTF-8 view of a source string for mapping tree-sitter byte positions.

    tree-sitter reports 0-based rows and byte columns; callers of the engine work
    with 1-based lines and character columns.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode("utf-8")
        self._line_starts = [0] + [m.end() for m in re.finditer(b"\n", self.data)]

    def column(self, point: tuple[int, int]) -> int:
        """1-based character column for a tree-sitter ``(row, byte_column)`` point."""
        row, byte_column = point
        if row >= len(self._line_starts):
            return byte_column + 1
        start = self._line_starts[row]
        return len(self.data[start : start + byte_column].decode("utf-8", errors="replace")) + 1

    def text_range(self, node: Node) -> TextRange:
        return TextRange(
            start_line=node.start_point[0] + 1,
            start_column=self.column(node.start_point),
            end_line=node.end_point[0] + 1,
            end_column=self.column(node.end_point),
        )

    def slice(self, start: int, end: int) -> str:
        return self.data[start:end].decode("utf-8", errors="replace")

    def node_source(self, node: Node) -> str:
        return self.slice(node.start_byte, node.end_byte)

    def line_start(self, byte_offset: int) -> int:
        return self.data.rfind(b"\n", 0, byte_offset) + 1

    def indentation_at(self, byte_offset: int) -> str:
        """Leading whitespace of the line containing ``byte_offset``."""
        start = self.line_start(byte_offset)
        end = start
        while end < len(self.data) and self.data[end] in b" \t":
            end += 1
        return self.slice(start, end)


@dataclass(frozen=True)
class SourceUpdate:
    """A byte-range replacement in the encoded source."""

    start: int
    end: int
    replacement: str


def apply_updates(source: SourceText, updates: list[SourceUpdate]) -> str:
    """Apply non-overlapping updates, highest start first, and decode the result."""
    data = source.data
    for update in sorted(updates, key=lambda u: u.start, reverse=True):
        data = data[: update.start] + update.replacement.encode("utf-8") + data[update.end :]
    return data.decode("utf-8")


# --- Node walking ---


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def named_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def first_named_child(node: Node) -> Node | None:
    children = named_children(node)
    return children[0] if children else None


def iter_nodes(root: Node, max_depth: int = MAX_WALK_DEPTH) -> Iterator[Node]:
    """Pre-order walk with an explicit stack; subtrees deeper than ``max_depth`` are skipped."""
    stack: list[tuple[Node, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node
        if depth >= max_depth:
            continue
        for child in reversed(node.children):
            if child.type != "comment":
                stack.append((child, depth + 1))


def has_child_type(node: Node, type_name: str) -> bool:
    return any(child.type == type_name for child in node.children)


def unwrap_expression(node: Node | None) -> Node | None:
    """Strip parentheses, ``as``/``satisfies`` casts and non-null assertions."""
    depth = 0
    while node is not None and node.type in _WRAPPER_TYPES and depth < MAX_WALK_DEPTH:
        if node.type == "parenthesized_expression":
            node = first_named_child(node)
        else:
            node = node.child_by_field_name("expression") or first_named_child(node)
        depth += 1
    return node


def identifier_name(node: Node | None) -> str | None:
    if node is not None and node.type in ("identifier", "type_identifier", "property_identifier"):
        return node_text(node)
    return None


# --- Literals ---

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if not body:
        return ""
    if body[0] in _SIMPLE_ESCAPES and len(body) == 1:
        return _SIMPLE_ESCAPES[body[0]]
    if body[0] == "x" and len(body) == 3:
        return chr(int(body[1:], 16))
    if body[0] == "u":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        try:
            return chr(int(digits, 16))
        except ValueError:
            return body
    if body[0] in "\r\n":
        return ""
    return body


def _string_parts(node: Node) -> str:
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(node_text(child))
        elif child.type == "escape_sequence":
            parts.append(_decode_escape(node_text(child)))
    return "".join(parts)


def string_literal_value(node: Node | None) -> str | None:
    """Value of a string literal or a template literal without substitutions."""
    if node is None:
        return None
    if node.type == "string":
        return _string_parts(node)
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return _string_parts(node)
    return None


def parse_number(text: str) -> int | float | None:
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        return None
    try:
        if cleaned[:2].lower() in ("0x", "0o", "0b"):
            return int(cleaned, 0)
        if any(ch in cleaned for ch in ".eE"):
            value = float(cleaned)
            return int(value) if value.is_integer() and "e" not in cleaned.lower() else value
        return int(cleaned)
    except ValueError:
        return None


def property_key_name(node: Node | None) -> str | None:
    """Name of a non-computed object key (identifier, string or number)."""
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "shorthand_property_identifier_pattern"):
        return node_text(node)
    if node.type == "string":
        return _string_parts(node)
    if node.type == "number":
        value = parse_number(node_text(node))
        return None if value is None else str(value)
    return None


def extract_literal(node: Node | None, depth: int = 0) -> Any:
    """Static value of a literal expression, or ``MISSING`` when it is not one.

    Handles strings, numbers, booleans, ``null``, substitution-free templates,
    negated numbers, and arrays or objects built only from those.
    """
    expr = unwrap_expression(node)
    if expr is None or depth > MAX_WALK_DEPTH:
        return MISSING

    kind = expr.type
    if kind in ("string", "template_string"):
        value = string_literal_value(expr)
        return MISSING if value is None else value
    if kind == "number":
        number = parse_number(node_text(expr))
        return MISSING if number is None else number
    if kind == "true":
        return True
    if kind == "false":
        return False
    if kind == "null":
        return None
    if kind == "unary_expression":
        operator = expr.child_by_field_name("operator")
        argument = extract_literal(expr.child_by_field_name("argument"), depth + 1)
        if node_text(operator) == "-" and isinstance(argument, int | float) and not isinstance(argument, bool):
            return -argument
        return MISSING
    if kind == "array":
        values: list[Any] = []
        for element in named_children(expr):
            value = extract_literal(element, depth + 1)
            if value is MISSING:
                return MISSING
            values.append(value)
        return values
    if kind == "object":
        result: dict[str, Any] = {}
        for prop in named_children(expr):
            if prop.type != "pair":
                return MISSING
            key = property_key_name(prop.child_by_field_name("key"))
            if key is None:
                return MISSING
            value = extract_literal(prop.child_by_field_name("value"), depth + 1)
            if value is MISSING:
                return MISSING
            result[key] = value
        return result
    return MISSING


# --- TypeScript annotations ---


@dataclass
class TypeInfo:
    type: PropType
    enum_values: list[str] | None = None
    optional: bool = False


TypeInfoMap = dict[str, TypeInfo]


def _flatten_union(node: Node) -> list[Node]:
    members: list[Node] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "union_type":
            stack.extend(reversed(named_children(current)))
        else:
            members.append(current)
    return members


def _literal_type_value(node: Node) -> Any:
    if node.type != "literal_type":
        return MISSING
    inner = first_named_child(node)
    if inner is None or inner.type in ("null", "undefined"):
        return MISSING
    return extract_literal(inner)


def _is_keyword_type(node: Node, keyword: str) -> bool:
    return node_text(node).strip() == keyword and node.type in ("literal_type", "predefined_type", "type_identifier", keyword)


def parse_type_annotation(node: Node | None, depth: int = 0) -> TypeInfo | None:
    """Map a TypeScript type node to a prop type, or ``None`` when unresolved."""
    if node is None or depth > MAX_WALK_DEPTH:
        return None
    if node.type == "type_annotation":
        return parse_type_annotation(first_named_child(node), depth + 1)
    if node.type in ("parenthesized_type", "readonly_type"):
        return parse_type_annotation(first_named_child(node), depth + 1)

    kind = node.type
    if kind == "predefined_type":
        text = node_text(node)
        if text in ("string", "number", "boolean"):
            return TypeInfo(type=text)  # type: ignore[arg-type]
        return None
    if kind in ("array_type", "tuple_type"):
        return TypeInfo(type="array")
    if kind == "object_type":
        return TypeInfo(type="object")
    if kind == "generic_type":
        name = node_text(node.child_by_field_name("name"))
        if name in ("Array", "ReadonlyArray"):
            return TypeInfo(type="array")
        if name == "Record":
            return TypeInfo(type="object")
        return None
    if kind == "literal_type":
        value = _literal_type_value(node)
        if isinstance(value, bool):
            return TypeInfo(type="boolean")
        if isinstance(value, str):
            return TypeInfo(type="string")
        if isinstance(value, int | float):
            return TypeInfo(type="number")
        return None
    if kind != "union_type":
        return None

    members = _flatten_union(node)
    optional = False
    literal_values: list[str] = []
    base_type: PropType | None = None
    counted = 0
    for member in members:
        if _is_keyword_type(member, "undefined"):
            optional = True
            continue
        counted += 1
        if _is_keyword_type(member, "null"):
            continue
        literal = _literal_type_value(member)
        if isinstance(literal, bool):
            literal_values.append("true" if literal else "false")
            continue
        if isinstance(literal, str | int | float):
            literal_values.append(str(literal))
            continue
        parsed = parse_type_annotation(member, depth + 1)
        if parsed is not None and base_type is None:
            base_type = parsed.type

    # null members are ignored, so they do not block an enum
    null_count = sum(1 for member in members if _is_keyword_type(member, "null"))
    if literal_values and len(literal_values) == counted - null_count:
        return TypeInfo(type="enum", enum_values=literal_values, optional=optional)
    if base_type is not None:
        return TypeInfo(type=base_type, optional=optional)
    return TypeInfo(type="string", optional=optional)


def type_info_map_from_members(container: Node | None) -> TypeInfoMap:
    """Build ``key -> TypeInfo`` from an object type or interface body."""
    result: TypeInfoMap = {}
    if container is None:
        return result
    for member in named_children(container):
        if member.type != "property_signature":
            continue
        key = property_key_name(member.child_by_field_name("name"))
        if key is None:
            continue
        info = parse_type_annotation(member.child_by_field_name("type"))
        if info is None:
            continue
        info.optional = info.optional or has_child_type(member, "?")
        result[key] = info
    return result


def build_type_map(root: Node) -> dict[str, TypeInfoMap]:
    """Collect top-level ``type`` aliases and interfaces keyed by name."""
    type_map: dict[str, TypeInfoMap] = {}
    for statement in named_children(root):
        declaration = statement
        if statement.type == "export_statement":
            declaration = statement.child_by_field_name("declaration") or statement
        if declaration.type == "type_alias_declaration":
            name = node_text(declaration.child_by_field_name("name"))
            value = declaration.child_by_field_name("value")
            type_map[name] = type_info_map_from_members(value) if value is not None and value.type == "object_type" else {}
        elif declaration.type == "interface_declaration":
            name = node_text(declaration.child_by_field_name("name"))
            type_map[name] = type_info_map_from_members(declaration.child_by_field_name("body"))
    return type_map


def resolve_param_type_info(param: Node | None, type_map: dict[str, TypeInfoMap]) -> TypeInfoMap:
    """Type info for the properties of a parameter's inline or named annotation."""
    if param is None:
        return {}
    annotation = param.child_by_field_name("type")
    annotated = first_named_child(annotation) if annotation is not None else None
    while annotated is not None and annotated.type == "parenthesized_type":
        annotated = first_named_child(annotated)
    if annotated is None:
        return {}
    if annotated.type == "object_type":
        return type_info_map_from_members(annotated)
    if annotated.type == "type_identifier":
        return type_map.get(node_text(annotated), {})
    if annotated.type == "generic_type":
        return type_map.get(node_text(annotated.child_by_field_name("name")), {})
    return {}


def infer_prop_type(value: Any) -> PropType:
    if isinstance(value, list):
        return "array"
    if value is None or isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, dict):
        return "object"
    return "string"
