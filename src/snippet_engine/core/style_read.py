"""Read the current style of the element under the cursor.

This is the read side of :func:`~snippet_engine.core.style.apply_style_update`:
the same seven fields, taken from the last matching base class token and
overridden by a literal inline ``style={{...}}`` entry when one parses.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from tree_sitter import Node

from snippet_engine.core.ast import named_children, node_text, parse_number, property_key_name, string_literal_value
from snippet_engine.core.editing import EditTarget, locate_element
from snippet_engine.core.jsx import attribute_value, element_name, expression_content, find_attribute
from snippet_engine.core.style import static_class_value
from snippet_engine.core.style_classes import CATEGORY_PREDICATES, normalize_color, utility
from snippet_engine.models import StyleProperties, StyleProperty, StyleState, StyleValue

DYNAMIC_REASON = "This element uses a dynamic className. Edit styles in code."

_BORDER_WIDTH = re.compile(r"^border-(0|2|4|8)$")
_BORDER_ARBITRARY = re.compile(r"^border-\[([^\]]+)\]$")
_NUMERIC = re.compile(r"^(\d+(?:\.\d+)?)$")
_PX = re.compile(r"^(\d+(?:\.\d+)?)px$")
_NUMERIC_OR_PX = re.compile(r"^(\d+(?:\.\d+)?)(?:px)?$")

InlineValue = int | float | str


def _arbitrary(raw: str) -> str | None:
    return raw[1:-1] if raw.startswith("[") and raw.endswith("]") else None


def _number(pattern: re.Pattern[str], raw: str) -> int | float | None:
    match = pattern.match(raw.strip())
    return parse_number(match.group(1)) if match else None


# --- Values from class tokens ---


def _color_reader(prefix: str) -> Callable[[str], StyleValue]:
    def read(base: str) -> StyleValue:
        if not base.startswith(prefix):
            return None
        suffix = base[len(prefix) :]
        inner = _arbitrary(suffix)
        return normalize_color(inner if inner is not None else suffix)

    return read


def read_border_width(base: str) -> StyleValue:
    if base == "border":
        return 1
    fixed = _BORDER_WIDTH.match(base)
    if fixed:
        return int(fixed.group(1))
    bracket = _BORDER_ARBITRARY.match(base)
    return _number(_PX, bracket.group(1)) if bracket else None


def _scale_reader(prefix: str, pattern: re.Pattern[str]) -> Callable[[str], StyleValue]:
    """Named token (``lg``), a number from an arbitrary value, or the raw ``[...]``."""

    def read(base: str) -> StyleValue:
        if not base.startswith(prefix):
            return None
        suffix = base[len(prefix) :]
        inner = _arbitrary(suffix)
        if inner is not None:
            number = _number(pattern, inner)
            return number if number is not None else f"[{inner}]"
        return suffix or None

    return read


def read_radius(base: str) -> StyleValue:
    if base == "rounded":
        return "DEFAULT"
    return _scale_reader("rounded-", _PX)(base)


CLASS_READERS: dict[str, Callable[[str], StyleValue]] = {
    "background": _color_reader("bg-"),
    "border_width": read_border_width,
    "border_color": _color_reader("border-"),
    "radius": read_radius,
    "text_color": _color_reader("text-"),
    "font_size": _scale_reader("text-", _PX),
    "font_weight": _scale_reader("font-", _NUMERIC),
}


# --- Inline style ---


def inline_style_values(opening: Node) -> dict[str, InlineValue]:
    """String and number entries of a literal ``style={{...}}`` object."""
    attribute = find_attribute(opening, "style")
    expression = expression_content(attribute_value(attribute)) if attribute is not None else None
    if expression is None or expression.type != "object":
        return {}
    values: dict[str, InlineValue] = {}
    for prop in named_children(expression):
        if prop.type != "pair":
            continue
        key = property_key_name(prop.child_by_field_name("key"))
        value = prop.child_by_field_name("value")
        if not key or value is None:
            continue
        if value.type == "string":
            values[key] = string_literal_value(value) or ""
        elif value.type == "number":
            number = parse_number(node_text(value))
            if number is not None:
                values[key] = number
    return values


def _inline_color(raw: InlineValue | None) -> StyleValue:
    return None if raw is None else normalize_color(str(raw))


def _inline_numeric(pattern: re.Pattern[str]) -> Callable[[InlineValue | None], StyleValue]:
    def read(raw: InlineValue | None) -> StyleValue:
        if isinstance(raw, (int, float)):
            return raw
        return _number(pattern, raw) if isinstance(raw, str) else None

    return read


# (field, class category, inline key, inline reader)
FIELDS: list[tuple[str, str, str, Callable[[InlineValue | None], StyleValue]]] = [
    ("background_color", "background", "backgroundColor", _inline_color),
    ("border_width", "border_width", "borderWidth", _inline_numeric(_NUMERIC_OR_PX)),
    ("border_color", "border_color", "borderColor", _inline_color),
    ("border_radius", "radius", "borderRadius", _inline_numeric(_NUMERIC_OR_PX)),
    ("text_color", "text_color", "color", _inline_color),
    ("font_size", "font_size", "fontSize", _inline_numeric(_NUMERIC_OR_PX)),
    ("font_weight", "font_weight", "fontWeight", _inline_numeric(_NUMERIC)),
]


def _last_token(tokens: list[str], predicate: Callable[[str], bool]) -> str | None:
    for token in reversed(tokens):
        if predicate(token):
            return token
    return None


def read_style(source: str, line: int, column: int) -> StyleState:
    """Report each style field of the element at ``line``/``column``.

    A field is ``present`` when a matching class token or inline entry exists,
    even if its value cannot be read back into a number or color.
    """
    target = locate_element(source, line, column)
    if not isinstance(target, EditTarget):
        return StyleState(found=False, reason=target.reason)

    class_attribute = find_attribute(target.opening, "className", "class")
    value_node = attribute_value(class_attribute) if class_attribute is not None else None
    # A bare ``className`` attribute reads as an empty static value.
    class_value = static_class_value(value_node) if value_node is not None else ""
    if class_attribute is None:
        kind = "none"
    elif class_value is None:
        kind = "dynamic"
    else:
        kind = "static"
    tokens = class_value.split() if kind == "static" and class_value else []
    inline = inline_style_values(target.opening)

    properties = StyleProperties()
    for field, category, key, read_inline in FIELDS:
        token = _last_token(tokens, CATEGORY_PREDICATES[category])
        from_class = CLASS_READERS[category](utility(token)) if token else None
        from_inline = read_inline(inline.get(key))
        setattr(
            properties,
            field,
            StyleProperty(
                present=key in inline or token is not None,
                value=from_inline if from_inline is not None else from_class,
            ),
        )

    editable = kind != "dynamic"
    return StyleState(
        found=True,
        reason=None if editable else DYNAMIC_REASON,
        element_name=element_name(target.element),
        class_name_kind=kind,
        editable=editable,
        properties=properties,
    )
