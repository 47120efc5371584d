"""Tailwind-aware style editing of the element under the cursor.

Fields are written as Tailwind classes when the element's class attribute is a
static string. A dynamic ``className`` falls back to inline ``style={{...}}``
entries. Whenever a class is written, the matching inline entry is removed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from tree_sitter import Node

from snippet_engine.core.ast import SourceUpdate, apply_updates, identifier_name, string_literal_value, unwrap_expression
from snippet_engine.core.editing import EditTarget, locate_element, refuse
from snippet_engine.core.jsx import attribute_name, attribute_value, expression_content, find_attribute
from snippet_engine.core.style_attribute import StyleUpdate, build_style_update, insertion_point
from snippet_engine.core.style_classes import (
    format_border_width_class,
    format_color_class,
    format_color_style,
    format_font_size_class,
    format_font_weight_class,
    format_px,
    format_radius_class,
    normalize_class_name,
    normalize_color,
)
from snippet_engine.models import EditResult, StyleFields

logger = logging.getLogger(__name__)

CN_NOTICE = "Styles panel couldn't rewrite className={cn(...)} safely. Falling back to inline styles."
DYNAMIC_NOTICE = "Styles panel couldn't rewrite a dynamic className expression. Falling back to inline styles."

Length = float | str


@dataclass
class ClassNameUpdate:
    update: SourceUpdate | None
    applied: bool
    notice: str | None = None


def _color(value: str | None) -> str | None:
    return normalize_color(value)


def _length(value: Length | None) -> Length | None:
    """Positive number or non-blank string; anything else clears the field."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _arbitrary_value(value: str) -> str | None:
    return value[1:-1] if value.startswith("[") and value.endswith("]") else None


def static_class_value(value: Node | None) -> str | None:
    """The attribute's string value, or ``None`` when it is computed."""
    if value is None:
        return None
    if value.type == "string":
        return string_literal_value(value)
    return string_literal_value(unwrap_expression(expression_content(value)))


def _is_cn_call(value: Node | None) -> bool:
    expression = unwrap_expression(expression_content(value))
    if expression is None or expression.type != "call_expression":
        return False
    return identifier_name(expression.child_by_field_name("function")) == "cn"


def build_class_name_update(opening: Node, classes: dict[str, str | None]) -> ClassNameUpdate:
    attribute = find_attribute(opening, "className", "class")
    if attribute is None:
        value = normalize_class_name("", classes)
        if not value:
            return ClassNameUpdate(update=None, applied=True)
        at = insertion_point(opening)
        return ClassNameUpdate(update=SourceUpdate(at, at, f' className="{value}"'), applied=True)

    value_node = attribute_value(attribute)
    current = static_class_value(value_node)
    if current is None:
        notice = CN_NOTICE if _is_cn_call(value_node) else DYNAMIC_NOTICE
        return ClassNameUpdate(update=None, applied=False, notice=notice)

    value = normalize_class_name(current, classes)
    if value == current:
        return ClassNameUpdate(update=None, applied=True)
    name = attribute_name(attribute) or "className"
    replacement = f'{name}="{value}"' if value else ""
    return ClassNameUpdate(update=SourceUpdate(attribute.start_byte, attribute.end_byte, replacement), applied=True)


def _inline_length(value: Length | None) -> str | None:
    if value is None or isinstance(value, str):
        return None if value is None else _arbitrary_value(value)
    return format_px(value)


def _inline_weight(value: Length | None) -> str | None:
    if value is None or isinstance(value, str):
        return None if value is None else _arbitrary_value(value)
    return str(round(value))


def apply_style_update(source: str, line: int, column: int, fields: StyleFields) -> EditResult:
    if not source.strip():
        return refuse(source, "Source is empty.")
    provided = fields.model_fields_set
    if not provided:
        return refuse(source)

    target = locate_element(source, line, column)
    if not isinstance(target, EditTarget):
        return target

    background = _color(fields.background_color)
    border_color = _color(fields.border_color)
    text_color = _color(fields.text_color)
    border_width = fields.border_width
    if border_width is not None and (not math.isfinite(border_width) or border_width <= 0):
        border_width = None
    radius = _length(fields.border_radius)
    font_size = _length(fields.font_size)
    font_weight = _length(fields.font_weight)

    # (field, class category, formatted class, inline key, inline value, skip inline)
    plan: list[tuple[str, str, str | None, str, str | None, bool]] = [
        (
            "background_color",
            "background",
            format_color_class("bg", background) if background else None,
            "backgroundColor",
            format_color_style(background) if background else None,
            False,
        ),
        (
            "border_width",
            "border_width",
            format_border_width_class(border_width) if border_width is not None else None,
            "borderWidth",
            format_px(border_width) if border_width is not None else None,
            False,
        ),
        (
            "border_color",
            "border_color",
            format_color_class("border", border_color) if border_color else None,
            "borderColor",
            format_color_style(border_color) if border_color else None,
            False,
        ),
        (
            "border_radius",
            "radius",
            format_radius_class(radius) if radius is not None else None,
            "borderRadius",
            _inline_length(radius),
            radius is not None and _inline_length(radius) is None,
        ),
        (
            "text_color",
            "text_color",
            format_color_class("text", text_color) if text_color else None,
            "color",
            format_color_style(text_color) if text_color else None,
            False,
        ),
        (
            "font_size",
            "font_size",
            format_font_size_class(font_size) if font_size is not None else None,
            "fontSize",
            _inline_length(font_size),
            font_size is not None and _inline_length(font_size) is None,
        ),
        (
            "font_weight",
            "font_weight",
            format_font_weight_class(font_weight) if font_weight is not None else None,
            "fontWeight",
            _inline_weight(font_weight),
            font_weight is not None and _inline_weight(font_weight) is None,
        ),
    ]
    plan = [step for step in plan if step[0] in provided]

    class_update = build_class_name_update(target.opening, {category: cls for _, category, cls, _, _, _ in plan})
    if class_update.notice:
        logger.debug("className at %d:%d is dynamic; writing inline styles", line, column)

    updates: list[SourceUpdate] = []
    if class_update.applied and class_update.update is not None:
        updates.append(class_update.update)

    style_updates: list[StyleUpdate] = []
    for _, _, _, key, inline, skip in plan:
        if class_update.applied or inline is None and not skip:
            style_updates.append(StyleUpdate(key=key, remove=True))
        elif not skip:
            style_updates.append(StyleUpdate(key=key, value=inline))

    style_update = build_style_update(target.text, target.opening, style_updates)
    if style_update is not None:
        updates.append(style_update)

    if not updates:
        return refuse(source, notice=class_update.notice)

    updated = apply_updates(target.text, updates)
    return EditResult(source=updated, changed=updated != source, notice=class_update.notice)
