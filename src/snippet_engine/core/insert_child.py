"""Insert a JSX fragment as the last child of the element under the cursor."""

from __future__ import annotations

import re

from snippet_engine.core.ast import SourceUpdate, apply_updates
from snippet_engine.core.editing import EditTarget, locate_element, refuse
from snippet_engine.core.jsx import closing_element, element_name
from snippet_engine.models import EditResult, SourcePoint

VOID_HTML_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)

DISALLOWED_SVG_TAGS = frozenset(
    {
        "svg",
        "path",
        "rect",
        "circle",
        "line",
        "polyline",
        "polygon",
        "g",
        "defs",
        "use",
        "text",
        "tspan",
        "mask",
        "clipPath",
        "pattern",
        "linearGradient",
        "radialGradient",
        "stop",
    }
)

INDENT_UNIT = "  "


def indent_block(value: str, indent: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        return ""
    return "\n".join(f"{indent}{line.rstrip()}" for line in re.split(r"\r?\n", trimmed))


def accepts_children(name: str | None) -> bool:
    """Lower-case intrinsic void and SVG primitive tags cannot take inserted children."""
    if not name or not name[0].islower():
        return True
    return name not in VOID_HTML_TAGS and name not in DISALLOWED_SVG_TAGS


def insert_child(source: str, line: int, column: int, jsx: str) -> EditResult:
    if not source.strip():
        return refuse(source, "Source is empty.")
    if not jsx.strip():
        return refuse(source, "Nothing to insert.")

    target = locate_element(source, line, column)
    if not isinstance(target, EditTarget):
        return target

    closing = closing_element(target.element)
    if target.element.type == "jsx_self_closing_element" or closing is None or closing.is_missing:
        return refuse(source, "Selected element does not accept children.")

    name = element_name(target.element)
    if not accepts_children(name):
        return refuse(source, f"Cannot insert children into <{name}>.")

    text = target.text
    opening = target.opening
    open_indent = text.indentation_at(opening.start_byte)
    child_indent = open_indent + INDENT_UNIT
    child = indent_block(jsx, child_indent)
    open_line = opening.start_point[0] + 1
    close_line = closing.start_point[0] + 1

    if open_line == close_line:
        between = text.slice(opening.end_byte, closing.start_byte)
        if between.strip():
            return refuse(source, "Inline children are not supported yet.")
        update = SourceUpdate(closing.start_byte, closing.start_byte, f"\n{child}\n{open_indent}")
        inserted_line = open_line + 1
    else:
        line_start = text.line_start(closing.start_byte)
        update = SourceUpdate(line_start, line_start, f"{child}\n")
        inserted_line = close_line

    updated = apply_updates(text, [update])
    return EditResult(
        source=updated,
        changed=updated != source,
        inserted_at=SourcePoint(line=inserted_line, column=len(child_indent) + 1),
    )
