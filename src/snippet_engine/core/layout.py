"""Position and size edits written to the element's inline style."""

from __future__ import annotations

import math

from snippet_engine.core.ast import apply_updates
from snippet_engine.core.editing import EditTarget, locate_element, refuse
from snippet_engine.core.style_attribute import StyleUpdate, build_style_update
from snippet_engine.core.style_classes import format_number
from snippet_engine.models import EditResult


def normalize_offset(value: float) -> float:
    """Round to two decimals, snapping anything within 0.005 of zero to zero."""
    if not math.isfinite(value):
        return 0.0
    rounded = round(value * 100) / 100
    return 0.0 if abs(rounded) < 0.005 else rounded


def normalize_size(value: float) -> float:
    return max(0.0, normalize_offset(value))


def format_translate(x: float, y: float) -> str:
    return f"{format_number(x)}px {format_number(y)}px"


def apply_translate(
    source: str,
    line: int,
    column: int,
    dx: float,
    dy: float,
    width: float | None = None,
    height: float | None = None,
) -> EditResult:
    """Set ``translate: "<x>px <y>px"`` (and optionally width/height) on the element at the cursor."""
    if not source.strip():
        return refuse(source, "Source is empty.")

    target = locate_element(source, line, column)
    if not isinstance(target, EditTarget):
        return target

    x = normalize_offset(dx)
    y = normalize_offset(dy)
    removing = x == 0 and y == 0
    updates = [StyleUpdate(key="translate", remove=True) if removing else StyleUpdate(key="translate", value=format_translate(x, y))]
    if width is not None:
        updates.append(StyleUpdate(key="width", value=f"{format_number(normalize_size(width))}px"))
    if height is not None:
        updates.append(StyleUpdate(key="height", value=f"{format_number(normalize_size(height))}px"))

    update = build_style_update(target.text, target.opening, updates)
    if update is None:
        return refuse(source) if removing else refuse(source, "Unable to update layout styles.")

    updated = apply_updates(target.text, [update])
    return EditResult(source=updated, changed=updated != source)
