"""Rewrite an element's inline ``style={{...}}`` object."""

from __future__ import annotations

import re
from dataclasses import dataclass

from tree_sitter import Node

from snippet_engine.core.ast import SourceText, SourceUpdate, named_children, property_key_name
from snippet_engine.core.jsx import expression_content, find_attribute

_TRAILING_COMMA = re.compile(r"\s*,\s*$")


@dataclass(frozen=True)
class StyleUpdate:
    """Set ``key`` to ``value``, or drop it when ``remove`` is set."""

    key: str
    value: str | None = None
    remove: bool = False

    @property
    def has_value(self) -> bool:
        return not self.remove and self.value is not None

    def entry(self) -> str:
        return f'{self.key}: "{self.value}"'


@dataclass
class ObjectRewrite:
    value: str
    removed_keys: bool
    is_empty: bool


def insertion_point(opening: Node) -> int:
    """Byte offset just before ``>`` or ``/>`` of an opening tag."""
    offset = 2 if opening.type == "jsx_self_closing_element" else 1
    return max(0, opening.end_byte - offset)


def build_updated_object(text: SourceText, obj: Node, updates: list[StyleUpdate]) -> ObjectRewrite | None:
    """Merge ``updates`` into an object literal, keeping untouched entries verbatim.

    Returns ``None`` when nothing would change.
    """
    pending = {update.key: update for update in updates}
    entries: list[str] = []
    updated = False
    removed_keys = False

    for prop in named_children(obj):
        if prop.type == "pair":
            key = property_key_name(prop.child_by_field_name("key"))
            update = pending.pop(key, None) if key else None
            if update is not None:
                if update.remove:
                    updated = removed_keys = True
                    continue
                if update.value is not None:
                    entries.append(update.entry())
                    updated = True
                    continue
        raw = _TRAILING_COMMA.sub("", text.node_source(prop))
        if raw:
            entries.append(raw)

    for update in pending.values():
        if update.remove:
            removed_keys = True
        elif update.value is not None:
            entries.append(update.entry())
            updated = True

    if not updated and not removed_keys:
        return None

    if "\n" in text.node_source(obj):
        indent = text.indentation_at(obj.start_byte)
        inner = f"{indent}  "
        joined = ",\n".join(f"{inner}{entry}" for entry in entries)
        value = f"{{\n{joined}\n{indent}}}"
    else:
        value = f"{{ {', '.join(entries)} }}"
    return ObjectRewrite(value=value, removed_keys=removed_keys, is_empty=not entries)


def build_style_update(text: SourceText, opening: Node, updates: list[StyleUpdate]) -> SourceUpdate | None:
    """The single source edit that applies ``updates`` to the ``style`` attribute."""
    attribute = find_attribute(opening, "style")
    inline_entries = [update.entry() for update in updates if update.has_value]
    inline_style = f"style={{{{ {', '.join(inline_entries)} }}}}" if inline_entries else None

    if attribute is None:
        if inline_style is None:
            return None
        at = insertion_point(opening)
        return SourceUpdate(at, at, f" {inline_style}")

    def replace_attribute() -> SourceUpdate:
        return SourceUpdate(attribute.start_byte, attribute.end_byte, inline_style or "")

    children = named_children(attribute)
    container = children[1] if len(children) > 1 else None
    expression = expression_content(container)
    if expression is None:
        return replace_attribute()

    if expression.type == "object":
        rewrite = build_updated_object(text, expression, updates)
        if rewrite is None:
            return None
        if rewrite.is_empty and rewrite.removed_keys:
            return SourceUpdate(attribute.start_byte, attribute.end_byte, "")
        return SourceUpdate(expression.start_byte, expression.end_byte, rewrite.value)

    if expression.type == "null":
        return replace_attribute()

    if not inline_entries:
        return None
    spread = text.node_source(expression).strip()
    return SourceUpdate(expression.start_byte, expression.end_byte, f"{{ ...{spread}, {', '.join(inline_entries)} }}")
