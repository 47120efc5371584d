"""Derive a props schema and default values from exported components.

Props are read from the first parameter of each exported function: either an
object destructuring pattern, or a plain identifier that the body destructures
(``const { title } = props``). Defaults come from literal initializers, types
from the defaults or from the parameter's TypeScript annotation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from tree_sitter import Node

from snippet_engine.core.ast import (
    MISSING,
    TypeInfoMap,
    build_type_map,
    extract_literal,
    identifier_name,
    infer_prop_type,
    iter_nodes,
    named_children,
    node_text,
    property_key_name,
    resolve_param_type_info,
    unwrap_expression,
)
from snippet_engine.core.exports import (
    DEFAULT_EXPORT,
    build_function_map,
    collect_export_names,
    get_exported_function,
)
from snippet_engine.models import DerivedProps, PropDefinition, PropsSchema

_PROPS_FALLBACK_OPERATORS = ("??", "||", "&&")


@dataclass
class PropEntry:
    definition: PropDefinition
    default: Any = MISSING


def to_label(key: str) -> str:
    """``headlineText`` -> ``Headline Text``; ``cta_label`` -> ``Cta label``."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", key)
    spaced = re.sub(r"[_-]+", " ", spaced).strip()
    if not spaced:
        return key
    return spaced[0].upper() + spaced[1:]


def first_parameter(function: Node) -> Node | None:
    single = function.child_by_field_name("parameter")
    if single is not None:
        return single
    parameters = function.child_by_field_name("parameters")
    if parameters is None:
        return None
    children = named_children(parameters)
    return children[0] if children else None


def _parameter_pattern(parameter: Node) -> Node | None:
    if parameter.type in ("required_parameter", "optional_parameter"):
        return parameter.child_by_field_name("pattern")
    if parameter.type == "assignment_pattern":
        return parameter.child_by_field_name("left")
    return parameter


def object_pattern_parameter(function: Node) -> Node | None:
    parameter = first_parameter(function)
    if parameter is None:
        return None
    pattern = _parameter_pattern(parameter)
    return pattern if pattern is not None and pattern.type == "object_pattern" else None


def identifier_parameter(function: Node) -> str | None:
    parameter = first_parameter(function)
    if parameter is None:
        return None
    return identifier_name(_parameter_pattern(parameter))


def _is_props_reference(node: Node | None, props_name: str) -> bool:
    expr = unwrap_expression(node)
    if expr is None:
        return False
    if identifier_name(expr) == props_name:
        return True
    if expr.type == "binary_expression":
        operator = node_text(expr.child_by_field_name("operator"))
        if operator in _PROPS_FALLBACK_OPERATORS:
            return identifier_name(expr.child_by_field_name("left")) == props_name
    return False


def collect_body_patterns(body: Node | None, props_name: str) -> list[Node]:
    """Object patterns in ``body`` that destructure the props identifier."""
    patterns: list[Node] = []
    if body is None:
        return patterns
    for node in iter_nodes(body):
        if node.type == "variable_declarator":
            name = node.child_by_field_name("name")
            if name is not None and name.type == "object_pattern" and _is_props_reference(
                node.child_by_field_name("value"), props_name
            ):
                patterns.append(name)
        elif node.type == "assignment_expression":
            left = node.child_by_field_name("left")
            if left is not None and left.type == "object_pattern" and _is_props_reference(
                node.child_by_field_name("right"), props_name
            ):
                patterns.append(left)
    return patterns


def _pattern_property(prop: Node) -> tuple[str | None, Any, Node | None]:
    """Split one destructured property into ``(key, default, target pattern)``."""
    if prop.type == "shorthand_property_identifier_pattern":
        return node_text(prop), MISSING, prop
    if prop.type == "object_assignment_pattern":
        left = prop.child_by_field_name("left")
        key = property_key_name(left) if left is not None and left.type == "shorthand_property_identifier_pattern" else None
        return key, extract_literal(prop.child_by_field_name("right")), left
    if prop.type == "pair_pattern":
        key_node = prop.child_by_field_name("key")
        key = property_key_name(key_node) if key_node is not None and key_node.type != "computed_property_name" else None
        value = prop.child_by_field_name("value")
        if value is not None and value.type == "assignment_pattern":
            return key, extract_literal(value.child_by_field_name("right")), value.child_by_field_name("left")
        return key, MISSING, value
    return None, MISSING, None


def nested_defaults(pattern: Node | None) -> dict[str, Any]:
    """Defaults declared inside a nested object pattern, recursively."""
    result: dict[str, Any] = {}
    if pattern is None or pattern.type != "object_pattern":
        return result
    for prop in named_children(pattern):
        key, default, target = _pattern_property(prop)
        if key is None:
            continue
        if default is not MISSING:
            result[key] = default
            continue
        if target is not None and target.type == "object_pattern":
            nested = nested_defaults(target)
            if nested:
                result[key] = nested
    return result


def derive_from_pattern(pattern: Node, type_info: TypeInfoMap) -> dict[str, PropEntry]:
    entries: dict[str, PropEntry] = {}
    for prop in named_children(pattern):
        key, default, target = _pattern_property(prop)
        if key is None:
            continue
        info = type_info.get(key)
        target_type = target.type if target is not None else None

        derived_default = default
        if target_type == "object_pattern" and isinstance(default, dict):
            derived_default = {**default, **nested_defaults(target)}

        if default is not MISSING:
            inferred = infer_prop_type(default)
        else:
            inferred = info.type if info is not None else "string"
        if target_type == "object_pattern":
            inferred = "object"
        elif target_type == "array_pattern":
            inferred = "array"

        definition = PropDefinition(key=key, label=to_label(key), type=inferred)
        if info is not None and info.enum_values:
            definition.enum_values = list(info.enum_values)
        optional = info.optional if info is not None else False
        definition.required = (not optional) if derived_default is MISSING else False
        entries[key] = PropEntry(definition=definition, default=derived_default)
    return entries


def merge_entries(target: dict[str, PropEntry], source: dict[str, PropEntry]) -> None:
    """Fold ``source`` into ``target`` without losing defaults, enums or specific types."""
    for key, entry in source.items():
        existing = target.get(key)
        if existing is None:
            target[key] = entry
            continue
        if existing.default is MISSING and entry.default is not MISSING:
            existing.default = entry.default
            existing.definition.required = False
        if existing.definition.type == "string" and entry.definition.type != "string":
            existing.definition.type = entry.definition.type
        if not existing.definition.enum_values and entry.definition.enum_values:
            existing.definition.enum_values = entry.definition.enum_values
        if existing.definition.required and not entry.definition.required:
            existing.definition.required = False


def _component_entries(function: Node, type_map: dict[str, TypeInfoMap]) -> dict[str, PropEntry] | None:
    patterns: list[Node] = []
    pattern = object_pattern_parameter(function)
    if pattern is not None:
        patterns.append(pattern)
    else:
        props_name = identifier_parameter(function)
        if props_name:
            patterns = collect_body_patterns(function.child_by_field_name("body"), props_name)
    if not patterns:
        return None

    parameter = first_parameter(function)
    type_info = resolve_param_type_info(parameter, type_map)
    entries: dict[str, PropEntry] = {}
    for found in patterns:
        merge_entries(entries, derive_from_pattern(found, type_info))
    return entries


def _to_result(entries: dict[str, PropEntry], duplicate_keys: list[str] | None = None) -> DerivedProps:
    props: list[PropDefinition] = []
    defaults: dict[str, Any] = {}
    for entry in entries.values():
        props.append(entry.definition)
        if entry.default is not MISSING:
            defaults[entry.definition.key] = entry.default
    return DerivedProps(
        props_schema=PropsSchema(props=props),
        default_props=defaults,
        duplicate_keys=duplicate_keys or [],
    )


def derive_props(root: Node) -> DerivedProps:
    """Merge the props of every exported component in a parsed module."""
    functions = build_function_map(root)
    type_map = build_type_map(root)
    merged: dict[str, PropEntry] = {}
    key_counts: dict[str, int] = {}

    for export_name in collect_export_names(root):
        function = get_exported_function(root, export_name, functions)
        if function is None:
            continue
        entries = _component_entries(function, type_map)
        if not entries:
            continue
        for key in entries:
            key_counts[key] = key_counts.get(key, 0) + 1
        merge_entries(merged, entries)

    duplicates = sorted(key for key, count in key_counts.items() if count > 1)
    return _to_result(merged, duplicates)


def derive_props_for_export(root: Node, export_name: str = DEFAULT_EXPORT) -> DerivedProps:
    function = get_exported_function(root, export_name)
    if function is None:
        return DerivedProps()
    entries = _component_entries(function, build_type_map(root))
    return _to_result(entries or {})


def describe_prop(definition: PropDefinition) -> str:
    """One-line summary used by the CLI table."""
    parts = [definition.type]
    if definition.enum_values:
        parts.append("|".join(definition.enum_values))
    if definition.required:
        parts.append("required")
    return " ".join(parts)
