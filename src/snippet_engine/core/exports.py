"""Enumerate and resolve the components a snippet exports."""

from __future__ import annotations

import re
from collections.abc import Iterator

from tree_sitter import Node

from snippet_engine.core.ast import (
    SourceText,
    SourceUpdate,
    apply_updates,
    has_child_type,
    identifier_name,
    named_children,
    node_text,
    unwrap_expression,
)
from snippet_engine.core.parser import parse_source
from snippet_engine.models import ComponentExport, RemoveExportResult

DEFAULT_EXPORT = "default"

VALID_EXPORT_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
RESERVED_EXPORT_NAMES = frozenset({"__proto__", "prototype", "constructor", "default"})

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
    }
)
_VARIABLE_DECLARATIONS = ("lexical_declaration", "variable_declaration")

FunctionMap = dict[str, Node]


def is_valid_export_name(name: str) -> bool:
    return bool(VALID_EXPORT_NAME.match(name)) and name not in RESERVED_EXPORT_NAMES


def is_function_node(node: Node | None) -> bool:
    return node is not None and node.type in FUNCTION_TYPES


def is_default_export(statement: Node) -> bool:
    return statement.type == "export_statement" and has_child_type(statement, "default")


def _export_payload(statement: Node) -> Node | None:
    return statement.child_by_field_name("declaration") or statement.child_by_field_name("value")


def _declarators(declaration: Node) -> list[Node]:
    return [child for child in named_children(declaration) if child.type == "variable_declarator"]


def _top_level_declarations(root: Node) -> Iterator[Node]:
    """Top-level declarations, looking through ``export`` wrappers."""
    for statement in named_children(root):
        if statement.type == "export_statement":
            payload = statement.child_by_field_name("declaration")
            if payload is not None:
                yield payload
            continue
        yield statement


def _lookup_local_function(root: Node, name: str) -> Node | None:
    for declaration in _top_level_declarations(root):
        if declaration.type in ("function_declaration", "generator_function_declaration"):
            if node_text(declaration.child_by_field_name("name")) == name:
                return declaration
        elif declaration.type in _VARIABLE_DECLARATIONS:
            for declarator in _declarators(declaration):
                if identifier_name(declarator.child_by_field_name("name")) != name:
                    continue
                value = unwrap_expression(declarator.child_by_field_name("value"))
                if is_function_node(value):
                    return value
    return None


def unwrap_export_target(node: Node | None, root: Node, depth: int = 0) -> Node | None:
    """Follow one identifier or call-expression hop (``memo(Card)``) to a function node."""
    node = unwrap_expression(node)
    if node is None or depth > 8:
        return None
    if is_function_node(node):
        return node
    if node.type == "identifier":
        return _lookup_local_function(root, node_text(node))
    if node.type == "call_expression":
        arguments = node.child_by_field_name("arguments")
        first = named_children(arguments)[0] if arguments is not None and named_children(arguments) else None
        if first is not None:
            return unwrap_export_target(first, root, depth + 1)
    return None


def build_function_map(root: Node) -> FunctionMap:
    """Map local binding names to the function nodes they resolve to."""
    functions: FunctionMap = {}
    for statement in named_children(root):
        if is_default_export(statement):
            declaration = statement.child_by_field_name("declaration")
            if declaration is not None and declaration.type == "function_declaration":
                name = node_text(declaration.child_by_field_name("name"))
                if name:
                    functions[name] = declaration
            continue
        declaration = statement.child_by_field_name("declaration") if statement.type == "export_statement" else statement
        if declaration is None:
            continue
        if declaration.type in ("function_declaration", "generator_function_declaration"):
            name = node_text(declaration.child_by_field_name("name"))
            if name:
                functions[name] = declaration
        elif declaration.type in _VARIABLE_DECLARATIONS:
            for declarator in _declarators(declaration):
                name = identifier_name(declarator.child_by_field_name("name"))
                value = declarator.child_by_field_name("value")
                if not name or value is None:
                    continue
                resolved = unwrap_export_target(value, root)
                if resolved is not None:
                    functions[name] = resolved
    return functions


def _default_export_payload(root: Node) -> Node | None:
    for statement in named_children(root):
        if is_default_export(statement):
            return _export_payload(statement)
    return None


def default_export_display_name(declaration: Node | None, root: Node, depth: int = 0) -> str | None:
    declaration = unwrap_expression(declaration)
    if declaration is None or depth > 8:
        return None
    if declaration.type == "identifier":
        return node_text(declaration)
    if declaration.type in ("function_declaration", "function_expression", "function"):
        name = declaration.child_by_field_name("name")
        if name is not None:
            return node_text(name)
    if declaration.type == "call_expression":
        arguments = declaration.child_by_field_name("arguments")
        args = named_children(arguments) if arguments is not None else []
        if args:
            return default_export_display_name(args[0], root, depth + 1)
    resolved = unwrap_export_target(declaration, root)
    if resolved is not None and resolved.type == "function_declaration":
        name = resolved.child_by_field_name("name")
        return node_text(name) if name is not None else None
    return None


def _specifier_names(specifier: Node) -> tuple[str | None, str | None]:
    local = specifier.child_by_field_name("name")
    alias = specifier.child_by_field_name("alias")
    local_name = node_text(local) if local is not None else None
    exported = node_text(alias) if alias is not None else local_name
    return local_name, exported


def _named_exports(root: Node, functions: FunctionMap) -> Iterator[str]:
    for statement in named_children(root):
        if statement.type != "export_statement" or is_default_export(statement):
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type in ("function_declaration", "generator_function_declaration"):
                name = node_text(declaration.child_by_field_name("name"))
                if name and is_valid_export_name(name):
                    yield name
            elif declaration.type in _VARIABLE_DECLARATIONS:
                for declarator in _declarators(declaration):
                    name = identifier_name(declarator.child_by_field_name("name"))
                    if not name or not is_valid_export_name(name):
                        continue
                    value = unwrap_expression(declarator.child_by_field_name("value"))
                    if is_function_node(value) or name in functions:
                        yield name
        for clause in named_children(statement):
            if clause.type != "export_clause":
                continue
            for specifier in named_children(clause):
                if specifier.type != "export_specifier":
                    continue
                local_name, exported = _specifier_names(specifier)
                if exported and local_name and is_valid_export_name(exported) and local_name in functions:
                    yield exported


def list_component_exports(root: Node) -> list[ComponentExport]:
    """Exported components, the default export first when there is one."""
    entries: list[ComponentExport] = []
    seen: set[str] = set()

    def add(export_name: str, label: str, is_default: bool) -> None:
        if export_name in seen:
            return
        seen.add(export_name)
        entries.append(ComponentExport(export_name=export_name, label=label, is_default=is_default))

    payload = _default_export_payload(root)
    if payload is not None:
        display_name = default_export_display_name(payload, root)
        add(DEFAULT_EXPORT, f"Default ({display_name})" if display_name else "Default export", True)

    for name in _named_exports(root, build_function_map(root)):
        add(name, name, False)
    return entries


def collect_export_names(root: Node) -> list[str]:
    return [entry.export_name for entry in list_component_exports(root)]


def get_exported_function(root: Node, export_name: str = DEFAULT_EXPORT, functions: FunctionMap | None = None) -> Node | None:
    """Resolve the function node behind a default or named export."""
    if not export_name or export_name == DEFAULT_EXPORT:
        return unwrap_export_target(_default_export_payload(root), root)

    functions = functions if functions is not None else build_function_map(root)
    for statement in named_children(root):
        if statement.type != "export_statement" or is_default_export(statement):
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type in ("function_declaration", "generator_function_declaration"):
                if node_text(declaration.child_by_field_name("name")) == export_name:
                    return declaration
            elif declaration.type in _VARIABLE_DECLARATIONS:
                for declarator in _declarators(declaration):
                    if identifier_name(declarator.child_by_field_name("name")) != export_name:
                        continue
                    value = unwrap_expression(declarator.child_by_field_name("value"))
                    if is_function_node(value):
                        return value
                    if export_name in functions:
                        return functions[export_name]
        for clause in named_children(statement):
            if clause.type != "export_clause":
                continue
            for specifier in named_children(clause):
                local_name, exported = _specifier_names(specifier)
                if exported == export_name and local_name in functions:
                    return functions[local_name]
    return None


def component_source_map(text: SourceText, root: Node) -> dict[str, str]:
    """Map each named export declaration to its trimmed source text."""
    sources: dict[str, str] = {}
    for statement in named_children(root):
        if statement.type != "export_statement" or is_default_export(statement):
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is None:
            continue
        name: str | None = None
        if declaration.type == "function_declaration":
            name = node_text(declaration.child_by_field_name("name"))
        elif declaration.type in _VARIABLE_DECLARATIONS:
            declarators = _declarators(declaration)
            if len(declarators) != 1:
                continue
            name = identifier_name(declarators[0].child_by_field_name("name"))
        if name and is_valid_export_name(name):
            sources[name] = text.node_source(statement).strip()
    return sources


def _removal_range(text: SourceText, start: int, end: int) -> tuple[int, int]:
    """Widen a list item's range to swallow its separating comma."""
    after = text.data[end:]
    stripped_after = after.lstrip()
    if stripped_after.startswith(b","):
        return start, end + (len(after) - len(stripped_after)) + 1
    before = text.data[:start].rstrip()
    if before.endswith(b","):
        return len(before) - 1, end
    return start, end


def remove_component_export(source: str, export_name: str) -> RemoveExportResult:
    """Delete a named export (whole statement, or one declarator/specifier of a list)."""
    if not source.strip():
        return RemoveExportResult(source=source, removed=False, reason="Source is empty.")
    if not is_valid_export_name(export_name):
        return RemoveExportResult(source=source, removed=False, reason="Default exports cannot be removed.")

    text = SourceText(source)
    root = parse_source(source).root_node

    def removed(start: int, end: int) -> RemoveExportResult:
        return RemoveExportResult(source=apply_updates(text, [SourceUpdate(start, end, "")]), removed=True)

    for statement in named_children(root):
        if statement.type != "export_statement" or is_default_export(statement):
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type == "function_declaration":
                if node_text(declaration.child_by_field_name("name")) == export_name:
                    return removed(statement.start_byte, statement.end_byte)
            elif declaration.type in _VARIABLE_DECLARATIONS:
                declarators = _declarators(declaration)
                matching = [d for d in declarators if identifier_name(d.child_by_field_name("name")) == export_name]
                if len(matching) == 1:
                    if len(declarators) == 1:
                        return removed(statement.start_byte, statement.end_byte)
                    return removed(*_removal_range(text, matching[0].start_byte, matching[0].end_byte))

        if statement.child_by_field_name("source") is not None:
            continue
        for clause in named_children(statement):
            if clause.type != "export_clause":
                continue
            specifiers = [child for child in named_children(clause) if child.type == "export_specifier"]
            match = next((s for s in specifiers if _specifier_names(s)[1] == export_name), None)
            if match is None:
                continue
            if len(specifiers) == 1:
                return removed(statement.start_byte, statement.end_byte)
            return removed(*_removal_range(text, match.start_byte, match.end_byte))

    return RemoveExportResult(
        source=source,
        removed=False,
        reason=f'Export "{export_name}" could not be removed automatically.',
    )
