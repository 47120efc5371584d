"""Static checks that keep snippets away from network, storage and host APIs."""

from __future__ import annotations

from tree_sitter import Node

from snippet_engine.core.ast import SourceText, first_named_child, identifier_name, iter_nodes, string_literal_value
from snippet_engine.models import SecurityIssue

ALLOWED_IMPORTS = frozenset({"react", "react/jsx-runtime"})

BANNED_IMPORT_PREFIXES = (
    "fs",
    "path",
    "child_process",
    "worker_threads",
    "os",
    "net",
    "tls",
    "http",
    "https",
    "dns",
    "bun",
    "process",
)

BANNED_CALLEES = frozenset({"fetch", "eval", "Function", "setTimeout", "setInterval"})
BANNED_MEMBER_CALLEES = frozenset({"fetch", "sendBeacon", "postMessage"})
BANNED_CONSTRUCTORS = frozenset(
    {
        "Function",
        "WebSocket",
        "XMLHttpRequest",
        "EventSource",
        "Worker",
        "SharedWorker",
        "BroadcastChannel",
        "MessageChannel",
    }
)
BANNED_GLOBAL_OBJECTS = frozenset(
    {
        "window",
        "globalThis",
        "self",
        "parent",
        "top",
        "document",
        "navigator",
        "location",
        "history",
        "localStorage",
        "sessionStorage",
        "indexedDB",
        "caches",
        "cookieStore",
        "process",
        "Bun",
    }
)
BANNED_PROPERTIES = frozenset({"cookie"})

_MEMBER_TYPES = ("member_expression", "subscript_expression")


def is_banned_import(value: str) -> bool:
    if value.startswith("node:"):
        return True
    return any(value == prefix or value.startswith(f"{prefix}/") for prefix in BANNED_IMPORT_PREFIXES)


def member_property_name(node: Node) -> str | None:
    if node.type == "member_expression":
        return identifier_name(node.child_by_field_name("property"))
    if node.type == "subscript_expression":
        return string_literal_value(node.child_by_field_name("index"))
    return None


def root_object_name(node: Node) -> str | None:
    current: Node | None = node
    while current is not None and current.type in _MEMBER_TYPES:
        current = current.child_by_field_name("object")
    if current is not None and current.type in ("this", "super"):
        return None
    return identifier_name(current)


class _Collector:
    def __init__(self, text: SourceText) -> None:
        self.text = text
        self.issues: list[SecurityIssue] = []

    def add(self, node: Node, message: str) -> None:
        text_range = self.text.text_range(node)
        self.issues.append(
            SecurityIssue(
                message=message,
                line=text_range.start_line,
                column=text_range.start_column,
                end_line=text_range.end_line,
                end_column=text_range.end_column,
            )
        )

    def check_import(self, node: Node) -> None:
        value = string_literal_value(node.child_by_field_name("source"))
        if not value:
            return
        if is_banned_import(value):
            self.add(node, f"Disallowed import: {value}")
        elif value not in ALLOWED_IMPORTS:
            self.add(node, f"Only React imports are allowed. Found: {value}")

    def check_call(self, node: Node) -> None:
        callee = node.child_by_field_name("function")
        if callee is None:
            return
        if callee.type == "import":
            self.add(node, "Dynamic import() is not allowed in snippets")
            return
        name = identifier_name(callee)
        if name in BANNED_CALLEES:
            self.add(node, f"Disallowed call: {name}()")
        if name == "require":
            arguments = node.child_by_field_name("arguments")
            first = first_named_child(arguments) if arguments is not None else None
            if string_literal_value(first) not in ALLOWED_IMPORTS:
                self.add(node, "Only React require() calls are allowed")
        if callee.type in _MEMBER_TYPES:
            prop = member_property_name(callee)
            if prop in BANNED_MEMBER_CALLEES:
                self.add(node, f"Disallowed call: {prop}()")

    def check_new(self, node: Node) -> None:
        constructor = node.child_by_field_name("constructor")
        if constructor is None:
            return
        name = identifier_name(constructor)
        if name is None and constructor.type in _MEMBER_TYPES:
            name = member_property_name(constructor)
        if name in BANNED_CONSTRUCTORS:
            self.add(node, f"Disallowed constructor: new {name}()")

    def check_member(self, node: Node) -> None:
        root = root_object_name(node)
        if root in BANNED_GLOBAL_OBJECTS:
            self.add(node, f"Disallowed global access: {root}")
        prop = member_property_name(node)
        if prop in BANNED_PROPERTIES:
            self.add(node, f"Disallowed property access: {prop}")


def scan_security(root: Node, text: SourceText) -> list[SecurityIssue]:
    """Report disallowed imports, calls, constructors and global accesses."""
    collector = _Collector(text)
    for node in iter_nodes(root):
        if node.type == "import_statement":
            collector.check_import(node)
        elif node.type == "call_expression":
            collector.check_call(node)
        elif node.type == "new_expression":
            collector.check_new(node)
        elif node.type in _MEMBER_TYPES:
            collector.check_member(node)
    return collector.issues
