from snippet_engine.core.analyze import analyze
from snippet_engine.core.component_tree import build_component_tree
from snippet_engine.core.exports import component_source_map, list_component_exports, remove_component_export
from snippet_engine.core.files import expand_source, parse_files, reset_scan_cache, scan, serialize_files
from snippet_engine.core.hashing import hash_source
from snippet_engine.core.insert_child import insert_child
from snippet_engine.core.inspect import InspectLookup, build_inspect_index
from snippet_engine.core.layout import apply_translate
from snippet_engine.core.parser import set_parser_loader
from snippet_engine.core.props import derive_props, derive_props_for_export
from snippet_engine.core.style import apply_style_update
from snippet_engine.core.style_read import read_style
from snippet_engine.core.tailwind import set_tailwind_builder
from snippet_engine.errors import (
    ParserLoadError,
    ParserLoadTimeoutError,
    SnippetEngineError,
    TailwindCompilerError,
    TailwindError,
    TailwindLimitError,
)
from snippet_engine.models import AnalyzeResult, ComponentTreeNode, EditResult, InspectIndex, StyleFields, StyleState


def reset_caches() -> None:
    """Drop every process-level cache (parser, file scan, Tailwind builder)."""
    set_parser_loader(None)
    reset_scan_cache()
    set_tailwind_builder(None)


__all__ = [
    "AnalyzeResult",
    "ComponentTreeNode",
    "EditResult",
    "InspectIndex",
    "InspectLookup",
    "ParserLoadError",
    "ParserLoadTimeoutError",
    "SnippetEngineError",
    "StyleFields",
    "StyleState",
    "TailwindCompilerError",
    "TailwindError",
    "TailwindLimitError",
    "analyze",
    "apply_style_update",
    "apply_translate",
    "build_component_tree",
    "build_inspect_index",
    "component_source_map",
    "derive_props",
    "derive_props_for_export",
    "expand_source",
    "hash_source",
    "insert_child",
    "list_component_exports",
    "parse_files",
    "read_style",
    "remove_component_export",
    "reset_caches",
    "scan",
    "serialize_files",
]
