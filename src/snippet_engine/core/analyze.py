"""One-shot analysis of a snippet: exports, props, security, Tailwind and inspect data."""

from __future__ import annotations

import logging

from snippet_engine.core.ast import SourceText
from snippet_engine.core.exports import list_component_exports
from snippet_engine.core.files import scan, strip_auto_import_block
from snippet_engine.core.hashing import hash_source
from snippet_engine.core.inspect import build_inspect_index
from snippet_engine.core.parser import get_parser_loader, parse_source
from snippet_engine.core.props import derive_props
from snippet_engine.core.security import scan_security
from snippet_engine.core.tailwind import TailwindBuilder, extract_candidates, get_tailwind_builder
from snippet_engine.errors import TailwindError
from snippet_engine.models import AnalyzeResult, InspectIndex

logger = logging.getLogger(__name__)

MAIN_SOURCE_KEY = "source"

PARSE_ERROR_MESSAGE = "Source contains syntax errors."


def _inspect_indexes(main_source: str, files: dict[str, str]) -> dict[str, InspectIndex]:
    indexes: dict[str, InspectIndex] = {}
    main_index = build_inspect_index(strip_auto_import_block(main_source))
    if main_index is not None:
        indexes[MAIN_SOURCE_KEY] = main_index
    for name, content in files.items():
        index = build_inspect_index(content)
        if index is not None:
            indexes[name] = index
    return indexes


async def analyze(
    source: str,
    include_tailwind: bool = True,
    include_inspect: bool = True,
    tailwind: TailwindBuilder | None = None,
) -> AnalyzeResult:
    """Analyze ``source`` after expanding its virtual files.

    Parse failures produce an empty result with ``parse_error`` set; a parser
    that cannot be loaded raises :class:`~snippet_engine.errors.ParserLoadError`.
    """
    if not source.strip():
        return AnalyzeResult(
            inspect_index_by_file={MAIN_SOURCE_KEY: InspectIndex()} if include_inspect else None,
            line_map_segments=[] if include_inspect else None,
        )

    parser = await get_parser_loader().load()
    scanned = scan(source)
    expanded = scanned.expanded_source
    source_hash = hash_source(expanded, expanded=True)
    tree = parse_source(expanded, parser)
    root = tree.root_node
    if root.has_error:
        logger.warning("Snippet has syntax errors; returning an empty analysis")
        return AnalyzeResult(source_hash=source_hash, parse_error=PARSE_ERROR_MESSAGE)

    derived = derive_props(root)
    result = AnalyzeResult(
        exports=list_component_exports(root),
        props_schema=derived.props_schema,
        default_props=derived.default_props,
        duplicate_keys=derived.duplicate_keys,
        security_issues=scan_security(root, SourceText(expanded)),
        source_hash=source_hash,
    )

    if include_tailwind:
        builder = tailwind or get_tailwind_builder()
        try:
            result.tailwind_css = builder.build(extract_candidates(root))
        except TailwindError as exc:
            logger.warning("Tailwind build failed: %s", exc)
            result.tailwind_error = str(exc)

    if include_inspect:
        result.inspect_index_by_file = _inspect_indexes(scanned.main_source, scanned.files)
        result.line_map_segments = [segment.model_copy() for segment in scanned.line_map_segments]

    return result
