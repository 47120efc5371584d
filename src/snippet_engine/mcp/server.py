"""FastMCP server exposing the snippet engine as tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from snippet_engine.core.analyze import analyze as _analyze
from snippet_engine.core.component_tree import build_component_tree
from snippet_engine.core.insert_child import insert_child as _insert_child
from snippet_engine.core.inspect import InspectLookup, build_inspect_index
from snippet_engine.core.layout import apply_translate as _apply_translate
from snippet_engine.core.parser import get_parser_loader
from snippet_engine.core.style import apply_style_update
from snippet_engine.core.style_read import read_style as _read_style
from snippet_engine.core.tailwind import TailwindBuilder
from snippet_engine.models import StyleFields


def create_mcp_server(tailwind: TailwindBuilder | None = None) -> FastMCP:
    """Create a FastMCP server; ``tailwind`` overrides the shared Tailwind builder."""

    mcp = FastMCP(
        "snippet-engine",
        instructions=(
            "Analyze TSX component snippets and edit them at a 1-based line/column: "
            "insert children, read and restyle elements, and move them."
        ),
    )

    @mcp.tool()
    async def analyze(source: str, include_tailwind: bool = True, include_inspect: bool = False) -> dict[str, Any]:
        """Exports, props schema, default props, security issues and Tailwind CSS of a snippet."""
        result = await _analyze(
            source,
            include_tailwind=include_tailwind,
            include_inspect=include_inspect,
            tailwind=tailwind,
        )
        return result.model_dump(by_alias=True)

    @mcp.tool()
    async def insert_child(source: str, line: int, column: int, jsx: str) -> dict[str, Any]:
        """Insert JSX as the last child of the element at line/column."""
        await get_parser_loader().load()
        return _insert_child(source, line, column, jsx).model_dump(by_alias=True)

    @mcp.tool()
    async def apply_style(
        source: str,
        line: int,
        column: int,
        background_color: str | None = None,
        border_width: float | None = None,
        border_color: str | None = None,
        border_radius: float | str | None = None,
        text_color: str | None = None,
        font_size: float | str | None = None,
        font_weight: float | str | None = None,
        clear: list[str] | None = None,
    ) -> dict[str, Any]:
        """Set style fields on the element at line/column.

        Omitted fields are left alone; names listed in ``clear`` (e.g.
        ``["background_color"]``) are removed.
        """
        values: dict[str, Any] = {
            name: value
            for name, value in (
                ("background_color", background_color),
                ("border_width", border_width),
                ("border_color", border_color),
                ("border_radius", border_radius),
                ("text_color", text_color),
                ("font_size", font_size),
                ("font_weight", font_weight),
            )
            if value is not None
        }
        for name in clear or []:
            if name in StyleFields.model_fields:
                values[name] = None
        await get_parser_loader().load()
        return apply_style_update(source, line, column, StyleFields(**values)).model_dump(by_alias=True)

    @mcp.tool()
    async def read_style(source: str, line: int, column: int) -> dict[str, Any]:
        """Current style fields of the element at line/column and whether they can be edited."""
        await get_parser_loader().load()
        return _read_style(source, line, column).model_dump(by_alias=True)

    @mcp.tool()
    async def apply_translate(
        source: str,
        line: int,
        column: int,
        dx: float,
        dy: float,
        width: float | None = None,
        height: float | None = None,
    ) -> dict[str, Any]:
        """Move (and optionally resize) the element at line/column via its inline style."""
        await get_parser_loader().load()
        return _apply_translate(source, line, column, dx, dy, width, height).model_dump(by_alias=True)

    @mcp.tool()
    async def component_tree(source: str, export_name: str | None = None) -> list[dict[str, Any]]:
        """Element tree rendered by an export; the default export when export_name is omitted."""
        await get_parser_loader().load()
        return [node.model_dump(by_alias=True) for node in build_component_tree(source, export_name)]

    @mcp.tool()
    async def inspect(source: str, line: int, column: int = 1) -> dict[str, Any] | None:
        """The JSX element (name, range, text ranges) at line/column, or null."""
        await get_parser_loader().load()
        index = build_inspect_index(source)
        if index is None:
            return None
        match = InspectLookup(index).find_match(line, column)
        return match.model_dump(by_alias=True) if match is not None else None

    return mcp
