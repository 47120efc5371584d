"""Tests for the MCP server tool definitions."""

from __future__ import annotations

import inspect
from typing import Any

import pytest
from fastmcp import Client

from snippet_engine.core.tailwind import TailwindBuilder
from snippet_engine.mcp.server import create_mcp_server

ONE_LINE = "export const A = () => <div></div>"


async def _tool(server: Any, name: str) -> Any:
    tool = await server.get_tool(name)
    assert tool is not None
    return tool.fn


async def _call(server: Any, name: str, **arguments: Any) -> Any:
    return await (await _tool(server, name))(**arguments)


class TestMcpServerCreation:
    def test_creates_server(self) -> None:
        server = create_mcp_server()
        assert server is not None
        assert server.name == "snippet-engine"

    @pytest.mark.asyncio
    async def test_server_has_tools(self) -> None:
        async with Client(create_mcp_server()) as client:
            tool_names = {t.name for t in await client.list_tools()}
        assert tool_names == {
            "analyze",
            "insert_child",
            "apply_style",
            "read_style",
            "apply_translate",
            "inspect",
            "component_tree",
        }

    @pytest.mark.asyncio
    async def test_style_fields_default_to_untouched(self) -> None:
        sig = inspect.signature(await _tool(create_mcp_server(), "apply_style"))
        assert sig.parameters["background_color"].default is None
        assert sig.parameters["clear"].default is None


class TestMcpTools:
    @pytest.mark.asyncio
    async def test_analyze(self, tailwind_builder: TailwindBuilder) -> None:
        server = create_mcp_server(tailwind_builder)
        result = await _call(server, "analyze", source='export default () => <div className="m-1" />')
        assert result["exports"][0]["label"] == "Default export"
        assert result["tailwindCss"] == ".m-1 {}"
        assert result["inspectIndexByFile"] is None

    @pytest.mark.asyncio
    async def test_insert_child(self) -> None:
        result = await _call(create_mcp_server(), "insert_child", source=ONE_LINE, line=1, column=24, jsx="<b />")
        assert result["changed"] is True
        assert result["insertedAt"] == {"line": 2, "column": 3}

    @pytest.mark.asyncio
    async def test_apply_style_with_clear(self) -> None:
        source = 'export const A = () => <div className="p-2 bg-red-500"></div>'
        result = await _call(
            create_mcp_server(),
            "apply_style",
            source=source,
            line=1,
            column=24,
            text_color="white",
            clear=["background_color", "bogus"],
        )
        assert result["source"] == 'export const A = () => <div className="p-2 text-white"></div>'

    @pytest.mark.asyncio
    async def test_apply_translate(self) -> None:
        result = await _call(create_mcp_server(), "apply_translate", source=ONE_LINE, line=1, column=24, dx=1, dy=2)
        assert result["source"] == 'export const A = () => <div style={{ translate: "1px 2px" }}></div>'

    @pytest.mark.asyncio
    async def test_inspect(self) -> None:
        inspect_tool = await _tool(create_mcp_server(), "inspect")
        match = await inspect_tool(source=ONE_LINE, line=1, column=30)
        assert match is not None
        assert match["elementName"] == "div"
        assert await inspect_tool(source=ONE_LINE, line=3) is None

    @pytest.mark.asyncio
    async def test_read_style(self) -> None:
        source = 'export const A = () => <div className="bg-red-500 rounded-lg"></div>'
        result = await _call(create_mcp_server(), "read_style", source=source, line=1, column=24)
        assert result["found"] is True
        assert result["classNameKind"] == "static"
        assert result["properties"]["backgroundColor"] == {"present": True, "value": "red-500"}
        assert result["properties"]["borderRadius"] == {"present": True, "value": "lg"}
        assert result["properties"]["fontSize"] == {"present": False, "value": None}

    @pytest.mark.asyncio
    async def test_component_tree(self) -> None:
        source = 'export default () => <div className="m-1"><b /></div>'
        result = await _call(create_mcp_server(), "component_tree", source=source)
        assert result[0]["className"] == "m-1"
        assert [child["id"] for child in result[0]["children"]] == ["0.0"]
        assert await _call(create_mcp_server(), "component_tree", source=source, export_name="Missing") == []
