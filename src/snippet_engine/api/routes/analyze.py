from fastapi import APIRouter, Depends

from snippet_engine.api.dependencies import check_source_size, get_loader, get_tailwind
from snippet_engine.api.schemas import (
    AnalyzeRequest,
    ComponentTreeRequest,
    InspectRequest,
    InspectResponse,
    TargetRequest,
)
from snippet_engine.core.analyze import analyze as _analyze
from snippet_engine.core.component_tree import build_component_tree
from snippet_engine.core.inspect import InspectLookup, build_inspect_index
from snippet_engine.core.parser import ParserLoader
from snippet_engine.core.style_read import read_style as _read_style
from snippet_engine.core.tailwind import TailwindBuilder
from snippet_engine.models import AnalyzeResult, ComponentTreeNode, StyleState

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=AnalyzeResult)
async def analyze(
    body: AnalyzeRequest,
    tailwind: TailwindBuilder = Depends(get_tailwind),
) -> AnalyzeResult:
    """Exports, props schema, security issues, Tailwind CSS and inspect data for a snippet."""
    check_source_size(body.source)
    return await _analyze(
        body.source,
        include_tailwind=body.include_tailwind,
        include_inspect=body.include_inspect,
        tailwind=tailwind,
    )


@router.post("/inspect", response_model=InspectResponse)
async def inspect(
    body: InspectRequest,
    loader: ParserLoader = Depends(get_loader),
) -> InspectResponse:
    """Inspect index of a source, plus the element at ``line``/``column`` when given."""
    check_source_size(body.source)
    await loader.load()
    index = build_inspect_index(body.source)
    match = None
    if index is not None and body.line is not None:
        match = InspectLookup(index).find_match(body.line, body.column)
    return InspectResponse(index=index, match=match)


@router.post("/style/read", response_model=StyleState)
async def read_style(
    body: TargetRequest,
    loader: ParserLoader = Depends(get_loader),
) -> StyleState:
    check_source_size(body.source)
    await loader.load()
    return _read_style(body.source, body.line, body.column)


@router.post("/component-tree", response_model=list[ComponentTreeNode])
async def component_tree(
    body: ComponentTreeRequest,
    loader: ParserLoader = Depends(get_loader),
) -> list[ComponentTreeNode]:
    """Element tree rendered by an export (the default export when ``exportName`` is omitted)."""
    check_source_size(body.source)
    await loader.load()
    return build_component_tree(body.source, body.export_name)
