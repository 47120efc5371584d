from fastapi import APIRouter, Depends

from snippet_engine.api.dependencies import check_source_size, get_loader
from snippet_engine.api.schemas import InsertChildRequest, StyleRequest, TranslateRequest
from snippet_engine.core.insert_child import insert_child as _insert_child
from snippet_engine.core.layout import apply_translate
from snippet_engine.core.parser import ParserLoader
from snippet_engine.core.style import apply_style_update
from snippet_engine.models import EditResult

router = APIRouter(prefix="/edits", tags=["edits"])


@router.post("/insert-child", response_model=EditResult)
async def insert_child(
    body: InsertChildRequest,
    loader: ParserLoader = Depends(get_loader),
) -> EditResult:
    check_source_size(body.source)
    await loader.load()
    return _insert_child(body.source, body.line, body.column, body.jsx)


@router.post("/style", response_model=EditResult)
async def style(
    body: StyleRequest,
    loader: ParserLoader = Depends(get_loader),
) -> EditResult:
    """Write style fields as Tailwind classes, or inline styles for dynamic class names."""
    check_source_size(body.source)
    await loader.load()
    return apply_style_update(body.source, body.line, body.column, body.style_fields())


@router.post("/translate", response_model=EditResult)
async def translate(
    body: TranslateRequest,
    loader: ParserLoader = Depends(get_loader),
) -> EditResult:
    check_source_size(body.source)
    await loader.load()
    return apply_translate(body.source, body.line, body.column, body.dx, body.dy, body.width, body.height)
