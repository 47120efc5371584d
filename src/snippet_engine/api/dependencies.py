from __future__ import annotations

from fastapi import HTTPException, status

from snippet_engine.config import get_settings
from snippet_engine.core.parser import ParserLoader, get_parser_loader
from snippet_engine.core.tailwind import TailwindBuilder, get_tailwind_builder


async def get_loader() -> ParserLoader:
    return get_parser_loader()


async def get_tailwind() -> TailwindBuilder:
    return get_tailwind_builder()


def check_source_size(source: str) -> None:
    """Reject request sources longer than the configured limit."""
    limit = get_settings().source_max_chars
    if len(source) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"Source is too large (limit {limit} chars).",
        )
