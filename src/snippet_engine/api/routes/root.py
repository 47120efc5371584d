from __future__ import annotations

from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """API directory for programmatic and human clients."""
    return {
        "meta": {
            "title": "Snippet Engine API",
            "description": "Analyze and structurally edit TSX component snippets.",
            "version": "0.1.0",
        },
        "links": {
            "self": "/",
            "analyze": "/analyze",
            "inspect": "/inspect",
            "style-read": "/style/read",
            "component-tree": "/component-tree",
            "insert-child": "/edits/insert-child",
            "style": "/edits/style",
            "translate": "/edits/translate",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
