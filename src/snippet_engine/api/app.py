from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from snippet_engine.api.lifespan import lifespan
from snippet_engine.api.routes.analyze import router as analyze_router
from snippet_engine.api.routes.edits import router as edits_router
from snippet_engine.api.routes.health import router as health_router
from snippet_engine.api.routes.root import router as root_router
from snippet_engine.errors import ParserLoadError

logger = logging.getLogger(__name__)


async def parser_unavailable(_request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Request failed, parser unavailable: %s", exc)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Snippet Engine API",
        description="Analyze and structurally edit TSX component snippets.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(ParserLoadError, parser_unavailable)

    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)
    app.include_router(analyze_router)
    app.include_router(edits_router)

    return app
