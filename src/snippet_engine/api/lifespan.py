from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from snippet_engine.core.parser import get_parser_loader
from snippet_engine.errors import ParserLoadError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    try:
        await get_parser_loader().load()
    except ParserLoadError:
        # readiness reports the failure; requests retry after the cooldown
        logger.warning("TSX parser unavailable at startup")
    yield
