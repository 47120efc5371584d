from fastapi import APIRouter, Depends, Response, status

from snippet_engine.api.dependencies import get_loader
from snippet_engine.api.schemas import HealthResponse, ReadinessResponse
from snippet_engine.core.parser import ParserLoader
from snippet_engine.errors import ParserLoadError

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness check: is the process alive?"""
    return HealthResponse()


@router.get("/healthz/ready", response_model=ReadinessResponse)
async def readiness(
    response: Response,
    loader: ParserLoader = Depends(get_loader),
) -> ReadinessResponse:
    """Readiness check: can the TSX parser be loaded?"""
    try:
        await loader.load()
    except ParserLoadError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="degraded", parser="down")
    return ReadinessResponse()
