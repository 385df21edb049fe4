"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from shortlink.exceptions import KeyCollisionError
from .schemas import (
    ShortenRequest,
    ShortenItem,
    UnlockRequest,
    UnlockResponse,
    HealthResponse,
    ErrorResponse,
)

router = APIRouter()


@router.post(
    "/shorten",
    response_model=List[ShortenItem],
    responses={
        400: {"model": ErrorResponse, "description": "No URLs in request"},
        500: {"model": ErrorResponse, "description": "Key generation failed"},
    },
    summary="Create short keys",
    description="Shorten every URL in a newline/comma separated list, optionally behind a password.",
)
async def shorten_urls(request: Request, body: ShortenRequest):
    """Create short keys for a list of URLs."""
    service = request.app.state.service

    try:
        results = await service.shorten(body.urls, password=body.password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except KeyCollisionError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )

    return [ShortenItem(key=r.key, url=r.url) for r in results]


@router.post(
    "/unlock",
    response_model=UnlockResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Wrong key or password"},
    },
    summary="Unlock a protected key",
    description="Return the destination of a password-protected key.",
)
async def unlock_key(request: Request, body: UnlockRequest):
    """Resolve a key/password pair."""
    service = request.app.state.service

    url = await service.unlock(body.key, body.password)

    if url is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid key or password",
        )

    return UnlockResponse(key=body.key, url=url)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report memory, seed and remote tier status.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    if not health["remote_enabled"]:
        remote = "disabled"
    elif health["remote_healthy"]:
        remote = "healthy"
    else:
        remote = "unhealthy"

    return HealthResponse(
        status="healthy" if health["overall"] else "degraded",
        memory_keys=health["memory_keys"],
        seed_keys=health["seed_keys"],
        remote=remote,
        timestamp=datetime.now(timezone.utc),
    )
