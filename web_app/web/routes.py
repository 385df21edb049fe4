"""Browser-facing routes."""

from typing import Optional

from fastapi import APIRouter, Request, Query, status
from fastapi.responses import JSONResponse, RedirectResponse

router = APIRouter()


@router.get("/unlock", include_in_schema=False)
async def unlock_redirect(
    request: Request,
    key: str = Query(..., min_length=1),
    password: Optional[str] = Query(None),
):
    """Landing target of unlock redirects.

    With a matching password this forwards to the destination; otherwise it
    answers 401 naming the key, so a client can ask for the password and
    retry here or via POST /api/unlock.
    """
    service = request.app.state.service

    url = await service.unlock(key, password) if password else None

    if url is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Password required", "key": key},
        )

    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
