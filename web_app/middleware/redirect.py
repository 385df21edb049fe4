"""Short link redirect middleware."""

import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from shortlink.common.headers import build_base_url, extract_geo
from shortlink.resolver import extract_path


class ShortlinkRedirectMiddleware(BaseHTTPMiddleware):
    """Run the redirect resolver in front of every route.

    Redirect decisions answer with a 307; everything else, including
    resolver failures, falls through to the normal route table.
    """

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlink.web")

    async def dispatch(self, request: Request, call_next: Callable):
        resolver = getattr(request.app.state, "resolver", None)
        if resolver is None:
            return await call_next(request)

        try:
            config = request.app.state.config
            origin = build_base_url(
                headers=request.headers,
                fallback_base_url=config.base_url,
                request_scheme=request.url.scheme,
                request_host=request.headers.get("host"),
            )
            resolution = await resolver.resolve(
                extract_path(request.url.path),
                origin=origin,
                geo=extract_geo(request.headers),
            )
        except Exception as e:
            self.logger.error(f"Redirect middleware error, passing through: {e!r}")
            return await call_next(request)

        if resolution.is_redirect:
            return RedirectResponse(url=resolution.location, status_code=307)

        return await call_next(request)
