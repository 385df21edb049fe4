"""Middleware for the shortlink web app."""

from .logging import LoggingMiddleware
from .redirect import ShortlinkRedirectMiddleware

__all__ = ["LoggingMiddleware", "ShortlinkRedirectMiddleware"]
