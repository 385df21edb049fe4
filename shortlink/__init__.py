"""Core business logic for shortlink."""

from .keygen import KeyGenerator
from .resolver import RedirectResolver, Resolution, ResolveState
from .service import ShortlinkService

__all__ = [
    "KeyGenerator",
    "RedirectResolver",
    "Resolution",
    "ResolveState",
    "ShortlinkService",
]
