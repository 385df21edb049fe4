"""Request-time redirect decisions."""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Set
from urllib.parse import quote

from .common.logging_config import mask_key
from .keygen import KeyGenerator
from .notify import NotificationSink, NullNotifier
from .storage.tiered import TieredCache


# A leading letters-only scheme followed by "://"
SCHEME_PATTERN = re.compile(r"^[a-zA-Z]+://")

API_SEGMENT = "api"
EXCLUDED_PATHS = frozenset({"favicon.ico"})


class ResolveState(str, Enum):
    """Outcome of resolving one request path."""

    PASS_THROUGH = "pass_through"
    REDIRECT_TARGET = "redirect_target"
    REDIRECT_UNLOCK = "redirect_unlock"
    ERROR_PASS_THROUGH = "error_pass_through"


@dataclass(frozen=True)
class Resolution:
    """Redirect decision for a request path."""

    state: ResolveState
    location: Optional[str] = None
    key: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.state in (ResolveState.REDIRECT_TARGET, ResolveState.REDIRECT_UNLOCK)


PASS = Resolution(ResolveState.PASS_THROUGH)


def normalize_destination(url: str) -> str:
    """Prefix http:// when a destination has no scheme."""
    if SCHEME_PATTERN.match(url):
        return url
    return f"http://{url}"


def extract_path(pathname: str) -> str:
    """Strip the leading slash from a URL pathname."""
    return pathname[1:] if pathname.startswith("/") else pathname


def is_excluded_path(path: str) -> bool:
    """Paths that are never treated as short keys."""
    return path in EXCLUDED_PATHS or API_SEGMENT in path.split("/")


def unlock_location(origin: str, bare: str) -> str:
    """Build the unlock challenge URL for a bare token."""
    return f"{origin.rstrip('/')}/unlock?key={quote(bare, safe='')}"


def format_access_message(origin: str, path: str, geo: Optional[Dict[str, Optional[str]]] = None) -> str:
    """Notification text for a resolved short link."""
    geo = geo or {}
    city = geo.get("city") or "Unknown"
    region = geo.get("region") or "Unknown"
    country = geo.get("country") or "Unknown"
    return (
        f"Shortlink accessed: {origin.rstrip('/')}/{path}\n"
        f"Location: {city}, {region}, {country}"
    )


class RedirectResolver:
    """Decide what to do with an incoming request path.

    Given a path with its leading slash stripped:

    1. empty, API-namespace or favicon paths pass through;
    2. a stored key redirects to its (scheme-normalized) destination and
       fires an access notification in the background;
    3. a bare token that has a password-protected key redirects to unlock;
    4. a path carrying a ``$`` suffix redirects to unlock for its bare token;
    5. anything else passes through.

    Any exception becomes ERROR_PASS_THROUGH, so a broken shortener never
    shows up as an error to the requester.
    """

    def __init__(
        self,
        store: TieredCache,
        notifier: Optional[NotificationSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize resolver.

        Args:
            store: Tiered store holding the short keys
            notifier: Optional sink for access notifications
            logger: Optional logger
        """
        self.store = store
        self.notifier = notifier or NullNotifier()
        self.logger = logger or logging.getLogger(__name__)
        self._pending: Set[asyncio.Task] = set()

    async def resolve(
        self,
        path: str,
        origin: str = "",
        geo: Optional[Dict[str, Optional[str]]] = None,
    ) -> Resolution:
        """Resolve a request path.

        Args:
            path: URL pathname without the leading slash
            origin: Scheme and host of the incoming request
            geo: Optional city/region/country of the requester

        Returns:
            Resolution describing the redirect decision
        """
        try:
            return await self._resolve(path, origin, geo)
        except Exception as e:
            self.logger.error(f"Resolver error for {mask_key(path)!r}, passing through: {e!r}")
            return Resolution(ResolveState.ERROR_PASS_THROUGH)

    async def _resolve(
        self,
        path: str,
        origin: str,
        geo: Optional[Dict[str, Optional[str]]],
    ) -> Resolution:
        if not path or is_excluded_path(path):
            return PASS

        value = await self.store.get(path)
        if value is not None:
            target = normalize_destination(value)
            self._dispatch_notification(format_access_message(origin, path, geo))
            self.logger.info(f"Redirecting {mask_key(path)!r} to {target}")
            return Resolution(ResolveState.REDIRECT_TARGET, location=target, key=path)

        for key in await self.store.keys():
            if KeyGenerator.is_secure(key) and KeyGenerator.bare_token(key) == path:
                self.logger.info(f"Found secure key for {mask_key(path)!r}")
                return self._unlock(origin, path)

        if KeyGenerator.is_secure(path):
            return self._unlock(origin, KeyGenerator.bare_token(path))

        self.logger.debug(f"No key found for {mask_key(path)!r}")
        return PASS

    def _unlock(self, origin: str, bare: str) -> Resolution:
        return Resolution(
            ResolveState.REDIRECT_UNLOCK,
            location=unlock_location(origin, bare),
            key=bare,
        )

    def _dispatch_notification(self, text: str) -> None:
        """Send a notification as a detached task."""
        task = asyncio.create_task(self._deliver(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, text: str) -> None:
        try:
            await self.notifier.notify(text)
        except Exception as e:
            self.logger.error(f"Notification failed: {e!r}")

    async def drain(self) -> None:
        """Wait for in-flight notifications to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
