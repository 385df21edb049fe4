"""Business logic service for shortlink."""

import logging
import re
from typing import Optional, Dict, Any, List, Set

from .exceptions import KeyCollisionError
from .keygen import KeyGenerator
from .models import ShortenResult
from .resolver import normalize_destination
from .storage.tiered import TieredCache


# Destination lists arrive separated by newlines and/or commas
URL_SEPARATORS = re.compile(r"[\r\n,]+")


def split_urls(urls: str) -> List[str]:
    """Split a newline/comma-delimited URL list, dropping empty entries."""
    entries = [entry.strip() for entry in URL_SEPARATORS.split(urls.strip())]
    return [entry for entry in entries if entry]


class ShortlinkService:
    """Service layer for the shorten and unlock paths."""

    def __init__(
        self,
        store: TieredCache,
        key_generator: Optional[KeyGenerator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize shortlink service.

        Args:
            store: Tiered store for key/URL pairs
            key_generator: Optional key generator (defaults bound to store)
            logger: Optional logger
        """
        self.store = store
        self.generator = key_generator or KeyGenerator(store)
        self.logger = logger or logging.getLogger(__name__)

    async def shorten(
        self,
        urls: str,
        password: Optional[str] = None,
    ) -> List[ShortenResult]:
        """Create a short key for every URL in a delimited list.

        Args:
            urls: Newline and/or comma separated destination URLs
            password: Optional password token appended to every key

        Returns:
            One result per URL; keys are always bare tokens

        Raises:
            ValueError: If the list holds no URLs
            KeyCollisionError: If no unused key could be found
        """
        entries = split_urls(urls)
        if not entries:
            raise ValueError("No URLs provided")

        # One key enumeration per request, not per URL
        protected = await self.generator.protected_tokens()

        results = []
        for url in entries:
            key = await self._store_unique(url, password, protected)
            results.append(ShortenResult(key=KeyGenerator.bare_token(key), url=url))

        return results

    async def _store_unique(self, url: str, password: Optional[str], protected: Set[str]) -> str:
        """Generate a key and insert it, redrawing if a writer got there first."""
        for attempt in range(self.generator.max_retries):
            key = await self.generator.generate(password, protected)
            bare = KeyGenerator.bare_token(key)

            if await self.store.add(key, url):
                secured = ""
                if KeyGenerator.is_secure(key):
                    protected.add(bare)
                    secured = " (password protected)"
                self.logger.info(f"Created short key: {bare} -> {url}{secured}")
                return key

            self.logger.warning(f"Key {bare} was taken concurrently (attempt {attempt + 1}), redrawing")

        raise KeyCollisionError("Unable to store a unique key after multiple attempts")

    async def unlock(self, key: str, password: Optional[str]) -> Optional[str]:
        """Look up a password-protected key.

        Args:
            key: Bare token (any suffix is ignored)
            password: Password token

        Returns:
            Normalized destination URL, or None if the pair does not match
        """
        full_key = KeyGenerator.with_password(KeyGenerator.bare_token(key), password)
        if not KeyGenerator.is_secure(full_key):
            return None

        value = await self.store.get(full_key)
        if value is None:
            self.logger.info(f"Unlock failed for {KeyGenerator.bare_token(key)!r}")
            return None

        return normalize_destination(value)

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with tier status and overall health
        """
        tiers = await self.store.health_check()
        return {
            **tiers,
            "overall": tiers["remote_healthy"],
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
