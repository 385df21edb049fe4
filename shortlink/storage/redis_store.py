"""Redis-backed remote tier for shortlink."""

import asyncio
import logging
from typing import Optional, Set, Callable, Awaitable, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from .base import KeyValueStore
from ..exceptions import StoreUnavailableError


class RedisStore(KeyValueStore):
    """Remote key-value store on Redis.

    The client is created lazily on first use. Only one connection attempt
    runs at a time; a failed attempt leaves the client unset so the next
    call retries.
    """

    name = "redis"

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "shortlink:",
        timeout_seconds: float = 2.0,
        ttl_seconds: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            key_prefix: Namespace prepended to every stored key
            timeout_seconds: Upper bound for a single Redis call
            ttl_seconds: Optional expiry for written keys
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.timeout_seconds = timeout_seconds
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[redis.Redis] = None
        self._connecting = False

        self.logger.info(f"Redis store configured (prefix={key_prefix!r}, timeout={timeout_seconds}s)")

    def get_storage_key(self, key: str) -> str:
        """Generate the namespaced Redis key for a short key.

        Args:
            key: The short key

        Returns:
            Redis key
        """
        return f"{self.key_prefix}{key}"

    async def connect(self) -> redis.Redis:
        """Return the Redis client, connecting on first use.

        Raises:
            StoreUnavailableError: If the connection fails or another
                attempt is already in flight
        """
        if self.client is not None:
            return self.client

        if self._connecting:
            raise StoreUnavailableError("Redis connection attempt already in progress")

        self._connecting = True
        client = None
        try:
            # A malformed URL raises ValueError here
            client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await asyncio.wait_for(client.ping(), timeout=self.timeout_seconds)
            self.client = client
            self.logger.info("Connected to Redis")
            return client
        except (RedisError, OSError, ValueError, asyncio.TimeoutError) as e:
            self.logger.error(f"Failed to connect to Redis: {e!r}")
            if client is not None:
                await self._discard(client)
            raise StoreUnavailableError(f"Redis connection failed: {e!r}") from e
        finally:
            self._connecting = False

    async def _discard(self, client: redis.Redis) -> None:
        """Release the pool of a client that never came up."""
        try:
            await client.aclose()
        except (RedisError, OSError) as e:
            self.logger.debug(f"Error closing failed Redis client: {e!r}")

    async def _run(self, operation: str, call: Callable[[redis.Redis], Awaitable[Any]]) -> Any:
        """Run one Redis call under the store timeout."""
        client = await self.connect()
        try:
            return await asyncio.wait_for(call(client), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise StoreUnavailableError(
                f"Redis {operation} timed out after {self.timeout_seconds}s"
            ) from e
        except (RedisError, OSError) as e:
            raise StoreUnavailableError(f"Redis {operation} error: {e!r}") from e

    async def get(self, key: str) -> Optional[str]:
        storage_key = self.get_storage_key(key)
        return await self._run("get", lambda c: c.get(storage_key))

    async def set(self, key: str, value: str) -> None:
        storage_key = self.get_storage_key(key)
        await self._run("set", lambda c: c.set(storage_key, value, ex=self.ttl_seconds))

    async def set_if_absent(self, key: str, value: str) -> bool:
        """Atomic insert via SET NX."""
        storage_key = self.get_storage_key(key)
        result = await self._run(
            "set_if_absent",
            lambda c: c.set(storage_key, value, ex=self.ttl_seconds, nx=True),
        )
        return bool(result)

    async def keys(self) -> Set[str]:
        """Enumerate keys with SCAN, stripping the namespace prefix."""

        async def collect(client: redis.Redis) -> Set[str]:
            found = set()
            async for storage_key in client.scan_iter(match=f"{self.key_prefix}*"):
                found.add(storage_key[len(self.key_prefix):])
            return found

        return await self._run("keys", collect)

    async def health_check(self) -> bool:
        try:
            await self._run("ping", lambda c: c.ping())
            return True
        except StoreUnavailableError as e:
            self.logger.warning(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
