"""Tiered key lookup: memory, then static seed, then remote store."""

import logging
from enum import Enum
from typing import Optional, Dict, Set, Tuple, Any

from .base import KeyValueStore
from ..common.logging_config import mask_key


class StoreTier(str, Enum):
    """Storage tiers in lookup order."""

    MEMORY = "memory"
    STATIC_SEED = "static_seed"
    REMOTE = "remote"


class TieredCache:
    """Single lookup/write/enumerate interface over three storage tiers.

    Lookups check the in-process memory dict first, then the static seed
    table, then the remote store if one is configured. A remote hit is
    promoted into memory; the seed table is never written.

    Remote faults never reach callers. They are logged and treated as a
    miss (reads), a skipped write (writes) or an empty listing (keys).
    """

    def __init__(
        self,
        remote: Optional[KeyValueStore] = None,
        seed: Optional[Dict[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize tiered cache.

        Args:
            remote: Optional remote store (None = memory and seed only)
            seed: Static seed entries
            logger: Optional logger instance
        """
        self.remote = remote
        self.seed: Dict[str, str] = dict(seed or {})
        self.memory: Dict[str, str] = {}
        self.logger = logger or logging.getLogger(__name__)

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None

    async def lookup(self, key: str) -> Tuple[Optional[str], Optional[StoreTier]]:
        """Find a key and report which tier answered.

        Args:
            key: Full storage key

        Returns:
            Tuple of (value, tier), or (None, None) on a miss
        """
        value = self.memory.get(key)
        if value is not None:
            return value, StoreTier.MEMORY

        value = self.seed.get(key)
        if value is not None:
            return value, StoreTier.STATIC_SEED

        if self.remote is None:
            return None, None

        try:
            value = await self.remote.get(key)
        except Exception as e:
            self.logger.warning(f"Remote get failed for {mask_key(key)!r}, treating as miss: {e}")
            return None, None

        if value is None:
            return None, None

        self.memory[key] = value
        self.logger.debug(f"Promoted {mask_key(key)!r} from remote into memory")
        return value, StoreTier.REMOTE

    async def get(self, key: str) -> Optional[str]:
        """Get the destination URL for a key from the first tier holding it."""
        value, _ = await self.lookup(key)
        return value

    async def set(self, key: str, value: str) -> bool:
        """Write a key into memory and, best-effort, into the remote store.

        Returns:
            False only if the memory write failed
        """
        try:
            self.memory[key] = value
        except TypeError as e:
            self.logger.error(f"Memory write failed for {mask_key(key)!r}: {e}")
            return False

        if self.remote is not None:
            try:
                await self.remote.set(key, value)
            except Exception as e:
                self.logger.warning(f"Remote set failed for {mask_key(key)!r}, kept in memory only: {e}")

        return True

    async def add(self, key: str, value: str) -> bool:
        """Insert a key only if no tier already holds it.

        Uses the remote store's conditional insert. A remote error does not
        fail the insert; the value is kept in memory.

        Returns:
            True if inserted, False if the key already existed
        """
        if key in self.memory or key in self.seed:
            return False

        if self.remote is not None:
            try:
                if not await self.remote.set_if_absent(key, value):
                    self.logger.info(f"Remote store already holds {mask_key(key)!r}")
                    return False
            except Exception as e:
                self.logger.warning(f"Remote insert failed for {mask_key(key)!r}, kept in memory only: {e}")

        # Another writer may have filled memory while the remote call was pending
        if key in self.memory:
            return False

        self.memory[key] = value
        return True

    async def keys(self) -> Set[str]:
        """Union of seed, memory and remote keys."""
        keys = set(self.seed) | set(self.memory)

        if self.remote is not None:
            try:
                keys |= await self.remote.keys()
            except Exception as e:
                self.logger.warning(f"Remote key enumeration failed, using local tiers only: {e}")

        return keys

    async def health_check(self) -> Dict[str, Any]:
        """Report per-tier status.

        Returns:
            Dictionary with tier sizes and remote health
        """
        remote_healthy = True
        if self.remote is not None:
            remote_healthy = await self.remote.health_check()

        return {
            "memory_keys": len(self.memory),
            "seed_keys": len(self.seed),
            "remote_enabled": self.remote_enabled,
            "remote_healthy": remote_healthy,
        }

    async def close(self) -> None:
        """Release the remote store."""
        if self.remote is not None:
            await self.remote.close()
