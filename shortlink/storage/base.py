"""Abstract base class for remote key-value store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, Set, Dict


class KeyValueStore(ABC):
    """Durable mapping from short key to destination URL.

    Implementations may be remote and slow. Every operation raises
    StoreUnavailableError on failure; callers decide how to degrade.
    """

    name: str = "remote"

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get the destination URL stored under a key.

        Args:
            key: The full storage key (bare token plus optional suffix)

        Returns:
            The stored URL if found, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a destination URL under a key, overwriting any value.

        Args:
            key: The full storage key
            value: The destination URL
        """
        pass

    async def set_if_absent(self, key: str, value: str) -> bool:
        """Store a value only if the key is not present yet.

        The default implementation is a non-atomic get-then-set; stores with
        a native conditional insert override it.

        Args:
            key: The full storage key
            value: The destination URL

        Returns:
            True if stored, False if the key already existed
        """
        if await self.get(key) is not None:
            return False
        await self.set(key, value)
        return True

    @abstractmethod
    async def keys(self) -> Set[str]:
        """Enumerate every key held by the store.

        Returns:
            Set of full storage keys
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass


class InMemoryStore(KeyValueStore):
    """Process-local KeyValueStore, for tests and local development."""

    name = "in-memory"

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def set_if_absent(self, key: str, value: str) -> bool:
        if key in self._data:
            return False
        self._data[key] = value
        return True

    async def keys(self) -> Set[str]:
        return set(self._data)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        pass
