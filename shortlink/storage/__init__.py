"""Storage tiers for shortlink."""

from .base import KeyValueStore, InMemoryStore
from .redis_store import RedisStore
from .seed import DEFAULT_SEED, load_seed
from .tiered import TieredCache, StoreTier

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "RedisStore",
    "DEFAULT_SEED",
    "load_seed",
    "TieredCache",
    "StoreTier",
]
