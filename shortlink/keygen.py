"""Short key generation."""

import asyncio
import logging
import random
import string
from typing import Optional, List, Set

from .exceptions import KeyCollisionError
from .storage.tiered import TieredCache


class KeyGenerator:
    """Generate short, collision-checked keys."""

    # Base36 characters (digits then lowercase letters)
    BASE36_CHARS = string.digits + string.ascii_lowercase  # 0-9a-z

    # Separates the bare token from a password token in a secure key
    SECURE_SEPARATOR = "$"

    def __init__(
        self,
        store: TieredCache,
        part_length: int = 3,
        batch_size: int = 1,
        max_retries: int = 10,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize key generator.

        Args:
            store: Tiered store consulted for collisions
            part_length: Length of each of the two random halves
            batch_size: Candidates checked concurrently per round
            max_retries: Maximum number of candidates drawn in total
            logger: Optional logger
        """
        self.store = store
        self.part_length = part_length
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.logger = logger or logging.getLogger(__name__)

    @property
    def key_length(self) -> int:
        return self.part_length * 2

    def _random_part(self) -> str:
        return ''.join(random.choices(self.BASE36_CHARS, k=self.part_length))

    def generate_candidate(self) -> str:
        """Draw a bare token from two independent random halves."""
        return self._random_part() + self._random_part()

    async def protected_tokens(self) -> Set[str]:
        """Bare tokens already claimed by password-protected keys.

        Costs one full key enumeration, remote tier included.
        """
        return {self.bare_token(k) for k in await self.store.keys() if self.is_secure(k)}

    async def generate_bare(self, protected: Optional[Set[str]] = None) -> str:
        """Draw candidates until one is absent from the store.

        With batch_size > 1 each round draws several candidates, checks them
        concurrently and keeps the first unused one.

        A candidate is taken if it is stored as-is or if it is the bare
        token of a password-protected key.

        Args:
            protected: Precomputed protected_tokens(); enumerated if omitted

        Returns:
            Unused bare token

        Raises:
            KeyCollisionError: If every candidate within max_retries is taken
        """
        if protected is None:
            protected = await self.protected_tokens()

        drawn = 0
        while drawn < self.max_retries:
            count = min(self.batch_size, self.max_retries - drawn)
            candidates: List[str] = [self.generate_candidate() for _ in range(count)]
            drawn += count

            existing = await asyncio.gather(*(self.store.get(c) for c in candidates))
            for candidate, value in zip(candidates, existing):
                if value is None and candidate not in protected:
                    if drawn > 1:
                        self.logger.debug(f"Generated key after {drawn} draws: {candidate}")
                    return candidate

        raise KeyCollisionError(f"Unable to find an unused key after {drawn} attempts")

    async def generate(
        self,
        password: Optional[str] = None,
        protected: Optional[Set[str]] = None,
    ) -> str:
        """Generate a unique key, suffixed with a password token if given.

        Uniqueness is checked against the bare token only.

        Args:
            password: Optional password token
            protected: Precomputed protected_tokens(), reused across a batch

        Returns:
            Bare token, or "bare$password"
        """
        bare = await self.generate_bare(protected)
        return self.with_password(bare, password)

    @classmethod
    def with_password(cls, bare: str, password: Optional[str]) -> str:
        """Append a password token to a bare token.

        An empty string counts as no password.
        """
        if password is None or password == "":
            return bare
        return f"{bare}{cls.SECURE_SEPARATOR}{password}"

    @classmethod
    def bare_token(cls, key: str) -> str:
        """Strip any password suffix from a key."""
        return key.split(cls.SECURE_SEPARATOR, 1)[0]

    @classmethod
    def is_secure(cls, key: str) -> bool:
        """Whether a key carries a password suffix."""
        return cls.SECURE_SEPARATOR in key
