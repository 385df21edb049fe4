"""Tests for key generation."""

import re

import pytest

from shortlink.exceptions import KeyCollisionError
from shortlink.keygen import KeyGenerator

BASE36_KEY = re.compile(r"^[0-9a-z]+$")


def scripted(generator, candidates):
    """Make a generator draw the given candidates in order."""
    draws = iter(candidates)
    generator.generate_candidate = lambda: next(draws)
    return generator


class TestKeyGenerator:
    """Test key generation."""

    def test_candidate_format(self, generator):
        """Candidates are 6 base36 characters."""
        for _ in range(50):
            code = generator.generate_candidate()
            assert len(code) == 6
            assert BASE36_KEY.match(code)

    def test_custom_part_length(self, store):
        generator = KeyGenerator(store, part_length=4)

        assert generator.key_length == 8
        assert len(generator.generate_candidate()) == 8

    @pytest.mark.asyncio
    async def test_generate_without_password(self, generator):
        key = await generator.generate()

        assert len(key) == 6
        assert not KeyGenerator.is_secure(key)

    @pytest.mark.asyncio
    async def test_generate_with_password(self, generator):
        key = await generator.generate("abc")

        bare, password = key.split("$")
        assert len(bare) == 6
        assert password == "abc"

    @pytest.mark.asyncio
    async def test_empty_password_means_no_suffix(self, generator):
        """An empty password token is the same as none."""
        key = await generator.generate("")

        assert "$" not in key
        assert len(key) == 6

    @pytest.mark.asyncio
    async def test_many_keys_are_distinct(self, generator, store):
        """Stored keys never repeat a bare token."""
        keys = []
        for i in range(200):
            key = await generator.generate()
            assert await store.add(key, f"https://example.com/{i}")
            keys.append(key)

        assert len(set(keys)) == len(keys)
        assert all(len(k) == 6 and BASE36_KEY.match(k) for k in keys)

    @pytest.mark.asyncio
    async def test_redraws_on_collision(self, generator, store):
        """A stored candidate is skipped."""
        await store.set("taken1", "https://example.com")
        scripted(generator, ["taken1", "seeded", "free01"])

        assert await generator.generate() == "free01"

    @pytest.mark.asyncio
    async def test_protected_bare_tokens_are_taken(self, generator, store):
        """A bare token used by a secure key is not reissued."""
        await store.set("abc123$pw", "https://example.com")
        scripted(generator, ["abc123", "free01"])

        assert await generator.generate() == "free01"

    @pytest.mark.asyncio
    async def test_precomputed_protected_tokens(self, generator, store):
        """A supplied protected set is used without enumerating keys."""
        await store.set("abc123$pw", "https://example.com")
        protected = await generator.protected_tokens()

        async def no_scan():
            raise AssertionError("keys() should not be called")

        store.keys = no_scan
        scripted(generator, ["abc123", "free01"])

        assert protected == {"abc123"}
        assert await generator.generate("pw", protected) == "free01$pw"

    @pytest.mark.asyncio
    async def test_collision_check_uses_bare_token(self, generator, store):
        """The password suffix plays no part in the uniqueness check."""
        await store.set("taken1", "https://example.com")
        scripted(generator, ["taken1", "free01"])

        assert await generator.generate("pw") == "free01$pw"

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, store):
        """Exhausting the retry budget raises KeyCollisionError."""
        await store.set("taken1", "https://example.com")
        generator = scripted(KeyGenerator(store, max_retries=3), ["taken1"] * 3)

        with pytest.raises(KeyCollisionError):
            await generator.generate()

    @pytest.mark.asyncio
    async def test_batched_generation(self, store):
        """A batch is checked together and the first unused candidate wins."""
        await store.set("taken1", "https://example.com")
        await store.set("taken2", "https://example.com")
        generator = scripted(
            KeyGenerator(store, batch_size=4),
            ["taken1", "taken2", "free01", "free02"],
        )

        assert await generator.generate() == "free01"

    @pytest.mark.asyncio
    async def test_batched_generation_respects_retry_budget(self, store):
        """The last batch is trimmed to the remaining budget."""
        await store.set("taken1", "https://example.com")
        generator = scripted(
            KeyGenerator(store, batch_size=4, max_retries=5),
            ["taken1"] * 5,
        )

        with pytest.raises(KeyCollisionError, match="after 5 attempts"):
            await generator.generate()


class TestKeyHelpers:
    """Test key helpers."""

    def test_with_password(self):
        assert KeyGenerator.with_password("abc123", "pw") == "abc123$pw"
        assert KeyGenerator.with_password("abc123", None) == "abc123"
        assert KeyGenerator.with_password("abc123", "") == "abc123"

    def test_bare_token(self):
        assert KeyGenerator.bare_token("abc123$pw") == "abc123"
        assert KeyGenerator.bare_token("abc123") == "abc123"
        assert KeyGenerator.bare_token("abc123$p$w") == "abc123"

    def test_is_secure(self):
        assert KeyGenerator.is_secure("abc123$pw")
        assert not KeyGenerator.is_secure("abc123")
