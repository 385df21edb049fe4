"""Tests that the server handles multiple concurrent connections correctly.

The app is async (FastAPI + redis.asyncio) and can be run with multiple
uvicorn workers. These tests assert that many simultaneous requests succeed
and never hand out the same key twice.
"""

import asyncio

import pytest


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_health_requests(self, client):
        """Many concurrent GET /api/health requests all succeed."""
        concurrency = 50
        tasks = [client.get("/api/health") for _ in range(concurrency)]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            assert not isinstance(r, Exception), f"Request {i} failed: {r}"
            assert r.status_code == 200, f"Request {i}: status {r.status_code}"

    async def test_concurrent_shorten_requests(self, client):
        """Concurrent POST /api/shorten calls each get a distinct key."""
        concurrency = 30
        tasks = [
            client.post("/api/shorten", json={"urls": f"https://example.com/{i}"})
            for i in range(concurrency)
        ]
        responses = await asyncio.gather(*tasks)

        keys = set()
        for i, r in enumerate(responses):
            assert r.status_code == 200, f"Request {i}: status {r.status_code}"
            keys.add(r.json()[0]["key"])

        assert len(keys) == concurrency

    async def test_concurrent_redirects(self, client, store):
        """Concurrent resolutions of the same key all redirect."""
        await store.set("abc123", "example.com")

        tasks = [client.get("/abc123", follow_redirects=False) for _ in range(40)]
        responses = await asyncio.gather(*tasks)

        assert all(r.status_code == 307 for r in responses)
        assert {r.headers["location"] for r in responses} == {"http://example.com"}

    async def test_mixed_concurrent_requests(self, client, store):
        """Shorten, redirect, unlock and health requests interleave safely."""
        await store.set("abc123", "example.com")
        await store.set("def456$pw", "example.org")

        tasks = []
        for i in range(10):
            tasks.append(client.post("/api/shorten", json={"urls": f"site{i}.example.com"}))
            tasks.append(client.get("/abc123", follow_redirects=False))
            tasks.append(client.post("/api/unlock", json={"key": "def456", "password": "pw"}))
            tasks.append(client.get("/api/health"))

        responses = await asyncio.gather(*tasks)

        for i in range(0, len(responses), 4):
            assert responses[i].status_code == 200
            assert responses[i + 1].status_code == 307
            assert responses[i + 2].json()["url"] == "http://example.org"
            assert responses[i + 3].status_code == 200


@pytest.mark.asyncio
class TestConcurrentStore:
    """Conditional inserts under concurrency."""

    async def test_concurrent_add_same_key(self, store):
        """Only one of many concurrent inserts of the same key wins."""
        results = await asyncio.gather(
            *(store.add("same01", f"https://example.com/{i}") for i in range(20))
        )

        assert results.count(True) == 1
        winner = results.index(True)
        assert await store.get("same01") == f"https://example.com/{winner}"

    async def test_concurrent_shorten_with_collisions(self, service, store):
        """Forced collisions are redrawn rather than overwriting."""
        draws = iter(["dup001"] * 3 + [f"uniq{i:02d}" for i in range(20)])
        service.generator.generate_candidate = lambda: next(draws)

        results = await asyncio.gather(
            *(service.shorten(f"https://example.com/{i}") for i in range(3))
        )

        keys = [batch[0].key for batch in results]
        assert len(set(keys)) == 3
        for batch in results:
            assert await store.get(batch[0].key) == batch[0].url
            assert len(batch[0].key) == 6
