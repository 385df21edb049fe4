"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlink.keygen import KeyGenerator
from shortlink.resolver import RedirectResolver
from shortlink.service import ShortlinkService
from shortlink.storage import InMemoryStore, TieredCache
from shortlink.common.logging_config import setup_logging
from web_app import create_app
from tests.helpers import FailingStore, RecordingNotifier, SEED


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def remote():
    """In-memory stand-in for the remote tier."""
    return InMemoryStore()


@pytest.fixture
def store(remote, logger):
    """Tiered store with a remote tier and one seed entry."""
    return TieredCache(remote=remote, seed=SEED, logger=logger)


@pytest.fixture
def local_store(logger):
    """Tiered store with no remote tier."""
    return TieredCache(remote=None, seed=SEED, logger=logger)


@pytest.fixture
def failing_store(logger):
    """Tiered store whose remote tier fails every call."""
    return TieredCache(remote=FailingStore(), seed=SEED, logger=logger)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def generator(store, logger):
    """Create key generator."""
    return KeyGenerator(store, logger=logger)


@pytest.fixture
def service(store, generator, logger):
    """Create service instance."""
    return ShortlinkService(store=store, key_generator=generator, logger=logger)


@pytest.fixture
def resolver(store, notifier, logger):
    """Create resolver instance."""
    return RedirectResolver(store=store, notifier=notifier, logger=logger)


@pytest.fixture
def app_config():
    return Config(base_url="http://testserver", redis_url=None)


@pytest.fixture
def app(store, resolver, service, app_config):
    """Create test FastAPI app."""
    return create_app(
        store_instance=store,
        resolver_instance=resolver,
        service_instance=service,
        config=app_config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
