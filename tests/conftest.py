"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.actions import LinkActions
from shortlinks.common.logging_config import setup_logging
from shortlinks.database.memory import MemoryLinkStore
from shortlinks.errors import StorageError
from shortlinks.registry import LinkRegistry
from shortlinks.resolver import RedirectResolver
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


class SequenceGenerator(ShortCodeGenerator):
    """Generator returning preset codes, repeating the last one."""

    def __init__(self, codes):
        super().__init__(default_length=8)
        self.codes = list(codes)
        self.calls = 0

    def generate_random(self, length=None):
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


class FailingStore(MemoryLinkStore):
    """Store whose every operation fails like a lost database connection."""

    async def find_by_short_code(self, short_code):
        raise StorageError("connection refused")

    async def find_all_by_owner(self, owner_id):
        raise StorageError("connection refused")

    async def insert(self, new_link):
        raise StorageError("connection refused")

    async def update_by_id(self, link_id, fields, owner_id=None):
        raise StorageError("connection refused")

    async def delete_by_id(self, link_id, owner_id=None):
        raise StorageError("connection refused")

    async def health_check(self):
        return False


@pytest.fixture
def owner():
    """Owner id of the primary test user."""
    return "user_alice"


@pytest.fixture
def other_owner():
    """Owner id of a second user."""
    return "user_bob"


@pytest.fixture
def sequence_generator():
    """Factory for generators that return preset codes."""
    return SequenceGenerator


@pytest.fixture
def failing_store():
    """Store that fails every operation."""
    return FailingStore()


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def store(logger):
    """Create an in-memory link store."""
    store = MemoryLinkStore(logger=logger)
    yield store
    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=8)


@pytest.fixture
def registry(store, short_code_generator, logger):
    """Create link registry."""
    return LinkRegistry(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def resolver(store, logger):
    """Create redirect resolver."""
    return RedirectResolver(store=store, logger=logger)


@pytest.fixture
def actions(registry, logger):
    """Create link actions."""
    return LinkActions(registry=registry, environment="development", logger=logger)


@pytest.fixture
def config():
    """Test configuration."""
    return Config(
        store_backend="memory",
        base_url="http://testserver",
        path_prefix="/l",
        _env_file=None,
    )


@pytest.fixture
def app(store, registry, resolver, actions, config):
    """Create test FastAPI app."""
    return create_app(
        store=store,
        registry=registry,
        resolver=resolver,
        actions=actions,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def owner_headers(owner):
    """Headers the auth proxy would set for the primary test user."""
    return {"X-User-Id": owner}


@pytest.fixture
def other_owner_headers(other_owner):
    """Headers for a second user."""
    return {"X-User-Id": other_owner}


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
