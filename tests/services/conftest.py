"""Service test fixtures — FastAPI test client with overridable settings.

Invariants:
    - Every test gets a client bound to the real app over ASGITransport
    - get_settings dependency overridden per test; overrides reset afterwards

Design Decisions:
    - Settings built explicitly (not from .env): tests never depend on the
      developer's environment
"""

import pytest
from httpx import ASGITransport, AsyncClient

from ldgraph.config import Settings, get_settings
from ldgraph.main import app


@pytest.fixture
def settings() -> Settings:
    return Settings(max_graph_entities=50, pretty_print=True, log_format="text")


@pytest.fixture
async def client(settings):
    """FastAPI test client with the settings dependency overridden."""
    app.dependency_overrides[get_settings] = lambda: settings
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
