"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("ENV", "test")

from fulltext_gateway.core.config import Settings  # noqa: E402
from fulltext_gateway.main import create_app  # noqa: E402
from fulltext_gateway.search.engine import SearchEngine  # noqa: E402
from tests.helpers.es_fakes import make_es_client  # noqa: E402


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the stock search defaults."""
    return Settings(ENV="test", SEARCH_RESCORE_PHRASE=None, SEARCH_RESCORE_ENABLED=True)


@pytest.fixture
def es_client() -> MagicMock:
    """Fake Elasticsearch client with an empty first page."""
    return make_es_client()


@pytest.fixture
def engine(es_client) -> SearchEngine:
    """Engine adapter over the fake client."""
    return SearchEngine(es_client)


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    """Test client wired to the fake engine (lifespan not started)."""
    app = create_app()
    app.state.search_engine = engine
    yield TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def api_prefix() -> str:
    """Mount point of the fulltext routes."""
    from fulltext_gateway.core.config import settings

    return settings.API_PREFIX
