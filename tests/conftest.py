"""
Pytest fixtures for the Gemini File Search API tests.
The Gemini client and Redis are replaced; nothing leaves the process.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from src.main import app
from src.api.dependencies import get_gemini_factory
from src.domains.file_search.errors import MissingApiKey
from src.infra.lifecycle.dependencies import get_state_repository
from src.infra.state.repository import StateRepository
from tests.fakes import FakeRedis


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def gemini():
    """Mock GeminiFileSearchClient with every operation as an AsyncMock."""
    client = MagicMock()
    client.list_stores = AsyncMock(return_value=[])
    client.create_store = AsyncMock()
    client.find_store_by_display_name = AsyncMock()
    client.delete_store = AsyncMock(return_value=None)
    client.upload_document = AsyncMock(return_value=None)
    client.generate_content_with_file_search = AsyncMock()
    client.list_documents = AsyncMock(return_value=[])
    client.find_document_by_display_name = AsyncMock()
    client.delete_document = AsyncMock(return_value=None)
    client.update_document = AsyncMock()
    client.api_keys = []
    return client


@pytest.fixture
def client(gemini, fake_redis):
    def factory(api_key):
        if not api_key:
            raise MissingApiKey()
        gemini.api_keys.append(api_key)
        return gemini

    app.dependency_overrides[get_gemini_factory] = lambda: factory
    app.dependency_overrides[get_state_repository] = lambda: StateRepository(fake_redis)

    yield TestClient(app)

    app.dependency_overrides = {}


@pytest.fixture
def api_headers():
    return {"x-api-key": "test-key"}
