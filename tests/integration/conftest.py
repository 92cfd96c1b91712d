"""
Integration Test Fixtures.

Fixtures for integration tests: the real FastAPI app served over httpx's
ASGITransport, a fresh graph store per test, and a real SearchSynchronizer
wired to a fake index client so index calls can be inspected or made to fail.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from second_brain.backend.core.database import get_db_session
from second_brain.backend.core.dependencies import get_object_store, get_search_sync
from second_brain.backend.search.sync import SearchSynchronizer


# =============================================================================
# Collaborator Fakes
# =============================================================================


@pytest.fixture
def search_index() -> MagicMock:
    """Fake search index client. Set side_effect on a method to inject failures."""
    index = MagicMock()
    index.retrieve_collection = AsyncMock(return_value={"name": "notes"})
    index.create_collection = AsyncMock(return_value={"name": "notes"})
    index.upsert_document = AsyncMock(return_value={})
    index.delete_document = AsyncMock(return_value=True)
    index.search = AsyncMock(return_value={"hits": []})
    index.health = AsyncMock(return_value=True)
    return index


@pytest.fixture
def search_sync(search_index: MagicMock) -> SearchSynchronizer:
    return SearchSynchronizer(
        search_index,
        timeout_seconds=0.5,
        retry_attempts=1,
        min_wait_seconds=0,
        max_wait_seconds=0,
    )


@pytest.fixture
def object_store() -> MagicMock:
    store = MagicMock()
    store.upload = AsyncMock(
        return_value="https://res.example.com/second-brain-notes/diagram.png",
    )
    return store


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app_factory() -> Generator[Callable[..., FastAPI], None, None]:
    """
    Build applications wired to test collaborators.

    Each request gets its own session that commits on success and rolls
    back on error, the same contract get_db_session has in production.
    """
    from second_brain.backend.main import create_app

    built: list[FastAPI] = []

    def _build(
        session_factory: async_sessionmaker[AsyncSession],
        search_sync: Any,
        object_store: Any,
    ) -> FastAPI:
        async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
            async with session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise

        app = create_app()
        app.state.search_sync = search_sync
        app.state.object_store = object_store
        app.dependency_overrides[get_db_session] = override_get_db_session
        app.dependency_overrides[get_search_sync] = lambda: search_sync
        app.dependency_overrides[get_object_store] = lambda: object_store
        built.append(app)
        return app

    yield _build

    for app in built:
        app.dependency_overrides.clear()


@pytest.fixture
def app(
    app_factory: Callable[..., FastAPI],
    db_session_factory: async_sessionmaker[AsyncSession],
    search_sync: SearchSynchronizer,
    object_store: MagicMock,
) -> FastAPI:
    """Create the application with test collaborators on the shared test store."""
    return app_factory(db_session_factory, search_sync, object_store)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client for the graph API.

    ASGITransport returns only after the app's background tasks (search
    sync) have run, so tests can assert on index calls right after a
    request. Store commits happen before the response body is built.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_ok(response: Any, expected_status: int = 200) -> Any:
        """Assert a success status and return the JSON body."""
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        return response.json()

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """Assert an error status and the error envelope."""
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )
        return data

    @staticmethod
    def assert_validation_error(response: Any, field: str | None = None) -> dict[str, Any]:
        """Assert a 400 request validation error, optionally naming a field."""
        data = ApiAssertions.assert_error(response, 400, "VAL_REQUEST_INVALID")
        if field:
            fields = [
                err["field"]
                for err in data["error"]["details"]["validation_errors"]
            ]
            assert any(field in f for f in fields), (
                f"Expected validation error for '{field}', got {fields}"
            )
        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


@pytest.fixture
def make_note(client: AsyncClient):
    """Create a note through the API and return its body."""

    async def _make(name: str, content: str | None = None, **fields: Any) -> dict[str, Any]:
        response = await client.post(
            "/notes",
            json={"name": name, "content": content or f"About {name}", **fields},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def connect(client: AsyncClient):
    """Create an edge through the API and return the raw response."""

    async def _connect(source: str, target: str, **fields: Any):
        return await client.post(
            "/notes/edges",
            json={"source": source, "target": target, **fields},
        )

    return _connect
