"""
Integration Tests for Notes API.

Tests the notes endpoints with a real graph store and a fake search index.
"""

from unittest.mock import MagicMock

import httpx
import pytest
from httpx import AsyncClient

from second_brain.backend.core.exceptions import UpstreamUnavailableError


class TestCreateNote:
    """Tests for POST /notes."""

    @pytest.mark.asyncio
    async def test_create_note_applies_defaults(self, client: AsyncClient, api):
        response = await client.post(
            "/notes",
            json={"name": "Graph theory", "content": "Vertices and edges."},
        )

        data = api.assert_ok(response, expected_status=201)
        assert data["id"]
        assert data["name"] == "Graph theory"
        assert data["content"] == "Vertices and edges."
        assert data["color"] == "blue"
        assert data["tag"] == ""
        assert data["imageUrl"] == ""
        assert data["position"] == {"x": 0.0, "y": 0.0}
        assert data["createdAt"] == data["updatedAt"]

    @pytest.mark.asyncio
    async def test_created_note_is_readable(self, client: AsyncClient, make_note):
        created = await make_note(
            "Algebra",
            color="green",
            tag="math",
            position={"x": 120.5, "y": -40},
        )

        response = await client.get(f"/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_missing_content_fails(self, client: AsyncClient, api):
        response = await client.post("/notes", json={"name": "No body"})

        api.assert_validation_error(response, field="content")

    @pytest.mark.asyncio
    async def test_empty_name_fails(self, client: AsyncClient, api):
        response = await client.post("/notes", json={"name": "", "content": "x"})

        api.assert_validation_error(response, field="name")

    @pytest.mark.asyncio
    async def test_create_mirrors_into_search_index(
        self,
        client: AsyncClient,
        search_index: MagicMock,
        make_note,
    ):
        created = await make_note("Indexed", tag="demo")

        search_index.upsert_document.assert_awaited_once()
        collection, document = search_index.upsert_document.await_args.args
        assert collection == "notes"
        assert document["id"] == created["id"]
        assert document["name"] == "Indexed"
        assert document["tag"] == "demo"

    @pytest.mark.asyncio
    async def test_create_succeeds_when_search_index_unreachable(
        self,
        client: AsyncClient,
        search_index: MagicMock,
        api,
    ):
        """The graph store is authoritative; index failures are not reported."""
        search_index.upsert_document.side_effect = httpx.ConnectError("refused")

        response = await client.post(
            "/notes",
            json={"name": "Offline index", "content": "Still saved."},
        )

        created = api.assert_ok(response, expected_status=201)
        listed = (await client.get("/notes")).json()
        assert [n["id"] for n in listed] == [created["id"]]


class TestListAndGetNotes:
    """Tests for GET /notes and GET /notes/{id}."""

    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient):
        response = await client.get("/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_returns_every_note(self, client: AsyncClient, make_note):
        a = await make_note("A")
        b = await make_note("B")

        response = await client.get("/notes")

        assert {n["id"] for n in response.json()} == {a["id"], b["id"]}

    @pytest.mark.asyncio
    async def test_get_missing_note(self, client: AsyncClient, api):
        response = await client.get("/notes/does-not-exist")

        api.assert_error(response, 404, "RES_NOT_FOUND")


class TestUpdateNote:
    """Tests for PUT /notes/{id}."""

    @pytest.mark.asyncio
    async def test_position_only_update_leaves_other_fields(
        self,
        client: AsyncClient,
        make_note,
    ):
        created = await make_note("Movable", color="red", tag="t")

        response = await client.put(
            f"/notes/{created['id']}",
            json={"position": {"x": 300, "y": 150}},
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["position"] == {"x": 300.0, "y": 150.0}
        for field in ("id", "name", "content", "color", "tag", "imageUrl", "createdAt"):
            assert updated[field] == created[field]
        assert updated["updatedAt"] >= created["updatedAt"]

    @pytest.mark.asyncio
    async def test_partial_position_keeps_other_coordinate(
        self,
        client: AsyncClient,
        make_note,
    ):
        created = await make_note("Half", position={"x": 10, "y": 20})

        response = await client.put(
            f"/notes/{created['id']}",
            json={"position": {"x": 99}},
        )

        assert response.json()["position"] == {"x": 99.0, "y": 20.0}

    @pytest.mark.asyncio
    async def test_update_content_fields(self, client: AsyncClient, make_note):
        created = await make_note("Draft")

        response = await client.put(
            f"/notes/{created['id']}",
            json={"name": "Final", "content": "Rewritten", "imageUrl": "https://x/y.png"},
        )

        updated = response.json()
        assert updated["name"] == "Final"
        assert updated["content"] == "Rewritten"
        assert updated["imageUrl"] == "https://x/y.png"
        assert updated["position"] == created["position"]

    @pytest.mark.asyncio
    async def test_update_missing_note(self, client: AsyncClient, api):
        response = await client.put("/notes/nope", json={"name": "x"})

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_update_reindexes_note(
        self,
        client: AsyncClient,
        search_index: MagicMock,
        make_note,
    ):
        created = await make_note("Before")
        search_index.upsert_document.reset_mock()

        await client.put(f"/notes/{created['id']}", json={"name": "After"})

        _, document = search_index.upsert_document.await_args.args
        assert document["name"] == "After"


class TestDeleteNote:
    """Tests for DELETE /notes/{id}."""

    @pytest.mark.asyncio
    async def test_delete_note(self, client: AsyncClient, make_note, api):
        created = await make_note("Doomed")

        response = await client.delete(f"/notes/{created['id']}")

        assert api.assert_ok(response) == {
            "message": "Note and related connections deleted",
        }
        api.assert_error(await client.get(f"/notes/{created['id']}"), 404)

    @pytest.mark.asyncio
    async def test_delete_missing_note(self, client: AsyncClient, api):
        response = await client.delete("/notes/nope")

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_delete_removes_search_document(
        self,
        client: AsyncClient,
        search_index: MagicMock,
        make_note,
    ):
        created = await make_note("Gone")

        await client.delete(f"/notes/{created['id']}")

        search_index.delete_document.assert_awaited_once_with("notes", created["id"])


class TestUpload:
    """Tests for POST /notes/upload."""

    @pytest.mark.asyncio
    async def test_upload_returns_url(
        self,
        client: AsyncClient,
        object_store: MagicMock,
        api,
    ):
        response = await client.post(
            "/notes/upload",
            files={"file": ("diagram.png", b"\x89PNG-bytes", "image/png")},
        )

        data = api.assert_ok(response)
        assert data == {"url": "https://res.example.com/second-brain-notes/diagram.png"}
        object_store.upload.assert_awaited_once_with(b"\x89PNG-bytes", filename="diagram.png")

    @pytest.mark.asyncio
    async def test_upload_without_file(self, client: AsyncClient, api):
        response = await client.post("/notes/upload")

        api.assert_error(response, 400)

    @pytest.mark.asyncio
    async def test_upload_empty_file(self, client: AsyncClient, api):
        response = await client.post(
            "/notes/upload",
            files={"file": ("empty.png", b"", "image/png")},
        )

        api.assert_error(response, 400)

    @pytest.mark.asyncio
    async def test_upload_storage_failure(
        self,
        client: AsyncClient,
        object_store: MagicMock,
        api,
    ):
        object_store.upload.side_effect = UpstreamUnavailableError("Object storage unavailable")

        response = await client.post(
            "/notes/upload",
            files={"file": ("a.png", b"data", "image/png")},
        )

        api.assert_error(response, 500, "SYS_UPSTREAM_UNAVAILABLE")


class TestSearch:
    """Tests for GET /notes/search."""

    @pytest.mark.asyncio
    async def test_search_returns_hits(self, client: AsyncClient, search_index: MagicMock):
        search_index.search.return_value = {
            "hits": [
                {"document": {"id": "n1", "name": "Graph theory", "color": "blue", "tag": "math"}},
            ],
        }

        response = await client.get("/notes/search", params={"q": "graph", "tag": "math"})

        assert response.status_code == 200
        assert response.json() == [
            {"id": "n1", "name": "Graph theory", "color": "blue", "tag": "math"},
        ]
        assert search_index.search.await_args.kwargs["filter_by"] == "tag:=`math`"

    @pytest.mark.asyncio
    async def test_search_requires_query(self, client: AsyncClient, api):
        response = await client.get("/notes/search")

        api.assert_validation_error(response, field="q")

    @pytest.mark.asyncio
    async def test_search_index_down(self, client: AsyncClient, search_index: MagicMock, api):
        search_index.search.side_effect = httpx.ConnectError("refused")

        response = await client.get("/notes/search", params={"q": "graph"})

        api.assert_error(response, 500, "SYS_UPSTREAM_UNAVAILABLE")
