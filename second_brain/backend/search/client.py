"""
Search Index Client.

Thin async HTTP client for a Typesense-compatible search index. It knows the
REST endpoints and nothing about retries or failure policy; that lives in
SearchSynchronizer.
"""

from typing import Any

import httpx


class SearchIndexClient:
    """
    HTTP client for the search index.

    Usage:
        client = SearchIndexClient("http://localhost:8108", api_key="xyz")
        await client.upsert_document("notes", {"id": "1", ...})
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"X-TYPESENSE-API-KEY": api_key},
            transport=transport,
        )

    @classmethod
    def from_config(cls) -> "SearchIndexClient":
        """Build a client from search.yaml and the SEARCH_API_KEY secret."""
        from second_brain.backend.core.config import get_app_config, get_search_url, get_settings

        search_config = get_app_config().search
        return cls(
            get_search_url(),
            api_key=get_settings().search_api_key,
            timeout=search_config.timeout_seconds,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if not self._client.is_closed:
            await self._client.aclose()

    async def retrieve_collection(self, name: str) -> dict[str, Any] | None:
        """Return the collection definition, or None if it does not exist."""
        response = await self._client.get(f"/collections/{name}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    async def create_collection(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Create a collection from its schema."""
        response = await self._client.post("/collections", json=schema)
        response.raise_for_status()
        return response.json()

    async def upsert_document(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        """Insert or replace a document by id."""
        response = await self._client.post(
            f"/collections/{collection}/documents",
            params={"action": "upsert"},
            json=document,
        )
        response.raise_for_status()
        return response.json()

    async def delete_document(self, collection: str, document_id: str) -> bool:
        """Delete a document. Returns False when it was already absent."""
        response = await self._client.delete(f"/collections/{collection}/documents/{document_id}")
        if response.status_code == 404:
            return False
        response.raise_for_status()
        return True

    async def search(
        self,
        collection: str,
        q: str,
        query_by: str = "name,content",
        filter_by: str | None = None,
        per_page: int = 20,
    ) -> dict[str, Any]:
        """Run a search query against a collection."""
        params: dict[str, Any] = {"q": q, "query_by": query_by, "per_page": per_page}
        if filter_by:
            params["filter_by"] = filter_by
        response = await self._client.get(
            f"/collections/{collection}/documents/search",
            params=params,
        )
        response.raise_for_status()
        return response.json()

    async def health(self) -> bool:
        """Return True when the index reports itself healthy."""
        response = await self._client.get("/health")
        response.raise_for_status()
        return bool(response.json().get("ok"))
