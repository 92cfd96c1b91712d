"""
Graph API Client.

Async HTTP client for the notes/edges wire contract used by the client
graph state. All requests include X-Frontend-ID: client for log routing.
"""

from typing import Any

import httpx

from second_brain.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class ApiRequestError(Exception):
    """A Graph API call failed (non-2xx response or no response at all)."""

    def __init__(self, status_code: int | None, message: str, code: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(message)


def _error_message(response: httpx.Response) -> tuple[str, str | None]:
    """Pull a human message and code out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message", f"HTTP {response.status_code}"), error.get("code")
        if "detail" in body:
            return str(body["detail"]), None
    return f"HTTP {response.status_code}", None


class GraphApiClient:
    """
    HTTP client for the Graph API.

    Usage:
        api = GraphApiClient.from_config()
        notes = await api.list_notes()
        edge = await api.create_edge(notes[0]["id"], notes[1]["id"])
        await api.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls) -> "GraphApiClient":
        """Build a client from application.yaml and client.yaml."""
        from second_brain.backend.core.config import get_app_config, get_server_base_url

        base_url, _ = get_server_base_url()
        return cls(base_url, timeout=get_app_config().client.timeout_seconds)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "client"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Make a request and return the decoded JSON body.

        Raises:
            ApiRequestError: On a non-2xx response or a transport failure
        """
        client = await self._get_client()

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger, "client", "warning",
                "API request failed", method=method, path=path, error=str(e),
            )
            raise ApiRequestError(None, f"Could not reach server: {e}") from e

        log_with_source(
            logger, "client", "debug",
            "API response", method=method, path=path, status_code=response.status_code,
        )

        if response.is_error:
            message, code = _error_message(response)
            raise ApiRequestError(response.status_code, message, code)
        return response.json()

    # Notes

    async def list_notes(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/notes")

    async def get_note(self, note_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/notes/{note_id}")

    async def create_note(self, fields: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", "/notes", json=fields)

    async def update_note(self, note_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PUT", f"/notes/{note_id}", json=fields)

    async def delete_note(self, note_id: str) -> dict[str, Any]:
        return await self.request("DELETE", f"/notes/{note_id}")

    async def upload(self, filename: str, data: bytes) -> str:
        """Upload a file and return its public URL."""
        body = await self.request("POST", "/notes/upload", files={"file": (filename, data)})
        return body["url"]

    # Edges

    async def list_edges(self) -> list[dict[str, Any]]:
        return await self.request("GET", "/notes/edges")

    async def list_edges_for_note(self, note_id: str) -> list[dict[str, Any]]:
        return await self.request("GET", f"/notes/edges/note/{note_id}")

    async def create_edge(
        self,
        source: str,
        target: str,
        style: dict[str, Any] | None = None,
        **fields: Any,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"source": source, "target": target, **fields}
        if style is not None:
            payload["style"] = style
        return await self.request("POST", "/notes/edges", json=payload)

    async def delete_edge(self, edge_id: str) -> dict[str, Any]:
        return await self.request("DELETE", f"/notes/edges/{edge_id}")
