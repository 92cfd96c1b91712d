"""
Search Index Synchronizer.

Mirrors note content into the search index after the graph store has
committed. Every index call goes through the resilience stack:

    Circuit Breaker (aiobreaker) → Retry (tenacity) → Timeout → Call

upsert/remove/rebuild are best-effort: failures are logged as resilience
events and swallowed, so an unreachable index never fails or slows a note
operation beyond the bounded attempt. Only `search` surfaces failures,
as UpstreamUnavailableError.

Usage:
    sync = SearchSynchronizer.from_config(SearchIndexClient.from_config())
    await sync.ensure_collection()
    await sync.upsert(NoteResponse.model_validate(note))
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta
from typing import Any, TypeVar

import aiobreaker
import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from second_brain.backend.core.exceptions import UpstreamUnavailableError
from second_brain.backend.core.logging import get_logger, log_with_source
from second_brain.backend.core.resilience import ResilienceLogger, log_retry
from second_brain.backend.schemas.note import NoteResponse, NoteSearchHit
from second_brain.backend.search.client import SearchIndexClient
from second_brain.backend.search.schema import notes_collection_schema, to_search_document

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (httpx.TransportError, TimeoutError)


def _exact_filter(field: str, value: str) -> str:
    """
    Exact-match filter clause with the value quoted in backticks.

    Quoting keeps `&&`, `,`, `[` and `]` in a value from being read as
    filter syntax. Backticks cannot be escaped inside a quoted value and
    are dropped.
    """
    return f"{field}:=`{value.replace('`', '')}`"


class SearchSynchronizer:
    """Best-effort mirror of notes into the search index."""

    def __init__(
        self,
        client: SearchIndexClient,
        collection: str = "notes",
        timeout_seconds: float = 2.0,
        retry_attempts: int = 2,
        min_wait_seconds: float = 0.1,
        max_wait_seconds: float = 1.0,
        breaker: aiobreaker.CircuitBreaker | None = None,
        enabled: bool = True,
    ) -> None:
        self.client = client
        self.collection = collection
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = retry_attempts
        self.min_wait_seconds = min_wait_seconds
        self.max_wait_seconds = max_wait_seconds
        self.enabled = enabled
        self.breaker = breaker or aiobreaker.CircuitBreaker(
            fail_max=5,
            timeout_duration=timedelta(seconds=30),
            listeners=[ResilienceLogger("search-index")],
        )

    @classmethod
    def from_config(cls, client: SearchIndexClient) -> "SearchSynchronizer":
        """Build a synchronizer from search.yaml and features.yaml."""
        from second_brain.backend.core.config import get_app_config
        from second_brain.backend.core.resilience import create_circuit_breaker

        app_config = get_app_config()
        search_config = app_config.search
        return cls(
            client,
            collection=search_config.collection,
            timeout_seconds=search_config.timeout_seconds,
            retry_attempts=search_config.retry.attempts,
            min_wait_seconds=search_config.retry.min_wait_seconds,
            max_wait_seconds=search_config.retry.max_wait_seconds,
            breaker=create_circuit_breaker(
                "search-index",
                fail_max=search_config.circuit_breaker.fail_max,
                timeout_duration=search_config.circuit_breaker.timeout_duration,
            ),
            enabled=app_config.features.search_sync_enabled,
        )

    async def ensure_collection(self) -> bool:
        """
        Create the notes collection if the index does not have it.

        Returns:
            True when the collection exists afterwards, False when the
            index could not be reached (search is then degraded, not fatal).
        """
        if not self.enabled:
            return False

        try:
            existing = await self._call(self.client.retrieve_collection, self.collection)
            if existing is None:
                await self._call(
                    self.client.create_collection,
                    notes_collection_schema(self.collection),
                )
                log_with_source(
                    logger, "search", "info",
                    "Search collection created", collection=self.collection,
                )
            return True
        except Exception as e:
            log_with_source(
                logger, "search", "error",
                "Search collection bootstrap failed",
                collection=self.collection,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def upsert(self, note: NoteResponse) -> bool:
        """Write the search document for a note. Never raises."""
        if not self.enabled:
            return False

        try:
            await self._call(
                self.client.upsert_document,
                self.collection,
                to_search_document(note),
            )
        except Exception as e:
            self._log_sync_failure("upsert", note.id, e)
            return False

        log_with_source(logger, "search", "debug", "Search document upserted", note_id=note.id)
        return True

    async def remove(self, note_id: str) -> bool:
        """Delete the search document for a note. Never raises."""
        if not self.enabled:
            return False

        try:
            await self._call(self.client.delete_document, self.collection, note_id)
        except Exception as e:
            self._log_sync_failure("remove", note_id, e)
            return False

        log_with_source(logger, "search", "debug", "Search document removed", note_id=note_id)
        return True

    async def rebuild(self, notes: Iterable[NoteResponse]) -> int:
        """
        Replay every note into the index.

        Returns:
            Number of notes written successfully
        """
        await self.ensure_collection()
        written = 0
        for note in notes:
            if await self.upsert(note):
                written += 1
        log_with_source(logger, "search", "info", "Search index rebuilt", written=written)
        return written

    async def search(
        self,
        q: str,
        tag: str | None = None,
        color: str | None = None,
        limit: int = 20,
    ) -> list[NoteSearchHit]:
        """
        Full-text search over note names and content.

        Raises:
            UpstreamUnavailableError: If the index cannot be queried
        """
        filters = []
        if tag:
            filters.append(_exact_filter("tag", tag))
        if color:
            filters.append(_exact_filter("color", color))

        try:
            result = await self._call(
                self.client.search,
                self.collection,
                q,
                filter_by=" && ".join(filters) or None,
                per_page=limit,
            )
        except Exception as e:
            raise UpstreamUnavailableError("Search index unavailable") from e

        return [
            NoteSearchHit.model_validate(hit["document"])
            for hit in result.get("hits", [])
        ]

    async def _call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run an index call through breaker, retry and timeout."""
        return await self.breaker.call_async(self._with_retry, fn, *args, **kwargs)

    async def _with_retry(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(
                multiplier=self.min_wait_seconds,
                min=self.min_wait_seconds,
                max=self.max_wait_seconds,
            ),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=log_retry,
            reraise=True,
        ):
            with attempt:
                async with asyncio.timeout(self.timeout_seconds):
                    return await fn(*args, **kwargs)
        raise AssertionError("unreachable")

    def _log_sync_failure(self, operation: str, note_id: str, error: Exception) -> None:
        log_with_source(
            logger, "search", "warning",
            "Search sync failed",
            resilience_event="search_sync_failed",
            operation=operation,
            note_id=note_id,
            error=str(error),
            error_type=type(error).__name__,
        )
