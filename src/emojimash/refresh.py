"""Refresh coordination: fetch, parse, archive, replace.

At most one refresh runs at a time. A call that arrives while another is in
flight returns :attr:`RefreshStatus.ALREADY_IN_PROGRESS` immediately and does
not touch the network; it is not queued and does not receive the in-flight
result.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from emojimash._transport import Transport
from emojimash.archive import DocumentArchive
from emojimash.exceptions import (
    RefreshError,
    RefreshHttpStatusError,
    RefreshNetworkError,
    RefreshPersistError,
)
from emojimash.ingestion.metadata import parse_metadata
from emojimash.models.refresh import RefreshOutcome, RefreshSource, RefreshStatus
from emojimash.store import MappingStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _in_thread(func: Callable[..., T], /, *args: Any) -> T:
    """Run *func* in a worker thread that cannot be abandoned.

    If the caller is cancelled, the worker is left to finish before the
    cancellation propagates, so nothing guarded by the caller outlives it.
    """
    worker = asyncio.ensure_future(asyncio.to_thread(func, *args))
    try:
        return await asyncio.shield(worker)
    except asyncio.CancelledError:
        while not worker.done():
            with contextlib.suppress(asyncio.CancelledError):
                await asyncio.wait([worker])
        if not worker.cancelled() and worker.exception() is not None:
            _logger.debug("Worker of a cancelled refresh failed", exc_info=worker.exception())
        raise


class RefreshGuard:
    """In-progress flag with compare-and-swap semantics.

    :meth:`try_begin` sets the flag as one atomic step and returns an
    ownership token, or ``None`` if the flag was already set. Only the
    holder of that token may :meth:`end` it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: object | None = None

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    def try_begin(self) -> object | None:
        if not self._lock.acquire(blocking=False):
            return None
        token = object()
        self._token = token
        return token

    def end(self, token: object) -> None:
        if token is None or token is not self._token:
            raise RuntimeError("refresh guard released by a caller that does not hold it")
        self._token = None
        self._lock.release()


class RefreshCoordinator:
    """Owns the refresh protocol and the in-progress guard."""

    def __init__(
        self,
        store: MappingStore,
        transport: Transport,
        archive: DocumentArchive,
        *,
        url: str,
        fetch_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._transport = transport
        self._archive = archive
        self._url = url
        self._fetch_timeout = fetch_timeout
        self._clock = clock
        self._guard = RefreshGuard()
        self._last_outcome: RefreshOutcome | None = None
        self._last_error: RefreshError | None = None

    @property
    def in_progress(self) -> bool:
        return self._guard.in_progress

    @property
    def last_outcome(self) -> RefreshOutcome | None:
        """Outcome of the last refresh that completed."""
        return self._last_outcome

    @property
    def last_error(self) -> RefreshError | None:
        """Error of the last refresh, cleared by the next success."""
        return self._last_error

    async def refresh(self) -> RefreshOutcome:
        """Download the remote document and replace the mapping with it.

        Raises a :class:`RefreshError` subclass naming the failing stage;
        the previous snapshot stays published in that case.
        """
        return await self._guarded(RefreshSource.REMOTE, self._fetch_remote)

    async def load_archive(self) -> RefreshOutcome | None:
        """Replace the mapping with the archived document, if there is one.

        Returns ``None`` when no archive exists.
        """
        if not await asyncio.to_thread(self._archive.exists):
            return None
        return await self._guarded(RefreshSource.ARCHIVE, self._read_archive)

    async def _guarded(
        self,
        source: RefreshSource,
        load: Callable[[], Awaitable[bytes]],
    ) -> RefreshOutcome:
        token = self._guard.try_begin()
        if token is None:
            _logger.info("Refresh requested while another is running; skipping")
            return RefreshOutcome.already_in_progress()

        started_at = datetime.now(UTC)
        t0 = self._clock()
        _logger.info("Refresh from %s started", source)
        try:
            body = await load()
            outcome = await self._ingest(body, source, started_at, t0)
        except RefreshError as exc:
            self._last_error = exc
            _logger.warning("Refresh from %s failed at %s stage: %s", source, exc.stage, exc)
            raise
        finally:
            self._guard.end(token)

        self._last_outcome = outcome
        self._last_error = None
        _logger.info(
            "Refresh from %s completed: %d pairs from %d records (%d skipped, %d duplicates) in %.2fs",
            source,
            len(self._store),
            outcome.record_count,
            outcome.skipped_count,
            outcome.duplicate_count,
            outcome.duration_s,
        )
        return outcome

    async def _fetch_remote(self) -> bytes:
        try:
            async with asyncio.timeout(self._fetch_timeout):
                document = await self._transport.fetch(self._url)
        except TimeoutError as exc:
            raise RefreshNetworkError(
                f"Download of {self._url} did not finish within {self._fetch_timeout:g}s",
                url=self._url,
            ) from exc
        if not 200 <= document.status < 300:
            snippet = document.body[:200].decode("utf-8", errors="replace")
            raise RefreshHttpStatusError(
                f"HTTP {document.status} from {self._url}: {snippet}",
                status_code=document.status,
                url=self._url,
            )
        return document.body

    async def _read_archive(self) -> bytes:
        try:
            return await _in_thread(self._archive.read)
        except OSError as exc:
            raise RefreshPersistError(f"Failed to read archived metadata {self._archive.path}: {exc}") from exc

    async def _write_archive(self, body: bytes) -> None:
        try:
            await _in_thread(self._archive.write, body)
        except OSError as exc:
            raise RefreshPersistError(
                f"Failed to archive metadata to {self._archive.path}: {exc}",
                url=self._url,
            ) from exc

    async def _ingest(
        self,
        body: bytes,
        source: RefreshSource,
        started_at: datetime,
        t0: float,
    ) -> RefreshOutcome:
        # Parsing and indexing run off the event loop; lookups keep reading
        # the previous snapshot until the new one is published here, on the
        # loop, after every worker has returned.
        parsed = await _in_thread(parse_metadata, body)
        # Only a document that parsed is archived, so a bad download never
        # replaces the last good copy used for warm starts.
        if source == RefreshSource.REMOTE:
            await self._write_archive(body)
        snapshot = await _in_thread(self._store.prepare, parsed.records)
        self._store.publish(snapshot)
        return RefreshOutcome(
            status=RefreshStatus.COMPLETED,
            source=source,
            record_count=snapshot.record_count,
            skipped_count=parsed.skipped + snapshot.ignored_count,
            duplicate_count=snapshot.duplicate_count,
            document_bytes=len(body),
            started_at=started_at,
            duration_s=self._clock() - t0,
        )
