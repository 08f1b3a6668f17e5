"""HTTP transport for downloading the metadata document."""

from __future__ import annotations

import asyncio
import logging
from typing import NamedTuple, Protocol

import aiohttp

from emojimash._constants import USER_AGENT
from emojimash.exceptions import RefreshNetworkError

_logger = logging.getLogger(__name__)


class FetchedDocument(NamedTuple):
    status: int
    body: bytes


class Transport(Protocol):
    """Structural transport interface used by the refresh coordinator.

    Implementations return whatever the remote sent, status code included,
    and raise :class:`RefreshNetworkError` only when no response arrived.
    Having a protocol here makes it easy to pass test doubles.
    """

    async def fetch(self, url: str) -> FetchedDocument:
        ...


class HttpTransport:
    """aiohttp based transport with a hard upper bound per download.

    A session passed in is borrowed and left open by :meth:`close`;
    otherwise one is created on first use and owned by the transport.
    """

    def __init__(self, *, timeout: float, session: aiohttp.ClientSession | None = None) -> None:
        self._timeout = timeout
        self._external_session = session is not None
        self._http = session

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None:
            self._http = aiohttp.ClientSession()
        return self._http

    async def close(self) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
        self._http = None

    async def fetch(self, url: str) -> FetchedDocument:
        headers = {"user-agent": USER_AGENT}
        _logger.debug("GET %s", url)

        try:
            async with asyncio.timeout(self._timeout):
                async with self._session().get(
                    url,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self._timeout),
                ) as resp:
                    body = await resp.read()
                    return FetchedDocument(status=resp.status, body=body)
        except TimeoutError as exc:
            raise RefreshNetworkError(
                f"Download of {url} timed out after {self._timeout:g}s",
                url=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise RefreshNetworkError(f"Request to {url} failed: {exc}", url=url) from exc
