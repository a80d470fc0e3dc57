# HTTP access (aiohttp) with bounded timeouts

import asyncio
import logging
from typing import Dict, Optional

import aiohttp
import attr

from emojifetch.codepoints import EmojiFetchError

logger = logging.getLogger(__name__)

BROWSER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
)


class TransportError(EmojiFetchError):
    pass


@attr.frozen
class Response:
    url: str
    status: int
    body: bytes = attr.field(default=b"", repr=lambda b: f"<{len(b)}b>")
    location: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400 and bool(self.location)


class Transport:
    """Minimal GET interface; the fetch pipeline only needs this much."""

    async def get(
        self, url: str, *, headers: Optional[Dict[str, str]] = None
    ) -> Response:
        raise NotImplementedError


class HttpTransport(Transport):
    def __init__(self, *, connect_timeout: float, read_timeout: float):
        self._timeout = aiohttp.ClientTimeout(
            sock_connect=connect_timeout, sock_read=read_timeout
        )
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._session:
            await self._session.close()
            self._session = None

    async def get(
        self, url: str, *, headers: Optional[Dict[str, str]] = None
    ) -> Response:
        if not self._session:
            raise TransportError(f"Transport not open for {url}")

        # Redirects are returned, not followed; callers decide how many hops.
        try:
            async with self._session.get(
                url, headers=headers, allow_redirects=False
            ) as resp:
                body = await resp.read()
                location = resp.headers.get("Location")
                logger.debug(f"GET {url} -> {resp.status} ({len(body)}b)")
                return Response(url, resp.status, body, location)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise TransportError(f"GET {url} failed: {exc!r}") from exc
