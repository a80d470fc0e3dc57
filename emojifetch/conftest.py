from typing import Dict, List, Optional, Union

import pytest

from emojifetch import transport

CDN = "https://em-content.zobj.net/source/apple/419"
PAGE = "https://emojipedia.org/apple/ios-18.4"
PNG = b"\x89PNG\r\n\x1a\n" + b"\0" * 2000


class FakeTransport(transport.Transport):
    """Serves canned responses by URL; anything else is a 404."""

    def __init__(self):
        self.routes: Dict[str, Union[transport.Response, Exception]] = {}
        self.calls: List[str] = []
        self.headers: List[Optional[Dict[str, str]]] = []

    def serve(self, url: str, body: bytes = PNG, status: int = 200, **kw):
        self.routes[url] = transport.Response(url, status, body, **kw)

    def fail(self, url: str, message: str = "timed out"):
        self.routes[url] = transport.TransportError(message)

    async def get(self, url, *, headers=None):
        self.calls.append(url)
        self.headers.append(headers)
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        return route or transport.Response(url, 404, b"not found")


@pytest.fixture
def fake_transport():
    return FakeTransport()
