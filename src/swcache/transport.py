"""httpx transport that routes application requests through a WorkerHost."""

import httpx

from swcache.host import WorkerHost


class InterceptingTransport(httpx.AsyncBaseTransport):
    """Lets an application's ``httpx.AsyncClient`` go through the cache layer.

    The network client used by the host must not use this transport.
    """

    def __init__(self, host: WorkerHost) -> None:
        self._host = host

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._host.fetch(request)

    async def aclose(self) -> None:
        await self._host.shutdown()
