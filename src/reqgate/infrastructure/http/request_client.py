"""httpx client whose requests run through a concurrency controller.

Each verb call becomes one governed task: the controller decides whether
it runs now, waits in the queue, or is rejected, and races it against
the per-task deadline.  Everything protocol-level (base URL prefixing,
headers, redirects, body encoding) is left to ``httpx``.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from reqgate.domain.ports.concurrency import ConcurrencyControllerPort
from reqgate.infrastructure.concurrency import ConcurrencyController

log = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = "reqgate/0.1.0"


class RequestClient:
    """Governed HTTP client.

    Parameters:
        base_url: Prefix for relative URLs (only used when this instance
            creates its own ``httpx.AsyncClient``).
        controller: Controller that admits each request.  Defaults to a
            fresh :class:`ConcurrencyController` with default limits.
        http_client: Pre-built ``httpx.AsyncClient``.  When given, the
            caller owns its lifecycle and :meth:`aclose` leaves it open.
        timeout_seconds: Transport-level timeout for a self-created client.
        follow_redirects: Redirect policy for a self-created client.
        headers: Default headers for a self-created client.

    Transport errors (``httpx.HTTPError`` subclasses, including
    ``httpx.HTTPStatusError`` for 4xx/5xx) propagate unchanged through
    the controller.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        controller: ConcurrencyControllerPort | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._controller = controller or ConcurrencyController()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                base_url=base_url,
                timeout=timeout_seconds,
                follow_redirects=follow_redirects,
                headers={"User-Agent": DEFAULT_USER_AGENT, **(headers or {})},
            )
        self._client = http_client

    @property
    def controller(self) -> ConcurrencyControllerPort:
        return self._controller

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._client

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RequestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request under the controller's limits.

        Extra keyword arguments go straight to ``httpx.AsyncClient.request``
        (``params``, ``json``, ``content``, ``headers``, ...).
        """
        method = method.upper()

        async def _send() -> httpx.Response:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response

        log.debug("http_request", method=method, url=url)
        return await self._controller.execute(_send)

    async def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Like :meth:`request`, returning the decoded JSON body."""
        response = await self.request(method, url, **kwargs)
        return response.json()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def head(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("HEAD", url, **kwargs)

    # ------------------------------------------------------------------
    # Controller passthroughs
    # ------------------------------------------------------------------

    @property
    def current_concurrent(self) -> int:
        return self._controller.current_concurrent

    @property
    def queue_length(self) -> int:
        return self._controller.queue_length

    def clear_queue(self) -> int:
        """Fail every request still waiting for a slot."""
        return self._controller.clear_queue()

    def snapshot(self) -> dict[str, Any]:
        return self._controller.snapshot()
