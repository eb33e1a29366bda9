# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import asyncio
import logging
import time
from types import TracebackType
from typing import Any, Optional

import httpx

from postgrest_builder.exceptions import RequestNetworkError, TimeoutException
from postgrest_builder.transport.types import (
    GatewayRequest,
    GatewayResponse,
    HttpAsyncBackend,
)

logger = logging.getLogger(__name__)


class HTTPXAsyncBackend(HttpAsyncBackend):
    """
    Sends gateway requests through a single ``httpx.AsyncClient``.

    The underlying client is created on first use and shared by every request,
    so connections are pooled across all builders derived from the same
    ``Client``.
    """

    def __init__(
        self,
        default_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.default_timeout = default_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """
        The pooled client of the running event loop. Pooled connections are
        bound to the loop that opened them, so a new client is created when
        the backend is used from another loop (successive ``asyncio.run``).
        """
        loop = asyncio.get_running_loop()
        if self._client is None or self._client.is_closed or self._loop is not loop:
            if self._client is not None and not self._client.is_closed:
                logger.debug("Event loop changed, dropping the pooled httpx client")
            self._client = httpx.AsyncClient(transport=self._transport)
            self._loop = loop
        return self._client

    async def request(
        self,
        request: GatewayRequest,
    ) -> GatewayResponse:

        start_time = time.time()

        timeout = (
            request.timeout if request.timeout is not None else self.default_timeout
        )

        # The query string is rendered by the request itself: httpx would
        # regroup repeated keys and the gateway is sensitive to pair order.
        request_kwargs: dict[str, Any] = {
            "method": request.method,
            "url": request.full_url(),
            "headers": request.headers,
            "timeout": timeout,
        }
        if request.body is not None:
            request_kwargs["content"] = request.body

        try:
            response = await self.client.request(**request_kwargs)
        except httpx.TimeoutException as err:
            logger.warning(
                "Request timed out: %s %s", request.method, request.url
            )
            raise TimeoutException(f"Request timed out: {err}", request) from err
        except httpx.NetworkError as err:
            logger.warning(
                "Network error on request: %s %s (%s)",
                request.method,
                request.url,
                err,
            )
            raise RequestNetworkError(
                request=request, backend_request=err.request
            ) from err

        elapsed_time = time.time() - start_time

        return GatewayResponse(
            status_code=response.status_code,
            data=response.content,
            headers=dict(response.headers),
            elapsed_time=elapsed_time,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._loop = None

    async def __aenter__(self) -> "HTTPXAsyncBackend":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()
