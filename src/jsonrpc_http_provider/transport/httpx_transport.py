# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""HTTP transport backed by httpx.AsyncClient."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..exceptions import TransportError, TransportTimeoutError
from .agents import AgentSet
from .base import TransportRequest, TransportResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Async HTTP transport over pooled connections.

    Requests are routed through the pools in the AgentSet by URL scheme;
    relative request URLs are resolved against the agent's base URL.

    Cookies only persist between requests that set ``with_credentials``;
    otherwise the cookie jar is emptied after each exchange.
    """

    def __init__(
        self,
        agents: AgentSet | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **client_kwargs: Any,
    ) -> None:
        """
        Initialize the transport.

        Args:
            agents: Pools and base URL to route requests through
            transport: Fallback httpx transport for schemes without a pool
            **client_kwargs: Extra keyword arguments for httpx.AsyncClient
        """
        agents = agents or AgentSet()
        self._client = httpx.AsyncClient(
            transport=transport,
            mounts=agents.mounts() or None,
            base_url=agents.base_url or "",
            **client_kwargs,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(self, request: TransportRequest) -> TransportResponse:
        try:
            response = await self._client.post(
                request.url,
                content=request.body.encode("utf-8"),
                headers=list(request.headers),
                timeout=request.timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(f"Request to {request.url} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {request.url} failed: {e}") from e
        finally:
            if not request.with_credentials:
                self._client.cookies.clear()

        return TransportResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["HttpxTransport"]
