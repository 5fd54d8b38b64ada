# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol and value types for HTTP request transports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportRequest:
    """A fully prepared POST request."""

    url: str
    body: str
    headers: tuple[tuple[str, str], ...] = ()
    timeout: float | None = None  # Seconds, None = no timeout
    with_credentials: bool = False


@dataclass(frozen=True)
class TransportResponse:
    """A completed HTTP exchange."""

    status_code: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class TransportProtocol(Protocol):
    """
    Minimal protocol for HTTP request transports.

    The provider depends only on this interface, so the host environment
    decides how requests actually leave the process (pooled sockets via
    httpx, a test double, a proxy, ...).

    Implementations should raise TransportTimeoutError when their own
    timeout elapses. Any other exception is treated as a failure to
    reach the node.
    """

    async def send(self, request: TransportRequest) -> TransportResponse:
        """Submit the request and return the completed response."""
        ...

    async def aclose(self) -> None:
        """Release pooled connections."""
        ...


__all__ = ["TransportProtocol", "TransportRequest", "TransportResponse"]
