# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Keep-alive connection pool selection.

A provider talks to a single node, so it only needs a pool for the
node's scheme: an HTTPS pool when the host starts with ``https``, an
HTTP pool otherwise. A caller-supplied CustomAgent replaces this
selection entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..config import ProviderConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentSet:
    """Pools and base URL handed to the HTTP client."""

    http: httpx.AsyncBaseTransport | None = None
    https: httpx.AsyncBaseTransport | None = None
    base_url: str | None = None

    def mounts(self) -> dict[str, httpx.AsyncBaseTransport]:
        """httpx mount mapping for the pools that are set."""
        mounts: dict[str, httpx.AsyncBaseTransport] = {}
        if self.http is not None:
            mounts["http://"] = self.http
        if self.https is not None:
            mounts["https://"] = self.https
        return mounts


def create_pool(keep_alive: bool) -> httpx.AsyncHTTPTransport:
    """
    Create a connection pool.

    Args:
        keep_alive: Keep idle connections open for reuse. When False every
            connection is closed once its response has been read.
    """
    if keep_alive:
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
    else:
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=0)
    return httpx.AsyncHTTPTransport(limits=limits)


def select_agents(config: ProviderConfig) -> AgentSet:
    """
    Pick the pools for a provider.

    Returns the custom agent's pools unchanged when one is configured,
    otherwise a single new pool for the host's scheme.
    """
    if config.agent is not None:
        return AgentSet(
            http=config.agent.http,
            https=config.agent.https,
            base_url=config.agent.base_url,
        )
    if config.is_https:
        logger.debug(f"Creating HTTPS pool (keep_alive={config.keep_alive})")
        return AgentSet(https=create_pool(config.keep_alive))
    logger.debug(f"Creating HTTP pool (keep_alive={config.keep_alive})")
    return AgentSet(http=create_pool(config.keep_alive))


__all__ = ["AgentSet", "create_pool", "select_agents"]
