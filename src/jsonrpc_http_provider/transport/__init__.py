# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
HTTP transports for the provider.

Available components:
- TransportProtocol: interface the provider sends requests through
- TransportRequest, TransportResponse: request/response value types
- HttpxTransport: default implementation on httpx.AsyncClient
- AgentSet, create_pool, select_agents: keep-alive pool selection
"""

from .agents import AgentSet, create_pool, select_agents
from .base import TransportProtocol, TransportRequest, TransportResponse
from .httpx_transport import HttpxTransport

__all__ = [
    "AgentSet",
    "HttpxTransport",
    "TransportProtocol",
    "TransportRequest",
    "TransportResponse",
    "create_pool",
    "select_agents",
]
