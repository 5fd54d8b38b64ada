# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""JSON-RPC HTTP Provider - JSON-RPC over HTTP with bearer-token refresh.

This library sends JSON-RPC payloads to a node over HTTP/HTTPS through
keep-alive connection pools, and keeps an optional bearer token fresh in
the background.

Key Features:
    - Callback (``send``) and awaitable (``request``) request styles
    - Distinct timeout, invalid-response and connection-failure errors
    - Periodic token refresh with single-flight fetches and backoff retry
    - Proactive refresh of JWTs whose ``exp`` claim has passed
    - Pluggable transport protocol, httpx by default
    - Optional Prometheus counters

Quick Start:
    >>> from jsonrpc_http_provider import HttpRpcProvider
    >>>
    >>> async def fetch_token() -> str:
    ...     return await my_identity_client.access_token()
    >>>
    >>> provider = await HttpRpcProvider.create(
    ...     "https://node.example.com",
    ...     {"timeout": 10_000, "getAccessToken": fetch_token},
    ... )
    >>> provider.send(
    ...     {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1},
    ...     lambda error, result: print(error or result),
    ... )

Main Exports:
    - HttpRpcProvider: The provider
    - ProviderConfig, AuthConfig, CustomAgent, build_config: Configuration
    - Header, HeaderSet: Request headers
    - AuthManager, AuthState: Token lifecycle
    - TransportProtocol, HttpxTransport: Transports
    - ProviderMetrics: Counters

Note: Prometheus counters require the 'metrics' extra. Install with:
    pip install jsonrpc-http-provider[metrics]

Version: 1.0.0
"""

__version__ = "1.0.0"

from .auth import AuthManager, AuthState, RefreshLoop, TokenClaims
from .config import (
    DEFAULT_HOST,
    AuthConfig,
    CustomAgent,
    ProviderConfig,
    build_config,
)
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectionTimeoutError,
    InvalidConnectionError,
    InvalidResponseError,
    ProviderError,
    TransportError,
    TransportTimeoutError,
)
from .headers import Header, HeaderSet
from .observability import ProviderMetrics
from .provider import HttpRpcProvider, ResponseCallback
from .transport import (
    HttpxTransport,
    TransportProtocol,
    TransportRequest,
    TransportResponse,
)

__all__ = [
    "DEFAULT_HOST",
    "AuthConfig",
    "AuthManager",
    "AuthState",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionTimeoutError",
    "CustomAgent",
    "Header",
    "HeaderSet",
    "HttpRpcProvider",
    "HttpxTransport",
    "InvalidConnectionError",
    "InvalidResponseError",
    "ProviderConfig",
    "ProviderError",
    "ProviderMetrics",
    "RefreshLoop",
    "ResponseCallback",
    "TokenClaims",
    "TransportError",
    "TransportProtocol",
    "TransportRequest",
    "TransportResponse",
    "TransportTimeoutError",
    "build_config",
]
