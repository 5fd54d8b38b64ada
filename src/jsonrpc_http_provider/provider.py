# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
HTTP JSON-RPC provider.

HttpRpcProvider POSTs JSON payloads to a single node, optionally
authenticating with a bearer token that it keeps fresh in the
background, and reports each outcome through a callback.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from typing_extensions import Self

from .auth import AuthManager, AuthState
from .config import AuthConfig, ProviderConfig, build_config
from .exceptions import (
    ConfigurationError,
    ConnectionTimeoutError,
    InvalidConnectionError,
    InvalidResponseError,
    ProviderError,
    TransportTimeoutError,
)
from .headers import HeaderSet
from .observability.constants import (
    OUTCOME_CONNECTION_ERROR,
    OUTCOME_INVALID_RESPONSE,
    OUTCOME_SUCCESS,
    OUTCOME_TIMEOUT,
)
from .observability.metrics import ProviderMetrics, get_prometheus_provider_metrics
from .transport import (
    AgentSet,
    HttpxTransport,
    TransportProtocol,
    TransportRequest,
    TransportResponse,
    select_agents,
)

logger = logging.getLogger(__name__)

ResponseCallback = Callable[[ProviderError | None, Any], Any]
"""Receives ``(error, result)``; exactly one of them is meaningful."""


class HttpRpcProvider:
    """
    JSON-RPC provider over HTTP/HTTPS.

    Lifecycle:
        1. Construct (synchronous, not yet ready)
        2. ``await initialize()`` runs one authentication sync. A failing
           token supplier does not fail initialization; the provider is
           usable unauthenticated and retries in the background.
        3. ``send``/``request`` any number of payloads, concurrently
        4. ``aclose()`` (or ``disconnect()``) stops the refresh timer

    Example:
        >>> async with HttpRpcProvider("https://node.example", {"timeout": 5000}) as p:
        ...     result = await p.request({"jsonrpc": "2.0", "method": "eth_blockNumber", "id": 1})
    """

    def __init__(
        self,
        host: str | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        config: ProviderConfig | None = None,
        auth: AuthConfig | None = None,
        transport: TransportProtocol | None = None,
        metrics: ProviderMetrics | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the provider.

        Args:
            host: Node URL, defaults to http://localhost:8545
            options: Options mapping, see ``build_config``
            config: Prebuilt ProviderConfig, instead of host/options
            auth: Prebuilt AuthConfig, overrides auth keys in options
            transport: Transport to send through instead of the default
                HttpxTransport over keep-alive pools
            metrics: Counters to record into (created if omitted)
            clock: Wall-clock source used to check token expiry

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        if config is None:
            config, built_auth = build_config(host, options)
            if auth is None:
                auth = built_auth
        elif host is not None or options:
            raise ConfigurationError("Pass either host/options or config, not both")

        self._config = config
        self._agents: AgentSet | None = None
        if transport is None:
            self._agents = select_agents(config)
            transport = HttpxTransport(self._agents)
        self._transport = transport

        self.headers = HeaderSet(config.headers)
        self.metrics = (
            metrics
            if metrics is not None
            else ProviderMetrics(prometheus=get_prometheus_provider_metrics())
        )
        self._auth = AuthManager(auth, self.headers, self.metrics, clock=clock)

        self.connected = False
        self._ready = False
        self._sends: set[asyncio.Task[None]] = set()

    @classmethod
    async def create(
        cls,
        host: str | None = None,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Self:
        """Construct and initialize a provider in one step."""
        provider = cls(host, options, **kwargs)
        await provider.initialize()
        return provider

    async def initialize(self) -> Self:
        """Run the initial authentication sync. Idempotent."""
        if not self._ready:
            if not await self._auth.sync() and self._auth.enabled:
                logger.warning(
                    f"Provider for {self.host} starting without a bearer token"
                )
            self._ready = True
        return self

    async def __aenter__(self) -> Self:
        return await self.initialize()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def auth(self) -> AuthManager:
        return self._auth

    @property
    def auth_state(self) -> AuthState:
        return self._auth.state

    @property
    def transport(self) -> TransportProtocol:
        return self._transport

    @property
    def agents(self) -> AgentSet | None:
        """Pools created for the default transport, None if one was injected."""
        return self._agents

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def send(self, payload: Any, callback: ResponseCallback) -> asyncio.Task[None]:
        """
        Send a payload and report the outcome through ``callback``.

        The callback is invoked exactly once, as ``callback(None, result)``
        on success or ``callback(error, None)`` with an InvalidResponseError,
        ConnectionTimeoutError or InvalidConnectionError. Nothing is raised
        from ``send`` itself. Must be called with a running event loop.

        Returns:
            The task delivering the outcome; awaiting it is optional.
        """
        task = asyncio.get_running_loop().create_task(
            self._deliver(payload, callback), name="rpc_send"
        )
        self._sends.add(task)
        task.add_done_callback(self._sends.discard)
        return task

    async def _deliver(self, payload: Any, callback: ResponseCallback) -> None:
        error: ProviderError | None = None
        result: Any = None
        try:
            result = await self.request(payload)
        except ProviderError as e:
            error = e

        try:
            outcome = callback(error, result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("send callback raised")

    async def request(self, payload: Any) -> Any:
        """
        Send a payload and return the parsed JSON response.

        Raises:
            InvalidResponseError: Non-2xx status or a body that is not JSON.
            ConnectionTimeoutError: No response within the configured timeout.
            InvalidConnectionError: The request could not be dispatched.
        """
        await self._auth.ensure_fresh()

        try:
            transport_request = self._prepare_request(payload)
            self.metrics.record_request_sent()
            logger.debug(f"POST {transport_request.url} ({len(transport_request.body)} bytes)")
            response = await self._submit(transport_request)
        except (TransportTimeoutError, asyncio.TimeoutError) as e:
            self.connected = False
            self.metrics.record_outcome(OUTCOME_TIMEOUT)
            logger.warning(f"Request to {self.host} timed out after {self._config.timeout_ms} ms")
            raise ConnectionTimeoutError(self._config.timeout_ms) from e
        except Exception as e:
            self.connected = False
            self.metrics.record_outcome(OUTCOME_CONNECTION_ERROR)
            logger.warning(f"Request to {self.host} failed: {e!r}")
            raise InvalidConnectionError(self.host) from e

        self.connected = True
        return self._parse_response(response)

    def _prepare_request(self, payload: Any) -> TransportRequest:
        body = json.dumps(payload)
        headers = (("Content-Type", "application/json"), *self.headers.items())
        return TransportRequest(
            url=self._config.host,
            body=body,
            headers=headers,
            timeout=self._config.timeout_seconds,
            with_credentials=self._config.with_credentials,
        )

    async def _submit(self, request: TransportRequest) -> TransportResponse:
        timeout = self._config.timeout_seconds
        if timeout is None:
            return await self._transport.send(request)
        return await asyncio.wait_for(self._transport.send(request), timeout)

    def _parse_response(self, response: TransportResponse) -> Any:
        if not response.ok:
            self.metrics.record_outcome(OUTCOME_INVALID_RESPONSE)
            raise InvalidResponseError(response.text, status_code=response.status_code)
        try:
            result = json.loads(response.text)
        except ValueError as e:
            self.metrics.record_outcome(OUTCOME_INVALID_RESPONSE)
            raise InvalidResponseError(response.text) from e
        self.metrics.record_outcome(OUTCOME_SUCCESS)
        return result

    # ------------------------------------------------------------------
    # Capabilities and shutdown
    # ------------------------------------------------------------------

    def supports_subscriptions(self) -> bool:
        """HTTP cannot carry server push; use a socket transport for that."""
        return False

    def disconnect(self) -> None:
        """
        Stop the token refresh timer.

        HTTP has no persistent connection to tear down, so sends keep
        working afterwards with whatever token was last obtained. Pools are
        only released by ``aclose``.
        """
        self._auth.cancel()

    async def aclose(self) -> None:
        """
        Stop background work, wait for in-flight sends and close pools.

        Token work is stopped first so a supplier that never answers cannot
        hold up shutdown. Sends waiting on that refresh go out with the
        headers they already have, and every callback still runs before
        the pools close.
        """
        await self._auth.stop()
        pending = [t for t in self._sends if t is not asyncio.current_task()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self._transport.aclose()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(host={self.host!r}, connected={self.connected}, "
            f"auth_state={self.auth_state.value})"
        )


__all__ = ["HttpRpcProvider", "ResponseCallback"]
