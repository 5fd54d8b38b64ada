# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Bearer-token authentication lifecycle.

The AuthManager owns the current token and keeps the ``Authorization``
entry of the provider's HeaderSet in step with it. Refreshes happen on a
timer (RefreshLoop) and, when a token carries an ``exp`` claim that has
passed, right before a request is sent.

State machine:
    DISABLED         no token supplier configured (permanent)
    UNAUTHENTICATED  no token obtained yet
    AUTHENTICATED    token held, next refresh scheduled
    REFRESHING       a token fetch is in flight
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
import time
from collections.abc import Callable
from enum import Enum

from ..config import AuthConfig
from ..exceptions import AuthenticationError
from ..headers import AUTHORIZATION, HeaderSet
from ..observability.metrics import ProviderMetrics
from .claims import decode_expiry
from .refresh_loop import RefreshLoop

logger = logging.getLogger(__name__)


class AuthState(Enum):
    """Authentication lifecycle states."""

    DISABLED = "disabled"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class AuthManager:
    """
    Fetches, attaches and periodically refreshes a bearer token.

    Refresh is single-flight: while a fetch is in flight every caller of
    ``refresh`` awaits that same fetch. Waiters go through
    ``asyncio.shield`` so one cancelled waiter does not cancel the fetch
    for the others.

    Retry policy: a failed fetch schedules the next attempt after
    ``retry_backoff_ms`` (unless the pending timer fires sooner) and holds
    off refreshes before sends until then; a successful fetch schedules
    the next one after ``sync_interval_ms``.
    """

    def __init__(
        self,
        config: AuthConfig | None,
        headers: HeaderSet,
        metrics: ProviderMetrics | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the auth manager.

        Args:
            config: Authentication settings, None to disable authentication
            headers: Header set whose Authorization entry is maintained
            metrics: Optional counters for refresh outcomes
            clock: Wall-clock source in Unix seconds, compared to ``exp``
        """
        self._config = config
        self._headers = headers
        self._metrics = metrics
        self._clock = clock

        self._token: str | None = None
        self._expires_at: float | None = None
        self._failed_at: float | None = None
        self._state = (
            AuthState.DISABLED if config is None else AuthState.UNAUTHENTICATED
        )

        self._refresh_task: asyncio.Task[str] | None = None
        self._loop: RefreshLoop | None = (
            RefreshLoop(self.sync) if config is not None else None
        )

    @property
    def enabled(self) -> bool:
        return self._config is not None

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def expires_at(self) -> float | None:
        """Unix timestamp from the token's exp claim, if it had one."""
        return self._expires_at

    @property
    def refresh_loop(self) -> RefreshLoop | None:
        return self._loop

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def is_expired(self, now: float | None = None) -> bool:
        """
        Check whether the held token is known to be expired.

        Returns False when there is no token or its expiry is unknown.
        """
        if self._config is None or self._token is None or self._expires_at is None:
            return False
        now = self._clock() if now is None else now
        leeway = self._config.expiry_leeway_ms / 1000
        return now >= self._expires_at - leeway

    async def sync(self) -> bool:
        """
        Refresh the token, absorbing failures.

        Returns:
            True if a token was obtained, False if authentication is
            disabled or the fetch failed (a retry is then scheduled).
        """
        if self._config is None:
            return False
        try:
            await self.refresh()
        except AuthenticationError as e:
            if e.__cause__ is None:
                # Cancelled by stop, nothing will be retried
                logger.debug(str(e))
                return False
            logger.warning(
                f"{e} ({e.__cause__!r}); retrying in "
                f"{self._config.retry_backoff_ms} ms"
            )
            return False
        return True

    async def refresh(self) -> str:
        """
        Fetch a new token, joining a fetch that is already in flight.

        Returns:
            The new token.

        Raises:
            AuthenticationError: If authentication is disabled, the token
                supplier failed or the fetch was cancelled by ``stop``.
        """
        if self._config is None:
            raise AuthenticationError("Authentication is not configured")

        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.create_task(self._fetch_token(), name="token_refresh")
            # Retrieve the exception even if every waiter was cancelled
            task.add_done_callback(
                lambda t: t.exception() if not t.cancelled() else None
            )
            self._refresh_task = task
        else:
            logger.debug("Joining in-flight token refresh")

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # Only the shared fetch was cancelled (by stop); this waiter was not
            if not task.cancelled():
                raise
            raise AuthenticationError("Token refresh was cancelled") from None

    def in_backoff(self, now: float | None = None) -> bool:
        """True while a failed fetch's retry backoff has not yet elapsed."""
        if self._config is None or self._failed_at is None:
            return False
        now = self._clock() if now is None else now
        return now - self._failed_at < self._config.retry_backoff_ms / 1000

    async def ensure_fresh(self) -> None:
        """
        Refresh before a send if the held token has expired.

        After a failed fetch, sends go out with the held token until the
        retry backoff has elapsed; the backoff timer does the retrying.
        """
        if not self.is_expired():
            return
        if self.in_backoff():
            logger.debug("Bearer token expired, refresh backing off")
            return
        logger.debug("Bearer token expired, refreshing before send")
        await self.sync()

    async def _fetch_token(self) -> str:
        config = self._config
        if config is None:
            raise AuthenticationError("Authentication is not configured")
        self._state = AuthState.REFRESHING
        try:
            token = config.get_access_token()
            if inspect.isawaitable(token):
                token = await token
            if not isinstance(token, str) or not token:
                raise ValueError(
                    f"token supplier returned {token!r}, expected a non-empty string"
                )
        except asyncio.CancelledError:
            self._restore_state()
            raise
        except Exception as e:
            self._restore_state()
            self._record_refresh(succeeded=False)
            self._failed_at = self._clock()
            self._schedule_retry(config.retry_backoff_ms)
            raise AuthenticationError("Cannot get a new access token") from e

        self._token = token
        self._expires_at = decode_expiry(token)
        self._failed_at = None
        self._headers.upsert(AUTHORIZATION, f"Bearer {token}")
        self._state = AuthState.AUTHENTICATED
        self._record_refresh(succeeded=True)
        self._schedule(config.sync_interval_ms)
        logger.info("Bearer token refreshed")
        return token

    def _restore_state(self) -> None:
        self._state = (
            AuthState.AUTHENTICATED
            if self._token is not None
            else AuthState.UNAUTHENTICATED
        )

    def _schedule(self, delay_ms: int) -> None:
        if self._loop is not None:
            self._loop.schedule(delay_ms / 1000)

    def _schedule_retry(self, delay_ms: int) -> None:
        # Keep a pending timer that fires no later than the backoff
        loop = self._loop
        if loop is None:
            return
        remaining = loop.remaining
        if remaining is not None and remaining <= delay_ms / 1000:
            return
        loop.schedule(delay_ms / 1000)

    def _record_refresh(self, succeeded: bool) -> None:
        if self._metrics is not None:
            self._metrics.record_refresh(succeeded)

    def cancel(self) -> None:
        """Stop the refresh timer. An in-flight fetch is left to finish."""
        if self._loop is not None:
            self._loop.cancel()

    async def stop(self) -> None:
        """Stop the refresh timer and cancel any in-flight fetch."""
        if self._loop is not None:
            await self._loop.stop()
        task = self._refresh_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task
        self._refresh_task = None


__all__ = ["AuthManager", "AuthState"]
