# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Self-rescheduling timer for token refresh.

The loop holds at most one pending timer. Each firing runs the callback
once; the callback (or anyone else) decides the next delay by calling
``schedule`` again. ``cancel`` stops the loop for good.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class RefreshLoop:
    """
    Explicit repeating task with cancel capability.

    Responsibilities:
    - Keep a single pending timer, replacing it on every ``schedule``
    - Run the callback when the timer fires, logging (not propagating)
      any exception so the loop owner can reschedule
    - Cancel the pending timer and any running callback on ``cancel``
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        name: str = "token_refresh_timer",
    ):
        """
        Initialize the refresh loop.

        Args:
            callback: Async callable invoked each time the timer fires
            name: Task name used for the timer tasks
        """
        self._callback = callback
        self._name = name

        self._pending: asyncio.Task[None] | None = None
        self._firing: asyncio.Task[None] | None = None
        self._delay: float | None = None
        self._due: float | None = None
        self._closed = False

    @property
    def scheduled(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._pending is not None and not self._pending.done()

    @property
    def delay(self) -> float | None:
        """Delay in seconds of the most recently scheduled timer."""
        return self._delay

    @property
    def remaining(self) -> float | None:
        """Seconds until the pending timer fires, None if nothing is scheduled."""
        if not self.scheduled or self._due is None:
            return None
        return max(0.0, self._due - asyncio.get_running_loop().time())

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, delay: float) -> None:
        """
        Fire the callback once after ``delay`` seconds.

        Replaces any timer that has not fired yet. A timer whose callback is
        already running is left alone. Ignored after ``cancel``.

        Args:
            delay: Seconds to wait before firing
        """
        if self._closed:
            logger.debug(f"{self._name}: ignoring schedule after cancel")
            return

        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

        self._delay = delay
        self._due = asyncio.get_running_loop().time() + delay
        self._pending = asyncio.create_task(self._run_after(delay), name=self._name)
        logger.debug(f"{self._name}: next run in {delay:.3f}s")

    async def _run_after(self, delay: float) -> None:
        await asyncio.sleep(delay)

        # Detach from the pending slot so a reschedule made by the callback
        # does not cancel the task that is running it.
        if self._pending is asyncio.current_task():
            self._pending = None
        self._firing = asyncio.current_task()
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"{self._name}: callback raised")
        finally:
            if self._firing is asyncio.current_task():
                self._firing = None

    def cancel(self) -> None:
        """Cancel the pending timer and any running callback. Idempotent."""
        self._closed = True
        try:
            current = asyncio.current_task()
        except RuntimeError:
            # Called outside a running loop
            current = None
        for task in (self._pending, self._firing):
            if task is not None and not task.done() and task is not current:
                task.cancel()
        self._pending = None
        self._firing = None

    async def stop(self) -> None:
        """Cancel and wait for cancelled tasks to finish unwinding."""
        tasks = [t for t in (self._pending, self._firing) if t is not None]
        self.cancel()
        current = asyncio.current_task()
        for task in tasks:
            if task is current:
                continue
            with contextlib.suppress(asyncio.CancelledError):
                await task


__all__ = ["RefreshLoop"]
