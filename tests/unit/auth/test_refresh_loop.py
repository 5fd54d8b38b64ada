"""
Unit tests for RefreshLoop.

Tests timer firing, rescheduling, cancellation and callback error handling.
"""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from jsonrpc_http_provider.auth.refresh_loop import RefreshLoop

# ============================================================================
# Scheduling Tests
# ============================================================================


class TestRefreshLoopScheduling:
    """Tests for schedule()."""

    @pytest.mark.asyncio
    async def test_fires_after_delay(self):
        callback = AsyncMock()
        loop = RefreshLoop(callback)

        loop.schedule(0.01)
        assert loop.scheduled
        assert loop.delay == 0.01

        await asyncio.sleep(0.05)
        callback.assert_awaited_once()
        assert not loop.scheduled

    @pytest.mark.asyncio
    async def test_remaining_counts_down(self):
        loop = RefreshLoop(AsyncMock())
        assert loop.remaining is None

        loop.schedule(1)
        first = loop.remaining
        await asyncio.sleep(0.02)

        assert first is not None and 0.9 < first <= 1
        assert loop.remaining is not None and loop.remaining < first
        await loop.stop()
        assert loop.remaining is None

    @pytest.mark.asyncio
    async def test_reschedule_replaces_pending_timer(self):
        callback = AsyncMock()
        loop = RefreshLoop(callback)

        loop.schedule(0.01)
        loop.schedule(0.02)
        await asyncio.sleep(0.06)

        callback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_callback_can_reschedule_itself(self):
        calls = 0

        async def tick():
            nonlocal calls
            calls += 1
            loop.schedule(0.005)

        loop = RefreshLoop(tick)
        loop.schedule(0.005)
        await asyncio.sleep(0.08)
        loop.cancel()

        assert calls >= 3

    @pytest.mark.asyncio
    async def test_reschedule_from_callback_does_not_cancel_running_callback(self):
        finished = asyncio.Event()

        async def tick():
            loop.schedule(10)
            await asyncio.sleep(0.01)
            finished.set()

        loop = RefreshLoop(tick)
        loop.schedule(0)
        await asyncio.wait_for(finished.wait(), timeout=1)
        assert loop.scheduled
        loop.cancel()


# ============================================================================
# Error Handling Tests
# ============================================================================


class TestRefreshLoopErrors:
    """Tests for exceptions raised by the callback."""

    @pytest.mark.asyncio
    async def test_callback_exception_is_logged(self, caplog):
        callback = AsyncMock(side_effect=ValueError("refresh exploded"))
        loop = RefreshLoop(callback, name="test_timer")

        with caplog.at_level(logging.ERROR):
            loop.schedule(0)
            await asyncio.sleep(0.02)

        callback.assert_awaited_once()
        assert "test_timer: callback raised" in caplog.text
        assert "refresh exploded" in caplog.text


# ============================================================================
# Cancellation Tests
# ============================================================================


class TestRefreshLoopCancel:
    """Tests for cancel() and stop()."""

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self):
        callback = AsyncMock()
        loop = RefreshLoop(callback)

        loop.schedule(0.01)
        loop.cancel()
        await asyncio.sleep(0.03)

        callback.assert_not_awaited()
        assert loop.closed
        assert not loop.scheduled

    @pytest.mark.asyncio
    async def test_schedule_after_cancel_is_ignored(self):
        callback = AsyncMock()
        loop = RefreshLoop(callback)

        loop.cancel()
        loop.schedule(0)
        await asyncio.sleep(0.01)

        callback.assert_not_awaited()
        assert not loop.scheduled

    @pytest.mark.asyncio
    async def test_cancel_interrupts_running_callback(self):
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def slow():
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        loop = RefreshLoop(slow)
        loop.schedule(0)
        await asyncio.wait_for(started.wait(), timeout=1)
        await loop.stop()

        assert cancelled.is_set()

    def test_cancel_outside_event_loop(self):
        loop = RefreshLoop(AsyncMock())
        loop.cancel()
        loop.cancel()
        assert loop.closed

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self):
        loop = RefreshLoop(AsyncMock())
        loop.schedule(1)
        await loop.stop()
        await loop.stop()
        assert not loop.scheduled
