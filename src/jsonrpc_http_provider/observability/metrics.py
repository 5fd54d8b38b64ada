# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Provider metrics for the JSON-RPC HTTP provider.

This module provides:
1. ProviderMetrics - Dataclass counting request outcomes and token refreshes
2. PrometheusProviderMetrics - Optional Prometheus counters for the same events

Usage:
    metrics = ProviderMetrics()

    metrics.record_request_sent()
    metrics.record_outcome("timeout")
    metrics.record_refresh(succeeded=True)

    stats = metrics.get_stats()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .constants import (
    OUTCOME_CONNECTION_ERROR,
    OUTCOME_INVALID_RESPONSE,
    OUTCOME_SUCCESS,
    OUTCOME_TIMEOUT,
    REQUEST_OUTCOMES,
    REQUESTS_COMPLETED_TOTAL,
    REQUESTS_SENT_TOTAL,
    TOKEN_REFRESH_FAILURES_TOTAL,
    TOKEN_REFRESHES_TOTAL,
)

logger = logging.getLogger(__name__)

# Type declarations for optional prometheus_client imports
if TYPE_CHECKING:
    from prometheus_client import Counter as CounterType
else:
    CounterType = object

# Try to import prometheus_client for optional Prometheus metrics
try:
    from prometheus_client import Counter as _Counter

    Counter: type[CounterType] | None = _Counter
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    PROMETHEUS_AVAILABLE = False


class PrometheusProviderMetrics:
    """
    Optional Prometheus counters for provider observability.

    Only instantiated if prometheus_client is available.

    Metrics:
        - jsonrpc_provider_requests_sent_total
        - jsonrpc_provider_requests_completed_total{outcome}
        - jsonrpc_provider_token_refreshes_total
        - jsonrpc_provider_token_refresh_failures_total
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus provider metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.

        Raises:
            ImportError: If prometheus_client is not available.
        """
        if not PROMETHEUS_AVAILABLE or Counter is None:
            raise ImportError(
                "prometheus_client is not available. "
                "Install with: pip install prometheus-client"
            )

        self.requests_sent = Counter(
            REQUESTS_SENT_TOTAL.removesuffix("_total"),
            "Requests handed to the transport",
            registry=registry,
        )
        self.requests_completed = Counter(
            REQUESTS_COMPLETED_TOTAL.removesuffix("_total"),
            "Requests reaching a terminal outcome",
            ["outcome"],
            registry=registry,
        )
        self.token_refreshes = Counter(
            TOKEN_REFRESHES_TOTAL.removesuffix("_total"),
            "Successful bearer token refreshes",
            registry=registry,
        )
        self.token_refresh_failures = Counter(
            TOKEN_REFRESH_FAILURES_TOTAL.removesuffix("_total"),
            "Failed bearer token refreshes",
            registry=registry,
        )

        logger.info("Prometheus provider metrics initialized")

    def observe_sent(self) -> None:
        self.requests_sent.inc()

    def observe_outcome(self, outcome: str) -> None:
        self.requests_completed.labels(outcome=outcome).inc()

    def observe_refresh(self, succeeded: bool) -> None:
        if succeeded:
            self.token_refreshes.inc()
        else:
            self.token_refresh_failures.inc()


@dataclass
class ProviderMetrics:
    """
    In-process counters for a single provider.

    Thread Safety:
        Every increment, ``get_stats`` and ``reset`` runs under one lock, so
        a reader on another thread always sees a consistent snapshot.

    Example:
        >>> metrics = ProviderMetrics()
        >>> metrics.record_outcome("success")
        >>> metrics.requests_succeeded
        1
    """

    requests_sent: int = 0
    requests_succeeded: int = 0
    invalid_responses: int = 0
    timeouts: int = 0
    connection_errors: int = 0

    token_refreshes: int = 0
    token_refresh_failures: int = 0

    prometheus: PrometheusProviderMetrics | None = field(default=None, repr=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_request_sent(self) -> None:
        with self._lock:
            self.requests_sent += 1
        if self.prometheus is not None:
            self.prometheus.observe_sent()

    def record_outcome(self, outcome: str) -> None:
        """
        Record the terminal outcome of a request.

        Args:
            outcome: One of REQUEST_OUTCOMES.

        Raises:
            ValueError: If the outcome is not a known outcome.
        """
        if outcome not in REQUEST_OUTCOMES:
            raise ValueError(
                f"Unknown request outcome {outcome!r}, expected one of {REQUEST_OUTCOMES}"
            )
        with self._lock:
            if outcome == OUTCOME_SUCCESS:
                self.requests_succeeded += 1
            elif outcome == OUTCOME_INVALID_RESPONSE:
                self.invalid_responses += 1
            elif outcome == OUTCOME_TIMEOUT:
                self.timeouts += 1
            else:
                self.connection_errors += 1
        if self.prometheus is not None:
            self.prometheus.observe_outcome(outcome)

    def record_refresh(self, succeeded: bool) -> None:
        with self._lock:
            if succeeded:
                self.token_refreshes += 1
            else:
                self.token_refresh_failures += 1
        if self.prometheus is not None:
            self.prometheus.observe_refresh(succeeded)

    @property
    def requests_failed(self) -> int:
        return self.invalid_responses + self.timeouts + self.connection_errors

    def get_stats(self) -> dict[str, Any]:
        """Return all counters as a JSON-serializable dict."""
        with self._lock:
            return {
                "requests_sent": self.requests_sent,
                "requests_succeeded": self.requests_succeeded,
                "requests_failed": self.requests_failed,
                "invalid_responses": self.invalid_responses,
                "timeouts": self.timeouts,
                "connection_errors": self.connection_errors,
                "token_refreshes": self.token_refreshes,
                "token_refresh_failures": self.token_refresh_failures,
            }

    def reset(self) -> None:
        """Reset all counters to zero."""
        with self._lock:
            self.requests_sent = 0
            self.requests_succeeded = 0
            self.invalid_responses = 0
            self.timeouts = 0
            self.connection_errors = 0
            self.token_refreshes = 0
            self.token_refresh_failures = 0


# Module-level singleton for Prometheus metrics (optional)
_prometheus_provider_metrics: PrometheusProviderMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_provider_metrics() -> PrometheusProviderMetrics | None:
    """
    Get or create the Prometheus provider metrics singleton.

    Double-checked locking keeps prometheus_client from seeing a duplicate
    registration when several providers start at once.

    Returns:
        PrometheusProviderMetrics instance if prometheus_client is available,
        None otherwise.
    """
    global _prometheus_provider_metrics

    if not PROMETHEUS_AVAILABLE:
        return None

    if _prometheus_provider_metrics is None:
        with _prometheus_lock:
            if _prometheus_provider_metrics is None:
                try:
                    _prometheus_provider_metrics = PrometheusProviderMetrics()
                except Exception as e:
                    logger.warning(
                        f"Failed to initialize Prometheus provider metrics: {e}"
                    )
                    return None

    return _prometheus_provider_metrics


def reset_prometheus_provider_metrics() -> None:
    """Reset the Prometheus provider metrics singleton (mainly for testing)."""
    global _prometheus_provider_metrics
    _prometheus_provider_metrics = None


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "PrometheusProviderMetrics",
    "ProviderMetrics",
    "get_prometheus_provider_metrics",
    "reset_prometheus_provider_metrics",
]
