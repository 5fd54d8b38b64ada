# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for the JSON-RPC HTTP provider.

Classes:
    ProviderMetrics: In-process counters for request outcomes and token refreshes.
    PrometheusProviderMetrics: Optional Prometheus counters for the same events.

Functions:
    get_prometheus_provider_metrics: Get or create the Prometheus metrics singleton.
    reset_prometheus_provider_metrics: Reset the Prometheus metrics singleton.

Constants:
    PROMETHEUS_AVAILABLE: Whether prometheus_client is available.
    All metric name constants from the constants module.
"""

from .constants import (
    METRIC_PREFIX,
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
from .metrics import (
    PROMETHEUS_AVAILABLE,
    PrometheusProviderMetrics,
    ProviderMetrics,
    get_prometheus_provider_metrics,
    reset_prometheus_provider_metrics,
)

__all__ = [
    "METRIC_PREFIX",
    "OUTCOME_CONNECTION_ERROR",
    "OUTCOME_INVALID_RESPONSE",
    "OUTCOME_SUCCESS",
    "OUTCOME_TIMEOUT",
    "PROMETHEUS_AVAILABLE",
    "REQUESTS_COMPLETED_TOTAL",
    "REQUESTS_SENT_TOTAL",
    "REQUEST_OUTCOMES",
    "TOKEN_REFRESHES_TOTAL",
    "TOKEN_REFRESH_FAILURES_TOTAL",
    "PrometheusProviderMetrics",
    "ProviderMetrics",
    "get_prometheus_provider_metrics",
    "reset_prometheus_provider_metrics",
]
