# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `jsonrpc_provider_` prefix. Counter metrics end
with `_total`.

Label Best Practices:
    The only label is `outcome`, drawn from the fixed set in
    REQUEST_OUTCOMES. NEVER label by host, request id or token.
"""


METRIC_PREFIX = "jsonrpc_provider"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Request Metrics (provider.py)
# =============================================================================

REQUESTS_SENT_TOTAL = f"{METRIC_PREFIX}_requests_sent_total"
"""Total requests handed to the transport."""

REQUESTS_COMPLETED_TOTAL = f"{METRIC_PREFIX}_requests_completed_total"
"""Total requests reaching a terminal outcome, labelled by outcome."""

OUTCOME_SUCCESS = "success"
OUTCOME_INVALID_RESPONSE = "invalid_response"
OUTCOME_TIMEOUT = "timeout"
OUTCOME_CONNECTION_ERROR = "connection_error"

REQUEST_OUTCOMES = (
    OUTCOME_SUCCESS,
    OUTCOME_INVALID_RESPONSE,
    OUTCOME_TIMEOUT,
    OUTCOME_CONNECTION_ERROR,
)


# =============================================================================
# Authentication Metrics (auth/manager.py)
# =============================================================================

TOKEN_REFRESHES_TOTAL = f"{METRIC_PREFIX}_token_refreshes_total"
"""Total successful token refreshes."""

TOKEN_REFRESH_FAILURES_TOTAL = f"{METRIC_PREFIX}_token_refresh_failures_total"
"""Total failed token refreshes."""


__all__ = [
    "METRIC_PREFIX",
    "OUTCOME_CONNECTION_ERROR",
    "OUTCOME_INVALID_RESPONSE",
    "OUTCOME_SUCCESS",
    "OUTCOME_TIMEOUT",
    "REQUESTS_COMPLETED_TOTAL",
    "REQUESTS_SENT_TOTAL",
    "REQUEST_OUTCOMES",
    "TOKEN_REFRESHES_TOTAL",
    "TOKEN_REFRESH_FAILURES_TOTAL",
]
