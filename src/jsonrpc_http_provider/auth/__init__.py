# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Bearer-token authentication for the provider.

This module provides:
- AuthManager: token lifecycle (fetch, attach, refresh, retry)
- AuthState: lifecycle states
- RefreshLoop: self-rescheduling timer driving periodic refresh
- TokenClaims, decode_expiry: JWT expiry inspection
"""

from .claims import TokenClaims, decode_claims, decode_expiry
from .manager import AuthManager, AuthState
from .refresh_loop import RefreshLoop

__all__ = [
    "AuthManager",
    "AuthState",
    "RefreshLoop",
    "TokenClaims",
    "decode_claims",
    "decode_expiry",
]
