# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Bearer token inspection.

Tokens are treated as opaque unless they look like a JWT, in which case
the payload segment is decoded (without verifying the signature) to read
the ``exp`` claim. Anything that fails to decode simply has no known
expiry.
"""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class TokenClaims(BaseModel):
    """Registered JWT claims the provider cares about."""

    model_config = ConfigDict(extra="ignore")

    exp: float | None = None
    iat: float | None = None
    sub: str | None = None

    @property
    def expires_at(self) -> datetime | None:
        if self.exp is None:
            return None
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


def _b64url_decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


def decode_claims(token: str) -> TokenClaims | None:
    """
    Decode the payload of a JWT-shaped token.

    Args:
        token: Bearer token.

    Returns:
        The decoded claims, or None if the token is not a decodable JWT.
    """
    parts = token.split(".")
    if len(parts) != 3 or not parts[1]:
        return None
    try:
        raw = _b64url_decode(parts[1])
        return TokenClaims.model_validate_json(raw)
    except (binascii.Error, ValueError, ValidationError) as e:
        logger.debug(f"Token payload is not decodable JWT claims: {e}")
        return None


def decode_expiry(token: str) -> float | None:
    """Return the token's ``exp`` claim as a Unix timestamp, if any."""
    claims = decode_claims(token)
    return claims.exp if claims is not None else None


__all__ = ["TokenClaims", "decode_claims", "decode_expiry"]
