"""Suite-wide helpers."""

import base64
import json

import pytest


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


@pytest.fixture
def make_jwt():
    """Build an unsigned JWT-shaped token carrying the given claims."""

    def factory(**claims) -> str:
        header = _b64url(json.dumps({"alg": "none", "typ": "JWT"}).encode())
        payload = _b64url(json.dumps(claims).encode())
        return f"{header}.{payload}.sig"

    return factory
