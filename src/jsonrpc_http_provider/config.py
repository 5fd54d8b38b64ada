# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Provider configuration.

This module provides the immutable configuration classes for the HTTP
provider and its optional bearer-token authentication, plus
``build_config`` which maps a loose options mapping onto them.

Durations are expressed in milliseconds throughout.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from .exceptions import ConfigurationError
from .headers import Header

if TYPE_CHECKING:
    import httpx

DEFAULT_HOST = "http://localhost:8545"
DEFAULT_SYNC_INTERVAL_MS = 60_000
DEFAULT_RETRY_BACKOFF_MS = 10_000

TokenSupplier = Callable[[], Union[Awaitable[str], str]]
"""Zero-argument callable returning a bearer token (optionally awaitable)."""


@dataclass(frozen=True)
class CustomAgent:
    """
    Caller-supplied connection pools.

    When present, the provider creates no pool of its own and routes
    ``http://`` and ``https://`` requests through these transports.
    """

    http: httpx.AsyncBaseTransport | None = None
    https: httpx.AsyncBaseTransport | None = None
    base_url: str | None = None

    @classmethod
    def coerce(cls, value: Any) -> CustomAgent:
        if isinstance(value, CustomAgent):
            return value
        if isinstance(value, Mapping):
            return cls(
                http=value.get("http"),
                https=value.get("https"),
                base_url=value.get("base_url", value.get("baseUrl")),
            )
        raise ConfigurationError(f"Cannot interpret {value!r} as a custom agent")


@dataclass(frozen=True)
class ProviderConfig:
    """
    Configuration for an HttpRpcProvider.

    Fixed at construction; the provider never mutates it.
    """

    host: str = DEFAULT_HOST
    """Node URL every request is POSTed to."""

    timeout_ms: int = 0
    """Request timeout in milliseconds. 0 disables the timeout."""

    with_credentials: bool = False
    """Carry cookies between requests."""

    keep_alive: bool = True
    """Reuse pooled connections across requests."""

    headers: tuple[Header, ...] = field(default_factory=tuple)
    """Headers sent with every request, in order."""

    agent: CustomAgent | None = None
    """Caller-supplied pools. Disables internal pool creation."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.host:
            object.__setattr__(self, "host", DEFAULT_HOST)
        if not isinstance(self.host, str):
            raise ConfigurationError("host must be a string")
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
            raise ConfigurationError("timeout_ms must be an integer")
        if self.timeout_ms < 0:
            raise ConfigurationError("timeout_ms must be >= 0")
        object.__setattr__(
            self, "headers", tuple(Header.coerce(h) for h in self.headers)
        )

    @property
    def timeout_seconds(self) -> float | None:
        """Timeout as seconds, or None when disabled."""
        return self.timeout_ms / 1000 if self.timeout_ms > 0 else None

    @property
    def is_https(self) -> bool:
        # Case-sensitive prefix check, "HTTPS://..." selects the HTTP pool.
        return self.host.startswith("https")


@dataclass(frozen=True)
class AuthConfig:
    """
    Bearer-token authentication settings.

    A provider without an AuthConfig never attaches an Authorization
    header and never starts the refresh loop.
    """

    get_access_token: TokenSupplier
    """Fetches a fresh bearer token."""

    sync_interval_ms: int = DEFAULT_SYNC_INTERVAL_MS
    """Delay between successful refreshes."""

    retry_backoff_ms: int = DEFAULT_RETRY_BACKOFF_MS
    """Delay before retrying after a failed refresh."""

    expiry_leeway_ms: int = 0
    """Treat a token as expired this long before its exp claim."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not callable(self.get_access_token):
            raise ConfigurationError("get_access_token must be callable")
        if self.sync_interval_ms <= 0:
            raise ConfigurationError("sync_interval_ms must be > 0")
        if self.retry_backoff_ms <= 0:
            raise ConfigurationError("retry_backoff_ms must be > 0")
        if self.expiry_leeway_ms < 0:
            raise ConfigurationError("expiry_leeway_ms must be >= 0")


# Options-mapping key -> canonical field name
_PROVIDER_KEYS = {
    "withCredentials": "with_credentials",
    "with_credentials": "with_credentials",
    "timeout": "timeout_ms",
    "timeout_ms": "timeout_ms",
    "headers": "headers",
    "agent": "agent",
    "keepAlive": "keep_alive",
    "keep_alive": "keep_alive",
}

_AUTH_KEYS = {
    "getAccessToken": "get_access_token",
    "get_access_token": "get_access_token",
    "syncInterval": "sync_interval_ms",
    "sync_interval_ms": "sync_interval_ms",
    "retry_backoff_ms": "retry_backoff_ms",
    "expiry_leeway_ms": "expiry_leeway_ms",
}


def build_config(
    host: str | None = None,
    options: Mapping[str, Any] | None = None,
) -> tuple[ProviderConfig, AuthConfig | None]:
    """
    Build provider and auth configuration from an options mapping.

    Recognized keys are the camelCase names (``withCredentials``,
    ``timeout``, ``headers``, ``agent``, ``keepAlive``, ``getAccessToken``,
    ``syncInterval``) and their snake_case field names.

    Args:
        host: Node URL. Falls back to ``http://localhost:8545``.
        options: Options mapping. May be None.

    Returns:
        Tuple of ProviderConfig and AuthConfig (None when no token
        supplier was given).

    Raises:
        ConfigurationError: On unknown keys or invalid values.
    """
    provider_kwargs: dict[str, Any] = {}
    auth_kwargs: dict[str, Any] = {}

    for key, value in (options or {}).items():
        if key in _PROVIDER_KEYS:
            provider_kwargs[_PROVIDER_KEYS[key]] = value
        elif key in _AUTH_KEYS:
            auth_kwargs[_AUTH_KEYS[key]] = value
        else:
            raise ConfigurationError(f"Unknown provider option: {key!r}")

    # Falsy values mean "use the default", except keep_alive which is only
    # disabled by an explicit False.
    if not provider_kwargs.get("timeout_ms"):
        provider_kwargs.pop("timeout_ms", None)
    if not provider_kwargs.get("headers"):
        provider_kwargs.pop("headers", None)
    if provider_kwargs.get("agent") is not None:
        provider_kwargs["agent"] = CustomAgent.coerce(provider_kwargs["agent"])
    else:
        provider_kwargs.pop("agent", None)
    if "with_credentials" in provider_kwargs:
        provider_kwargs["with_credentials"] = bool(provider_kwargs["with_credentials"])
    if "keep_alive" in provider_kwargs:
        provider_kwargs["keep_alive"] = provider_kwargs["keep_alive"] is not False

    config = ProviderConfig(host=host or DEFAULT_HOST, **provider_kwargs)

    if auth_kwargs.get("get_access_token") is None:
        return config, None
    for key in ("sync_interval_ms", "retry_backoff_ms"):
        if not auth_kwargs.get(key):
            auth_kwargs.pop(key, None)
    return config, AuthConfig(**auth_kwargs)


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_RETRY_BACKOFF_MS",
    "DEFAULT_SYNC_INTERVAL_MS",
    "AuthConfig",
    "CustomAgent",
    "ProviderConfig",
    "TokenSupplier",
    "build_config",
]
