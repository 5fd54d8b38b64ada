# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the JSON-RPC HTTP provider.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from ProviderError, making it easy to catch
every provider-related exception with a single except clause.

The three request-layer errors (InvalidResponseError,
ConnectionTimeoutError, InvalidConnectionError) are delivered through the
``send`` callback rather than raised, and are raised directly only by the
awaitable ``HttpRpcProvider.request``.
"""


class ProviderError(Exception):
    """Base exception for all provider errors.

    Example:
        try:
            result = await provider.request(payload)
        except ProviderError as e:
            logger.error(f"RPC transport error: {e}")
    """

    pass


class ConfigurationError(ProviderError):
    """Raised when provider or authentication configuration is invalid.

    Common causes include:
    - A negative timeout or non-positive sync interval
    - An unrecognized key in the options mapping
    - A header entry that is not a name/value pair
    """

    pass


class AuthenticationError(ProviderError):
    """Raised when a bearer token could not be obtained.

    The refresh loop absorbs this error and schedules a retry, so it never
    reaches ``send`` callers. It is raised directly by
    ``AuthManager.refresh`` for callers that want to handle it themselves.
    """

    pass


class InvalidResponseError(ProviderError):
    """Raised when the node answered with something other than valid JSON.

    Also used for answers outside the 2xx status range, in which case
    ``status_code`` is set.

    Attributes:
        raw_body: The exact, un-parsed response text.
        status_code: HTTP status of the response when it was not 2xx.

    Example:
        try:
            await provider.request(payload)
        except InvalidResponseError as e:
            logger.warning(f"Node returned garbage: {e.raw_body[:200]!r}")
    """

    def __init__(self, raw_body: str, status_code: int | None = None):
        if status_code is None:
            message = f"Invalid JSON RPC response: {raw_body!r}"
        else:
            message = f"Invalid JSON RPC response (HTTP {status_code}): {raw_body!r}"
        super().__init__(message)
        self.raw_body = raw_body
        self.status_code = status_code


class ConnectionTimeoutError(ProviderError):
    """Raised when no response arrived within the configured timeout.

    Attributes:
        timeout_ms: The configured timeout in milliseconds.
    """

    def __init__(self, timeout_ms: int):
        super().__init__(f"CONNECTION TIMEOUT: timeout of {timeout_ms} ms achieved")
        self.timeout_ms = timeout_ms


class InvalidConnectionError(ProviderError):
    """Raised when the request could not be dispatched to the node at all.

    The underlying transport exception, if any, is available as
    ``__cause__``.

    Attributes:
        host: The node URL the provider was configured with.
    """

    def __init__(self, host: str):
        super().__init__(f"CONNECTION ERROR: Couldn't connect to node {host}.")
        self.host = host


class TransportError(ProviderError):
    """Raised by a transport when a request could not be completed.

    Providers translate this into InvalidConnectionError.
    """

    pass


class TransportTimeoutError(TransportError):
    """Raised by a transport when its own timeout elapsed.

    Providers translate this into ConnectionTimeoutError.
    """

    pass
