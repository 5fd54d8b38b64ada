"""Tests for ProviderConfig, AuthConfig and build_config."""

from unittest.mock import AsyncMock, Mock

import pytest

from jsonrpc_http_provider.config import (
    DEFAULT_HOST,
    DEFAULT_RETRY_BACKOFF_MS,
    DEFAULT_SYNC_INTERVAL_MS,
    AuthConfig,
    CustomAgent,
    ProviderConfig,
    build_config,
)
from jsonrpc_http_provider.exceptions import ConfigurationError
from jsonrpc_http_provider.headers import Header


class TestProviderConfig:
    def test_defaults(self):
        config = ProviderConfig()
        assert config.host == DEFAULT_HOST == "http://localhost:8545"
        assert config.timeout_ms == 0
        assert config.with_credentials is False
        assert config.keep_alive is True
        assert config.headers == ()
        assert config.agent is None

    def test_empty_host_falls_back_to_default(self):
        assert ProviderConfig(host="").host == DEFAULT_HOST

    def test_negative_timeout_rejected(self):
        with pytest.raises(ConfigurationError, match="timeout_ms"):
            ProviderConfig(timeout_ms=-1)

    def test_non_integer_timeout_rejected(self):
        with pytest.raises(ConfigurationError, match="integer"):
            ProviderConfig(timeout_ms=1.5)  # type: ignore[arg-type]

    def test_headers_are_coerced(self):
        config = ProviderConfig(headers=({"name": "X-Api", "value": "1"}, ("X-Two", "2")))  # type: ignore[arg-type]
        assert config.headers == (Header("X-Api", "1"), Header("X-Two", "2"))

    def test_timeout_seconds(self):
        assert ProviderConfig(timeout_ms=1500).timeout_seconds == 1.5
        assert ProviderConfig(timeout_ms=0).timeout_seconds is None

    @pytest.mark.parametrize(
        "host,expected",
        [
            ("https://node.example", True),
            ("http://node.example", False),
            ("HTTPS://node.example", False),
            ("httpsnode", True),
        ],
    )
    def test_is_https_is_case_sensitive_prefix(self, host, expected):
        assert ProviderConfig(host=host).is_https is expected

    def test_is_frozen(self):
        config = ProviderConfig()
        with pytest.raises(AttributeError):
            config.host = "http://other"  # type: ignore[misc]


class TestAuthConfig:
    def test_defaults(self):
        config = AuthConfig(get_access_token=AsyncMock(return_value="t"))
        assert config.sync_interval_ms == DEFAULT_SYNC_INTERVAL_MS == 60_000
        assert config.retry_backoff_ms == DEFAULT_RETRY_BACKOFF_MS == 10_000
        assert config.expiry_leeway_ms == 0

    def test_supplier_must_be_callable(self):
        with pytest.raises(ConfigurationError, match="callable"):
            AuthConfig(get_access_token="token")  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "field_name", ["sync_interval_ms", "retry_backoff_ms"]
    )
    def test_intervals_must_be_positive(self, field_name):
        with pytest.raises(ConfigurationError, match=field_name):
            AuthConfig(get_access_token=Mock(), **{field_name: 0})

    def test_negative_leeway_rejected(self):
        with pytest.raises(ConfigurationError, match="expiry_leeway_ms"):
            AuthConfig(get_access_token=Mock(), expiry_leeway_ms=-5)


class TestBuildConfig:
    def test_no_options(self):
        config, auth = build_config()
        assert config == ProviderConfig()
        assert auth is None

    def test_none_host_uses_default(self):
        config, _ = build_config(None, {})
        assert config.host == DEFAULT_HOST

    def test_camel_case_keys(self):
        supplier = AsyncMock(return_value="tok")
        config, auth = build_config(
            "https://node.example",
            {
                "withCredentials": True,
                "timeout": 3000,
                "headers": [{"name": "X-Api-Key", "value": "abc"}],
                "keepAlive": False,
                "getAccessToken": supplier,
                "syncInterval": 500,
            },
        )
        assert config.host == "https://node.example"
        assert config.with_credentials is True
        assert config.timeout_ms == 3000
        assert config.headers == (Header("X-Api-Key", "abc"),)
        assert config.keep_alive is False
        assert auth is not None
        assert auth.get_access_token is supplier
        assert auth.sync_interval_ms == 500

    def test_snake_case_keys(self):
        supplier = AsyncMock(return_value="tok")
        config, auth = build_config(
            None,
            {
                "timeout_ms": 10,
                "get_access_token": supplier,
                "retry_backoff_ms": 250,
                "expiry_leeway_ms": 30_000,
            },
        )
        assert config.timeout_ms == 10
        assert auth is not None
        assert auth.retry_backoff_ms == 250
        assert auth.expiry_leeway_ms == 30_000

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationError, match="Unknown provider option"):
            build_config(None, {"retries": 3})

    @pytest.mark.parametrize("value,expected", [(None, True), (True, True), (0, True), (False, False)])
    def test_keep_alive_only_disabled_by_explicit_false(self, value, expected):
        config, _ = build_config(None, {"keepAlive": value})
        assert config.keep_alive is expected

    def test_falsy_values_use_defaults(self):
        config, auth = build_config(
            None,
            {"timeout": None, "headers": None, "getAccessToken": Mock(), "syncInterval": 0},
        )
        assert config.timeout_ms == 0
        assert config.headers == ()
        assert auth is not None
        assert auth.sync_interval_ms == DEFAULT_SYNC_INTERVAL_MS

    def test_null_token_supplier_disables_auth(self):
        _, auth = build_config(None, {"getAccessToken": None, "syncInterval": 100})
        assert auth is None

    def test_agent_mapping_is_coerced(self):
        http_pool = Mock()
        config, _ = build_config(
            None, {"agent": {"http": http_pool, "baseUrl": "http://base.example"}}
        )
        assert config.agent == CustomAgent(http=http_pool, https=None, base_url="http://base.example")

    def test_bad_agent_rejected(self):
        with pytest.raises(ConfigurationError, match="custom agent"):
            build_config(None, {"agent": "pool"})

    def test_bad_header_rejected(self):
        with pytest.raises(ConfigurationError):
            build_config(None, {"headers": [{"name": "X-Only-Name"}]})
