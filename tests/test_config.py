"""
Tests for client configuration.

Tests cover:
- Type validation of the required fields
- Scope and timeout defaults
- Secret hygiene in repr
- Loading from environment variables
"""

import pytest

from shopify_token_store import ClientConfig, ConfigurationError, ShopifyTokenStore


class TestClientConfig:
    """Tests for ClientConfig construction."""

    @pytest.mark.parametrize("field", ["api_key", "shared_secret", "redirect_uri"])
    @pytest.mark.parametrize("bad_value", [None, 42, b"bytes", ["list"]])
    def test_non_string_required_field_rejected(self, field, bad_value):
        """Each required field must be a string."""
        kwargs = {"api_key": "k", "shared_secret": "s", "redirect_uri": "https://app.example.com/cb"}
        kwargs[field] = bad_value
        with pytest.raises(ConfigurationError, match=field):
            ClientConfig(**kwargs)

    def test_defaults(self, config):
        """Scopes default to read_content and timeout to one minute."""
        assert config.scopes == "read_content"
        assert config.timeout_ms == 60000
        assert config.timeout_seconds == 60.0

    @pytest.mark.parametrize("scopes", [None, "", []])
    def test_empty_scopes_fall_back_to_default(self, scopes):
        """Empty scopes use the default scope."""
        config = ClientConfig(api_key="k", shared_secret="s", redirect_uri="r", scopes=scopes)
        assert config.scopes == "read_content"

    def test_scope_list_is_frozen(self):
        """A scope list is copied into a tuple."""
        scopes = ["read_products", "write_orders"]
        config = ClientConfig(api_key="k", shared_secret="s", redirect_uri="r", scopes=scopes)
        scopes.append("read_customers")
        assert config.scopes == ("read_products", "write_orders")

    @pytest.mark.parametrize("timeout_ms", [0, -1, 1.5, "100", True])
    def test_invalid_timeout_rejected(self, timeout_ms):
        """Timeout must be a positive integer."""
        with pytest.raises(ConfigurationError):
            ClientConfig(api_key="k", shared_secret="s", redirect_uri="r", timeout_ms=timeout_ms)

    def test_none_timeout_uses_default(self):
        config = ClientConfig(api_key="k", shared_secret="s", redirect_uri="r", timeout_ms=None)
        assert config.timeout_ms == 60000

    def test_config_is_immutable(self, config):
        with pytest.raises(AttributeError):
            config.api_key = "other"

    def test_repr_hides_shared_secret(self):
        config = ClientConfig(api_key="k", shared_secret="very-secret-value", redirect_uri="r")
        assert "very-secret-value" not in repr(config)

    def test_create_validates(self):
        """The keyword constructor validates like ClientConfig."""
        with pytest.raises(ConfigurationError, match="api_key"):
            ShopifyTokenStore.create(api_key=None, shared_secret="s", redirect_uri="r")


class TestFromEnv:
    """Tests for ClientConfig.from_env."""

    @pytest.fixture
    def env(self):
        return {
            "SHOPIFY_API_KEY": "k",
            "SHOPIFY_SHARED_SECRET": "secret",
            "SHOPIFY_REDIRECT_URI": "https://app.example.com/cb",
        }

    def test_required_variables(self, env):
        config = ClientConfig.from_env(env)
        assert config.api_key == "k"
        assert config.shared_secret == "secret"
        assert config.redirect_uri == "https://app.example.com/cb"
        assert config.scopes == "read_content"
        assert config.timeout_ms == 60000

    def test_optional_variables(self, env):
        env["SHOPIFY_SCOPES"] = "read_products, write_orders"
        env["SHOPIFY_TIMEOUT_MS"] = "1500"
        config = ClientConfig.from_env(env)
        assert config.scopes == ("read_products", "write_orders")
        assert config.timeout_ms == 1500

    def test_missing_variables_reported(self, env):
        del env["SHOPIFY_SHARED_SECRET"]
        with pytest.raises(ConfigurationError, match="SHOPIFY_SHARED_SECRET"):
            ClientConfig.from_env(env)

    def test_non_integer_timeout(self, env):
        env["SHOPIFY_TIMEOUT_MS"] = "soon"
        with pytest.raises(ConfigurationError, match="SHOPIFY_TIMEOUT_MS"):
            ClientConfig.from_env(env)

    def test_reads_process_environment(self, env, monkeypatch):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        assert ClientConfig.from_env().api_key == "k"
