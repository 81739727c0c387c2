"""Shared fixtures for the Shopify OAuth client tests."""

import pytest

from shopify_token_store import ClientConfig, ShopifyTokenStore


@pytest.fixture
def config() -> ClientConfig:
    """A valid client configuration."""
    return ClientConfig(
        api_key="k",
        shared_secret="secret",
        redirect_uri="https://app.example.com/cb",
    )


@pytest.fixture
def token_store(config: ClientConfig) -> ShopifyTokenStore:
    """A client backed by the default in-memory strategy."""
    return ShopifyTokenStore(config)
