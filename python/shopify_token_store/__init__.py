"""Shopify OAuth client: authorization URLs, callback verification, token exchange and storage."""

from .config import ClientConfig
from .errors import (
    AccessTokenError,
    ConfigurationError,
    HmacVerificationError,
    HttpStatusError,
    RequestTimeoutError,
    ResponseParseError,
    ShopifyTokenStoreError,
)
from .nonce import generate_nonce
from .oauth import ShopifyTokenStore
from .storage import JsonFileStrategy, MemoryStrategy, TokenStoreStrategy

__all__ = [
    "AccessTokenError",
    "ClientConfig",
    "ConfigurationError",
    "HmacVerificationError",
    "HttpStatusError",
    "JsonFileStrategy",
    "MemoryStrategy",
    "RequestTimeoutError",
    "ResponseParseError",
    "ShopifyTokenStore",
    "ShopifyTokenStoreError",
    "TokenStoreStrategy",
    "generate_nonce",
]
