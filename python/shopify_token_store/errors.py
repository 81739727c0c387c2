"""Exception types raised by the Shopify OAuth client."""

from __future__ import annotations


class ShopifyTokenStoreError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ShopifyTokenStoreError):
    """Raised when the client configuration is invalid."""


class HmacVerificationError(ShopifyTokenStoreError):
    """Raised when an OAuth callback carries a signature that does not match."""


class RequestTimeoutError(ShopifyTokenStoreError, TimeoutError):
    """Raised when the access token exchange does not complete in time."""


class AccessTokenError(ShopifyTokenStoreError):
    """The token endpoint answered, but not with a usable access token.

    The raw body and status are kept for diagnostics; neither is part of
    ``str(error)``.
    """

    def __init__(self, message: str, response_body: str, status_code: int) -> None:
        super().__init__(message)
        self.response_body = response_body
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.args[0]!r}, status_code={self.status_code})"


class HttpStatusError(AccessTokenError):
    """Raised when the token endpoint responds with a status other than 200."""


class ResponseParseError(AccessTokenError):
    """Raised when a 200 response body cannot be read as a token payload."""
