"""OAuth flow handling for Shopify app installs."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from urllib.parse import urlencode

import httpx

from .config import ClientConfig, Scopes
from .constants import SHOPIFY_ACCESS_TOKEN_URL, SHOPIFY_AUTHORIZE_URL
from .errors import (
    HmacVerificationError,
    HttpStatusError,
    RequestTimeoutError,
    ResponseParseError,
)
from .nonce import generate_nonce
from .signature import verify_hmac
from .storage import MemoryStrategy, TokenStoreStrategy

logger = logging.getLogger(__name__)


class ShopifyTokenStore:
    """Authorizes a Shopify app against shops and keeps the resulting tokens."""

    def __init__(
        self,
        config: ClientConfig,
        store_strategy: TokenStoreStrategy | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self.store_strategy = store_strategy if store_strategy is not None else MemoryStrategy()
        self._http_client = http_client

    @classmethod
    def create(
        cls,
        *,
        api_key: str,
        shared_secret: str,
        redirect_uri: str,
        scopes: Scopes | None = None,
        timeout_ms: int | None = None,
        store_strategy: TokenStoreStrategy | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> ShopifyTokenStore:
        config = ClientConfig(
            api_key=api_key,
            shared_secret=shared_secret,
            redirect_uri=redirect_uri,
            scopes=scopes,
            timeout_ms=timeout_ms,
        )
        return cls(config, store_strategy=store_strategy, http_client=http_client)

    generate_nonce = staticmethod(generate_nonce)

    def generate_authorization_url(
        self,
        shop_name: str,
        scopes: Scopes | None = None,
        nonce: str | None = None,
    ) -> str:
        scopes = scopes or self.config.scopes
        params = {
            "scope": scopes if isinstance(scopes, str) else ",".join(scopes),
            "state": nonce or generate_nonce(),
            "redirect_uri": self.config.redirect_uri,
            "client_id": self.config.api_key,
        }
        return f"{SHOPIFY_AUTHORIZE_URL.format(shop_name=shop_name)}?{urlencode(params)}"

    def verify_hmac(self, query: Mapping[str, object]) -> bool:
        valid = verify_hmac(query, self.config.shared_secret)
        if not valid:
            logger.warning("HMAC verification failed for shop %s", query.get("shop"))
        return valid

    async def get_access_token(self, hostname: str, code: str) -> str:
        url = SHOPIFY_ACCESS_TOKEN_URL.format(hostname=hostname)
        payload = {
            "client_secret": self.config.shared_secret,
            "client_id": self.config.api_key,
            "code": code,
        }
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        logger.debug("Requesting access token from %s", hostname)
        try:
            response = await asyncio.wait_for(
                self._post(url, payload, headers), timeout=self.config.timeout_seconds
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("Access token request to %s timed out after %d ms", hostname, self.config.timeout_ms)
            raise RequestTimeoutError("Request timed out") from None

        body = response.text
        logger.debug("Access token response from %s: %d", hostname, response.status_code)

        if response.status_code != 200:
            raise HttpStatusError("Failed to get Shopify access token", body, response.status_code)

        try:
            access_token = json.loads(body)["access_token"]
        except (json.JSONDecodeError, KeyError, TypeError):
            raise ResponseParseError("Failed to parse the response body", body, response.status_code) from None

        if not isinstance(access_token, str):
            raise ResponseParseError("Response body has no access token", body, response.status_code)
        return access_token

    async def _post(self, url: str, payload: dict[str, str], headers: dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, json=payload, headers=headers)

        async with httpx.AsyncClient(timeout=None) as client:
            return await client.post(url, json=payload, headers=headers)

    async def authorize_callback(self, query: Mapping[str, object], user_id: str | None = None) -> str:
        if not self.verify_hmac(query):
            raise HmacVerificationError("OAuth callback signature does not match")

        shop_name = str(query["shop"])
        access_token = await self.get_access_token(shop_name, str(query["code"]))
        if user_id is not None:
            await self.store(user_id, shop_name, access_token)
        return access_token

    async def get_by_user_id(self, user_id: str) -> str | None:
        return await self.store_strategy.get_by_user_id(user_id)

    async def get_by_shop_name(self, shop_name: str) -> str | None:
        return await self.store_strategy.get_by_shop_name(shop_name)

    async def store(self, user_id: str, shop_name: str, access_token: str) -> None:
        await self.store_strategy.store(user_id, shop_name, access_token)
