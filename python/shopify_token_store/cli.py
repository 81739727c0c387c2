#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from urllib.parse import parse_qsl

import httpx

from .config import ClientConfig
from .constants import TOKENS_FILE
from .errors import AccessTokenError, ConfigurationError, RequestTimeoutError
from .oauth import ShopifyTokenStore
from .storage import JsonFileStrategy


def parse_query(query_string: str) -> dict[str, str | list[str]]:
    query: dict[str, str | list[str]] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        if key in query:
            existing = query[key]
            query[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            query[key] = value
    return query


def build_store(tokens_file: Path) -> ShopifyTokenStore:
    try:
        config = ClientConfig.from_env()
    except ConfigurationError as e:
        print(f"\033[31mConfiguration error: {e}\033[0m")
        sys.exit(2)
    return ShopifyTokenStore(config, store_strategy=JsonFileStrategy(tokens_file))


def cmd_url(store: ShopifyTokenStore, shop_name: str, scopes: list[str] | None, nonce: str | None) -> None:
    nonce = nonce or store.generate_nonce()
    print(store.generate_authorization_url(shop_name, scopes=scopes, nonce=nonce))
    print(f"\033[90mstate: {nonce}\033[0m", file=sys.stderr)


def cmd_verify(store: ShopifyTokenStore, query_string: str) -> None:
    if store.verify_hmac(parse_query(query_string)):
        print("\033[32mSignature valid\033[0m")
        return
    print("\033[31mSignature invalid\033[0m")
    sys.exit(1)


def cmd_exchange(store: ShopifyTokenStore, hostname: str, code: str, user_id: str | None) -> None:
    async def exchange() -> None:
        access_token = await store.get_access_token(hostname, code)
        if user_id:
            await store.store(user_id, hostname, access_token)

    try:
        asyncio.run(exchange())
    except RequestTimeoutError:
        print(f"\nToken exchange timed out after {store.config.timeout_ms} ms")
        sys.exit(1)
    except AccessTokenError as e:
        print(f"\nToken exchange failed: {e} (HTTP {e.status_code})")
        sys.exit(1)
    except httpx.TransportError as e:
        print(f"\nToken exchange failed: {e}")
        sys.exit(1)

    print(f"Success! Access token obtained for {hostname}.")
    if user_id:
        print(f"Stored for user {user_id}.")


def cmd_token(store: ShopifyTokenStore, user_id: str | None, shop_name: str | None, show: bool) -> None:
    if user_id:
        access_token = asyncio.run(store.get_by_user_id(user_id))
        subject = f"user {user_id}"
    else:
        access_token = asyncio.run(store.get_by_shop_name(shop_name or ""))
        subject = f"shop {shop_name}"

    if access_token is None:
        print(f"No access token stored for {subject}.")
        sys.exit(1)

    print(access_token if show else f"Access token stored for {subject}.")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Shopify OAuth token store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  SHOPIFY_API_KEY, SHOPIFY_SHARED_SECRET, SHOPIFY_REDIRECT_URI (required)
  SHOPIFY_SCOPES, SHOPIFY_TIMEOUT_MS (optional)

Examples:
  shopify-token-store url acme --scope read_products --scope write_orders
  shopify-token-store verify "code=abc&hmac=...&shop=acme.myshopify.com&timestamp=123"
  shopify-token-store exchange acme.myshopify.com abc --user 42
  shopify-token-store token --user 42
""",
    )
    parser.add_argument("--tokens-file", type=Path, default=TOKENS_FILE, help=f"Token file (default: {TOKENS_FILE})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    url_parser = subparsers.add_parser("url", help="Print the authorization URL for a shop")
    url_parser.add_argument("shop", help="Shop name, without .myshopify.com")
    url_parser.add_argument("-s", "--scope", action="append", dest="scopes", help="Scope to request (can use multiple times)")
    url_parser.add_argument("-n", "--nonce", help="State value (default: random)")

    verify_parser = subparsers.add_parser("verify", help="Check the signature of an OAuth callback query string")
    verify_parser.add_argument("query", help="Callback query string")

    exchange_parser = subparsers.add_parser("exchange", help="Exchange an authorization code for an access token")
    exchange_parser.add_argument("hostname", help="Shop hostname, e.g. acme.myshopify.com")
    exchange_parser.add_argument("code", help="Authorization code from the callback")
    exchange_parser.add_argument("-u", "--user", help="Store the token for this user id")

    token_parser = subparsers.add_parser("token", help="Look up a stored access token")
    lookup = token_parser.add_mutually_exclusive_group(required=True)
    lookup.add_argument("-u", "--user", help="User id")
    lookup.add_argument("-s", "--shop", help="Shop hostname")
    token_parser.add_argument("--show", action="store_true", help="Print the token itself")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return

    store = build_store(args.tokens_file)

    if args.command == "url":
        cmd_url(store, args.shop, args.scopes, args.nonce)
    elif args.command == "verify":
        cmd_verify(store, args.query)
    elif args.command == "exchange":
        cmd_exchange(store, args.hostname, args.code, args.user)
    elif args.command == "token":
        cmd_token(store, args.user, args.shop, args.show)


if __name__ == "__main__":
    main()
