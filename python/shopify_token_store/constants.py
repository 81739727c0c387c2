"""
Shopify OAuth constants
Endpoint templates and defaults shared by the client, the storage strategies and the CLI
"""

from pathlib import Path

# OAuth endpoints
SHOPIFY_AUTHORIZE_URL = "https://{shop_name}.myshopify.com/admin/oauth/authorize"
SHOPIFY_ACCESS_TOKEN_URL = "https://{hostname}/admin/oauth/access_token"

# OAuth scopes
DEFAULT_SCOPES = "read_content"

# Token exchange timeout, in milliseconds
DEFAULT_TIMEOUT_MS = 60000

# Callback parameters excluded from the signed payload
UNSIGNED_QUERY_KEYS = ("hmac", "signature")

# Environment variables read by ClientConfig.from_env
ENV_API_KEY = "SHOPIFY_API_KEY"
ENV_SHARED_SECRET = "SHOPIFY_SHARED_SECRET"
ENV_REDIRECT_URI = "SHOPIFY_REDIRECT_URI"
ENV_SCOPES = "SHOPIFY_SCOPES"
ENV_TIMEOUT_MS = "SHOPIFY_TIMEOUT_MS"

# Durable token storage
CONFIG_DIR = Path.home() / ".shopify-token-store"
TOKENS_FILE = CONFIG_DIR / "tokens.json"
