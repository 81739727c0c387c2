"""Nonce utilities for the OAuth ``state`` parameter (CSRF protection)."""

import secrets

NONCE_BYTES = 16


def generate_nonce() -> str:
    return secrets.token_bytes(NONCE_BYTES).hex()
