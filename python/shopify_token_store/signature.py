"""HMAC-SHA256 signing of Shopify OAuth callback queries.

Shopify signs the callback query string it redirects to the app with.  The
signed message is rebuilt from the query itself:

* ``hmac`` and ``signature`` are dropped,
* list values are rendered as ``["a", "b"]``,
* ``%``, ``&`` and ``=`` are percent-encoded in keys, ``%`` and ``&`` in values,
* the ``key=value`` pairs are sorted and joined with ``&``.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from collections.abc import Mapping
from urllib.parse import quote

from .constants import UNSIGNED_QUERY_KEYS

_KEY_RESERVED = re.compile(r"[%&=]")
_VALUE_RESERVED = re.compile(r"[%&]")


def _percent_encode(match: re.Match[str]) -> str:
    return quote(match.group(0), safe="")


def encode_key(key: str) -> str:
    return _KEY_RESERVED.sub(_percent_encode, key)


def encode_value(value: str) -> str:
    return _VALUE_RESERVED.sub(_percent_encode, value)


def render_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return '["' + '", "'.join(map(str, value)) + '"]'
    # query values arrive as strings; lowercase keeps bools in the form Shopify signs
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonical_message(query: Mapping[str, object]) -> str:
    pairs = sorted(
        f"{encode_key(key)}={encode_value(render_value(value))}"
        for key, value in query.items()
        if key not in UNSIGNED_QUERY_KEYS
    )
    return "&".join(pairs)


def compute_hmac(query: Mapping[str, object], shared_secret: str) -> str:
    message = canonical_message(query)
    return hmac.new(shared_secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_hmac(query: Mapping[str, object], shared_secret: str) -> bool:
    provided = query.get("hmac")
    if not isinstance(provided, str):
        return False
    expected = compute_hmac(query, shared_secret)
    return hmac.compare_digest(expected.encode("ascii"), provided.encode("utf-8"))
