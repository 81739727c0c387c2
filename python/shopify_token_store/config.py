"""Client configuration for the Shopify OAuth flow."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_SCOPES,
    DEFAULT_TIMEOUT_MS,
    ENV_API_KEY,
    ENV_REDIRECT_URI,
    ENV_SCOPES,
    ENV_SHARED_SECRET,
    ENV_TIMEOUT_MS,
)
from .errors import ConfigurationError

Scopes = str | Sequence[str]


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    shared_secret: str = field(repr=False)
    redirect_uri: str
    scopes: Scopes = DEFAULT_SCOPES
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        for name in ("api_key", "shared_secret", "redirect_uri"):
            if not isinstance(getattr(self, name), str):
                raise ConfigurationError(f"{name} is not a string")

        if not self.scopes:
            object.__setattr__(self, "scopes", DEFAULT_SCOPES)
        elif not isinstance(self.scopes, str):
            object.__setattr__(self, "scopes", tuple(self.scopes))

        if self.timeout_ms is None:
            object.__setattr__(self, "timeout_ms", DEFAULT_TIMEOUT_MS)
        elif isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be a positive integer")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        env = os.environ if environ is None else environ

        missing = [name for name in (ENV_API_KEY, ENV_SHARED_SECRET, ENV_REDIRECT_URI) if not env.get(name)]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        raw_scopes = env.get(ENV_SCOPES, "")
        scopes = [scope.strip() for scope in raw_scopes.split(",") if scope.strip()]

        raw_timeout = env.get(ENV_TIMEOUT_MS)
        try:
            timeout_ms = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_MS
        except ValueError:
            raise ConfigurationError(f"{ENV_TIMEOUT_MS} is not an integer") from None

        return cls(
            api_key=env[ENV_API_KEY],
            shared_secret=env[ENV_SHARED_SECRET],
            redirect_uri=env[ENV_REDIRECT_URI],
            scopes=scopes or DEFAULT_SCOPES,
            timeout_ms=timeout_ms,
        )
