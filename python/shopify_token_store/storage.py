"""Token storage strategies - keep shop access tokens and the users that own them."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from .constants import TOKENS_FILE

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenStoreStrategy(Protocol):
    """Persistence interface for shop access tokens.

    A user id resolves to a shop name, and a shop name to its access token.
    """

    async def get_by_user_id(self, user_id: str) -> str | None: ...

    async def get_by_shop_name(self, shop_name: str) -> str | None: ...

    async def store(self, user_id: str, shop_name: str, access_token: str) -> None: ...


class MemoryStrategy:
    """In-process storage, lost when the process exits."""

    def __init__(self) -> None:
        self.access_token_by_shop_name: dict[str, str] = {}
        self.shop_name_by_user_id: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get_by_user_id(self, user_id: str) -> str | None:
        async with self._lock:
            shop_name = self.shop_name_by_user_id.get(user_id)
            if not shop_name:
                return None
            return self.access_token_by_shop_name.get(shop_name)

    async def get_by_shop_name(self, shop_name: str) -> str | None:
        if not shop_name:
            return None
        async with self._lock:
            return self.access_token_by_shop_name.get(shop_name)

    async def store(self, user_id: str, shop_name: str, access_token: str) -> None:
        async with self._lock:
            self.shop_name_by_user_id[user_id] = shop_name
            self.access_token_by_shop_name[shop_name] = access_token
        logger.debug("Stored access token for shop %s", shop_name)


class JsonFileStrategy:
    """Durable storage in a JSON file readable only by the current user.

    File access runs in a worker thread. Writes go to a private temp file that
    replaces the token file in one step, so a failed write leaves the previous
    document in place.
    """

    def __init__(self, path: Path | str = TOKENS_FILE) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _load(self) -> tuple[dict[str, str], dict[str, str]]:
        try:
            if not self.path.exists():
                return {}, {}
            data = json.loads(self.path.read_text())
            return dict(data["accessTokenByShopName"]), dict(data["shopNameByUserId"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError):
            logger.warning("Ignoring unreadable token file %s", self.path)
            return {}, {}

    def _save(self, tokens_by_shop: dict[str, str], shops_by_user: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "accessTokenByShopName": tokens_by_shop,
            "shopNameByUserId": shops_by_user,
        }
        # mkstemp creates the file owner read/write only
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _update(self, user_id: str, shop_name: str, access_token: str) -> None:
        tokens_by_shop, shops_by_user = self._load()
        shops_by_user[user_id] = shop_name
        tokens_by_shop[shop_name] = access_token
        self._save(tokens_by_shop, shops_by_user)

    async def get_by_user_id(self, user_id: str) -> str | None:
        async with self._lock:
            tokens_by_shop, shops_by_user = await asyncio.to_thread(self._load)
        shop_name = shops_by_user.get(user_id)
        if not shop_name:
            return None
        return tokens_by_shop.get(shop_name)

    async def get_by_shop_name(self, shop_name: str) -> str | None:
        if not shop_name:
            return None
        async with self._lock:
            tokens_by_shop, _ = await asyncio.to_thread(self._load)
        return tokens_by_shop.get(shop_name)

    async def store(self, user_id: str, shop_name: str, access_token: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._update, user_id, shop_name, access_token)
        logger.debug("Stored access token for shop %s in %s", shop_name, self.path)
