"""Key-value store backed by Redis hashes.

Boards and threads each live in one hash mapping identity strings to JSON.
Lookups are exact-key ``HGET`` or a ``HSCAN MATCH`` prefix scan, which walks
the whole hash and is the principal scalability ceiling of the system.
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import TypeVar

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from cornchan.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

Field = str | bytes
T = TypeVar("T")

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


def escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters so ``value`` matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


def create_redis(url: str) -> aioredis.Redis:
    """Return a pooled asyncio Redis client for ``url``."""
    return aioredis.from_url(url, decode_responses=True)


class KeyValueStore:
    """Hash-table operations used by the repositories and services."""

    def __init__(self, client: aioredis.Redis) -> None:
        self.client = client

    async def _call(self, operation: Awaitable[T]) -> T:
        try:
            return await operation
        except (RedisConnectionError, RedisTimeoutError) as exc:
            logger.error("Backing store unreachable: %s", exc)
            raise StoreUnavailable() from exc

    async def put(self, table: str, key: Field, value: str) -> None:
        """Insert or overwrite ``key`` in ``table``."""
        await self._call(self.client.hset(table, key, value))

    async def get(self, table: str, key: Field) -> str | None:
        """Return the value stored under ``key`` or None."""
        return await self._call(self.client.hget(table, key))

    async def delete(self, table: str, key: Field) -> bool:
        """Remove ``key`` from ``table``; return whether it existed."""
        removed = await self._call(self.client.hdel(table, key))
        return bool(removed)

    async def get_all(self, table: str) -> dict[str, str]:
        """Return every entry of ``table``."""
        return await self._call(self.client.hgetall(table))

    async def scan_prefix(self, table: str, pattern: str) -> list[tuple[str, str]]:
        """Return every ``(key, value)`` whose key matches the glob ``pattern``.

        Callers are responsible for escaping user-supplied fragments with
        :func:`escape_glob`.
        """
        entries: list[tuple[str, str]] = []
        try:
            async for key, value in self.client.hscan_iter(table, match=pattern):
                entries.append((key, value))
        except (RedisConnectionError, RedisTimeoutError) as exc:
            logger.error("Backing store unreachable during scan: %s", exc)
            raise StoreUnavailable() from exc
        return entries

    async def increment(self, counter_key: str, delta: int = 1) -> int:
        """Atomically add ``delta`` to ``counter_key`` and return the new value."""
        return int(await self._call(self.client.incrby(counter_key, delta)))

    async def ping(self) -> bool:
        return bool(await self._call(self.client.ping()))

    async def close(self) -> None:
        await self.client.aclose()


@asynccontextmanager
async def open_store(url: str) -> AsyncIterator[KeyValueStore]:
    """Yield a store for one-off scripts and close its pool afterwards."""
    store = KeyValueStore(create_redis(url))
    try:
        yield store
    finally:
        await store.close()
