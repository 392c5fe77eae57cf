"""Application context shared by request handlers.

The context is built once at startup and handed to every handler through a
FastAPI dependency. Only the Redis connection pool inside it is mutable.
"""

from __future__ import annotations

from dataclasses import dataclass

import redis.asyncio as aioredis

from cornchan.core.settings import Settings
from cornchan.db.store import KeyValueStore, create_redis
from cornchan.repositories.board_repo import BoardRepository
from cornchan.repositories.thread_repo import ThreadRepository
from cornchan.services.bans import BanService
from cornchan.services.images import ImageIngestor, ImagePolicy
from cornchan.services.post_service import PostService


@dataclass
class AppContext:
    """Everything a request handler needs, wired together."""

    settings: Settings
    store: KeyValueStore
    boards: BoardRepository
    threads: ThreadRepository
    bans: BanService
    images: ImageIngestor
    posts: PostService

    @classmethod
    def build(cls, cfg: Settings, client: aioredis.Redis | None = None) -> AppContext:
        """Wire the services for ``cfg``, connecting to Redis unless a client is given."""
        store = KeyValueStore(client if client is not None else create_redis(cfg.redis_url))
        boards = BoardRepository(store)
        threads = ThreadRepository(store)
        images = ImageIngestor(cfg.public_dir, ImagePolicy.from_settings(cfg))
        return cls(
            settings=cfg,
            store=store,
            boards=boards,
            threads=threads,
            bans=BanService(store),
            images=images,
            posts=PostService(
                store=store,
                boards=boards,
                threads=threads,
                images=images,
                default_nickname=cfg.default_nickname,
            ),
        )

    async def close(self) -> None:
        await self.store.close()
