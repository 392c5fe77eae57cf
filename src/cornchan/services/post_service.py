"""Service-level helpers for creating threads and comments."""
from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

from cornchan.core.errors import NotFound
from cornchan.db.store import KeyValueStore
from cornchan.repositories.board_repo import BoardRepository
from cornchan.repositories.thread_repo import ThreadRepository
from cornchan.schemas.thread import CommentThread, ParentThread, ThreadPayload
from cornchan.services.images import ImageIngestor
from cornchan.services.post_counter import next_post_id

logger = logging.getLogger(__name__)


@dataclass
class PostSubmission:
    """Form fields of a new thread or comment."""

    title: str
    content: str
    nickname: str = ""
    images: Sequence[BinaryIO | None] = field(default_factory=tuple)


@dataclass(frozen=True)
class CreatedPost:
    """A stored post together with the key it was written under."""

    thread: ParentThread | CommentThread
    key: str

    @property
    def id(self) -> int:
        return self.thread.id


class PostService:
    """Run a submission through the image pipeline, counter and store."""

    def __init__(
        self,
        *,
        store: KeyValueStore,
        boards: BoardRepository,
        threads: ThreadRepository,
        images: ImageIngestor,
        default_nickname: str = "Anonymous",
    ) -> None:
        self.store = store
        self.boards = boards
        self.threads = threads
        self.images = images
        self.default_nickname = default_nickname

    async def create_thread(
        self,
        board_slug: str,
        submission: PostSubmission,
        *,
        now: int | None = None,
    ) -> CreatedPost:
        """Open a new thread on ``board_slug``.

        Raises:
            NotFound: If the board does not exist.
            ImageError: If any supplied image is rejected.
        """
        await self.boards.get(board_slug)
        return await self._store_post(board_slug, submission, now=now, parent_thread=None)

    async def create_comment(
        self,
        board_slug: str,
        parent_thread: int,
        submission: PostSubmission,
        *,
        now: int | None = None,
    ) -> CreatedPost:
        """Reply to the thread opened by post ``parent_thread``.

        Raises:
            NotFound: If the board or the parent thread does not exist.
            ImageError: If any supplied image is rejected.
        """
        await self.boards.get(board_slug)
        parent = await self.threads.get_by_id(board_slug, parent_thread)
        if not isinstance(parent, ParentThread):
            raise NotFound("Thread not found")
        return await self._store_post(
            board_slug, submission, now=now, parent_thread=parent_thread
        )

    async def _store_post(
        self,
        board_slug: str,
        submission: PostSubmission,
        *,
        now: int | None,
        parent_thread: int | None,
    ) -> CreatedPost:
        image_ids = await self.images.ingest_async(submission.images)
        try:
            post_id = await next_post_id(self.store)
            payload = ThreadPayload(
                id=post_id,
                nickname=submission.nickname or self.default_nickname,
                title=submission.title,
                content=submission.content,
                timestamp=int(time.time()) if now is None else now,
                board=board_slug,
                image_1=image_ids[0] if len(image_ids) > 0 else None,
                image_2=image_ids[1] if len(image_ids) > 1 else None,
                image_3=image_ids[2] if len(image_ids) > 2 else None,
            )
            fields = payload.model_dump()
            thread: ParentThread | CommentThread
            if parent_thread is None:
                thread = ParentThread(**fields)
            else:
                thread = CommentThread(**fields, parent_thread=parent_thread)
            key = await self.threads.put(thread)
        except Exception:
            self.images.discard(image_ids)
            raise

        logger.info("Stored post %d on /%s/ as %s", post_id, board_slug, key)
        return CreatedPost(thread=thread, key=key)
