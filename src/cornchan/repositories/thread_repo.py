"""Data access helpers for working with threads and comments."""
from __future__ import annotations

from pydantic import ValidationError

from cornchan.core.errors import EncodingError, NotFound
from cornchan.db.keys import THREADS_KEY
from cornchan.db.store import KeyValueStore, escape_glob
from cornchan.schemas.thread import CommentThread, ParentThread, dump_thread, load_thread
from cornchan.services.identity import THREAD_PREFIX, ident

__all__ = ["ThreadRepository"]

AnyThread = ParentThread | CommentThread


def _decode(raw: str) -> AnyThread:
    try:
        return load_thread(raw)
    except ValidationError as exc:
        raise EncodingError(f"Corrupt thread record: {exc.error_count()} error(s)") from exc


class ThreadRepository:
    """Thin wrapper around store access for thread entities."""

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize the repository with a key-value store."""
        self.store = store

    async def put(self, thread: AnyThread) -> str:
        """Store ``thread`` under its identity string and return the key."""
        key = ident(thread)
        await self.store.put(THREADS_KEY, key, dump_thread(thread))
        return key

    async def _scan(self, board_slug: str, pattern: str) -> list[AnyThread]:
        # "thread:r:*" also matches boards such as "r:x"
        entries = await self.store.scan_prefix(THREADS_KEY, pattern)
        threads = [_decode(raw) for _, raw in entries]
        return [thread for thread in threads if thread.board == board_slug]

    async def list_for_board(self, board_slug: str) -> list[AnyThread]:
        """Return every parent post and comment of a board, newest first.

        Keys carry unpadded timestamps, so ordering is done here on the
        numeric payload fields rather than relying on key order.
        """
        pattern = f"{THREAD_PREFIX}:{escape_glob(board_slug)}:*"
        threads = await self._scan(board_slug, pattern)
        threads.sort(key=lambda thread: (thread.timestamp, thread.id), reverse=True)
        return threads

    async def get_by_id(self, board_slug: str, thread_id: int) -> AnyThread:
        """Return the post numbered ``thread_id`` on a board.

        The glob ``thread:<board>:*:<id>`` also matches comments whose parent
        is ``thread_id``, so hits are filtered on the payload id.

        Raises:
            NotFound: If no post with that number exists on the board.
        """
        pattern = f"{THREAD_PREFIX}:{escape_glob(board_slug)}:*:{thread_id}"
        for thread in await self._scan(board_slug, pattern):
            if thread.id == thread_id:
                return thread
        raise NotFound("Thread not found")

    async def list_comments(self, board_slug: str, parent_id: int) -> list[CommentThread]:
        """Return the comments replying to ``parent_id``, oldest first."""
        pattern = f"{THREAD_PREFIX}:{escape_glob(board_slug)}:*:*:{parent_id}"
        comments = [
            thread
            for thread in await self._scan(board_slug, pattern)
            if isinstance(thread, CommentThread) and thread.parent_thread == parent_id
        ]
        comments.sort(key=lambda comment: (comment.timestamp, comment.id))
        return comments
