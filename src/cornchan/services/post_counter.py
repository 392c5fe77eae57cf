"""Monotonic post number generator."""

from __future__ import annotations

from cornchan.db.keys import POST_COUNT_KEY
from cornchan.db.store import KeyValueStore


async def next_post_id(store: KeyValueStore) -> int:
    """Return the next post number shared by every board.

    Returns:
        A globally unique, strictly increasing post number.

    Notes:
        The increment is a single ``INCRBY`` so concurrent submissions never
        receive the same number, even across processes.
    """
    return await store.increment(POST_COUNT_KEY, 1)
