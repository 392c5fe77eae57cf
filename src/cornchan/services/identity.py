"""Deterministic identity strings for boards and threads.

The identity of an entity is both its key in the backing store and its
stable external reference:

* board:   ``board:<slug>``
* parent:  ``thread:<board>:<timestamp>:<id>``
* comment: ``thread:<board>:<timestamp>:<id>:<parent_thread>``

Timestamps are written unpadded, so key order is not numeric order.
"""

from __future__ import annotations

from cornchan.schemas import Board, CommentThread, ParentThread

BOARD_PREFIX = "board"
THREAD_PREFIX = "thread"

_SLUG_WHITESPACE = str.maketrans({" ": "_", "\r": "_", "\n": "_", "\t": "_"})


def slugify(name: str) -> str:
    """Return the URL slug for a board name.

    Leading and trailing whitespace is trimmed, then every space, CR, LF and
    TAB is replaced by an underscore. Other characters are kept as-is.
    """
    return name.strip().translate(_SLUG_WHITESPACE)


def board_key(slug: str) -> str:
    return f"{BOARD_PREFIX}:{slug}"


def ident(entity: Board | ParentThread | CommentThread) -> str:
    """Return the identity string of a board or thread."""
    if isinstance(entity, Board):
        return board_key(entity.slug)
    if isinstance(entity, CommentThread):
        return (
            f"{THREAD_PREFIX}:{entity.board}:{entity.timestamp}:{entity.id}"
            f":{entity.parent_thread}"
        )
    if isinstance(entity, ParentThread):
        return f"{THREAD_PREFIX}:{entity.board}:{entity.timestamp}:{entity.id}"
    raise TypeError(f"Cannot derive an identity for {type(entity).__name__}")
