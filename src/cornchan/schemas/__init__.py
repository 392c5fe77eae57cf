"""
Pydantic schemas for stored entities and API responses.

These schemas define the JSON shape of records in the backing store and of
API data.
"""

from .api import BoardPage, PostCreated, ThreadPage
from .board import Board
from .thread import (
    CommentThread,
    ParentThread,
    Thread,
    ThreadPayload,
    dump_thread,
    load_thread,
)

__all__ = [
    "Board",
    "BoardPage",
    "CommentThread",
    "ParentThread",
    "PostCreated",
    "Thread",
    "ThreadPage",
    "ThreadPayload",
    "dump_thread",
    "load_thread",
]
