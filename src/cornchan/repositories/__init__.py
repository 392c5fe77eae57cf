"""Repositories mapping entities onto the backing store."""

from .board_repo import BoardRepository
from .thread_repo import ThreadRepository

__all__ = ["BoardRepository", "ThreadRepository"]
