# src/cornchan/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .boards import router as boards_router
from .posts import router as posts_router

__all__ = [
    "boards_router",
    "posts_router",
]
