"""Response schemas for the HTTP API."""

from pydantic import BaseModel, Field

from .board import Board
from .thread import Thread


class BoardPage(BaseModel):
    """A board together with all of its posts, newest first."""

    board: Board
    threads: list[Thread]


class ThreadPage(BaseModel):
    """An opening post with its comments, oldest first."""

    board: Board
    thread: Thread
    comments: list[Thread] = Field(default_factory=list)


class PostCreated(BaseModel):
    """Identifiers assigned to a newly stored post."""

    id: int = Field(..., description="Post number allocated from the shared counter")
    key: str = Field(..., description="Identity string the post is stored under")
    images: list[str] = Field(default_factory=list, description="Stored image identifiers")
