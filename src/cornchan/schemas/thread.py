"""Thread schemas.

A stored thread is either a parent post that opens a thread or a comment
replying to one. Both share :class:`ThreadPayload`; a comment adds
``parent_thread``. Records are flat JSON objects carrying a ``kind`` field.
Records written without ``kind`` are told apart by the presence of
``parent_thread``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

KIND_PARENT = "parent"
KIND_COMMENT = "comment"


class ThreadPayload(BaseModel):
    """Fields shared by parent posts and comments."""

    id: int = Field(..., ge=0, description="Globally unique post number")
    nickname: str
    title: str
    content: str
    timestamp: int = Field(..., ge=0, description="Unix seconds at submission")
    board: str = Field(..., description="Slug of the owning board")
    image_1: str | None = None
    image_2: str | None = None
    image_3: str | None = None

    model_config = ConfigDict(extra="ignore")

    @property
    def images(self) -> list[str]:
        """Return the stored image identifiers in slot order."""
        return [image for image in (self.image_1, self.image_2, self.image_3) if image]


class ParentThread(ThreadPayload):
    """A post that starts a thread."""

    kind: Literal["parent"] = KIND_PARENT


class CommentThread(ThreadPayload):
    """A reply to the parent post numbered ``parent_thread``."""

    kind: Literal["comment"] = KIND_COMMENT
    parent_thread: int = Field(..., ge=0)


def _thread_kind(value: Any) -> str | None:
    if isinstance(value, dict):
        if "kind" in value:
            return value["kind"]
        return KIND_COMMENT if "parent_thread" in value else KIND_PARENT
    return getattr(value, "kind", None)


Thread = Annotated[
    Union[
        Annotated[ParentThread, Tag(KIND_PARENT)],
        Annotated[CommentThread, Tag(KIND_COMMENT)],
    ],
    Discriminator(_thread_kind),
]

thread_adapter: TypeAdapter[ParentThread | CommentThread] = TypeAdapter(Thread)


def dump_thread(thread: ParentThread | CommentThread) -> str:
    """Serialize a thread to its stored JSON form."""
    return thread.model_dump_json()


def load_thread(raw: str | bytes) -> ParentThread | CommentThread:
    """Deserialize a stored thread, picking the variant from the record."""
    return thread_adapter.validate_json(raw)
