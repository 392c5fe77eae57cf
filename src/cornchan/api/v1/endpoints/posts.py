# src/cornchan/api/v1/endpoints/posts.py
"""Thread and comment creation endpoints for the cornchan API.

Every route in this router sits behind the ban gate; read routes live in
:mod:`.boards` and are never ban-checked.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from cornchan.schemas import PostCreated
from cornchan.services.post_service import CreatedPost, PostSubmission

from ..dependencies import ContextDep, enforce_ban

router = APIRouter(
    prefix="/boards",
    tags=["posts"],
    dependencies=[Depends(enforce_ban)],
)

TitleField = Annotated[str, Form(max_length=200)]
ContentField = Annotated[str, Form(max_length=10_000)]
NicknameField = Annotated[str, Form(max_length=64)]
ImageField = Annotated[UploadFile | None, File()]


def _submission(
    title: str,
    content: str,
    nickname: str,
    uploads: list[UploadFile | None],
) -> PostSubmission:
    return PostSubmission(
        title=title,
        content=content,
        nickname=nickname,
        images=[upload.file if upload is not None else None for upload in uploads],
    )


def _created(post: CreatedPost) -> PostCreated:
    return PostCreated(id=post.id, key=post.key, images=post.thread.images)


@router.post(
    "/{board_slug}/threads",
    response_model=PostCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_thread(
    board_slug: str,
    context: ContextDep,
    title: TitleField = "",
    content: ContentField = "",
    nickname: NicknameField = "",
    image_1: ImageField = None,
    image_2: ImageField = None,
    image_3: ImageField = None,
) -> PostCreated:
    """Open a new thread with up to three images.

    Raises:
        NotFound: If the board does not exist.
        ImageError: If an uploaded image is rejected.
    """
    submission = _submission(title, content, nickname, [image_1, image_2, image_3])
    post = await context.posts.create_thread(board_slug, submission)
    return _created(post)


@router.post(
    "/{board_slug}/threads/{parent_thread}/comments",
    response_model=PostCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    board_slug: str,
    parent_thread: int,
    context: ContextDep,
    title: TitleField = "",
    content: ContentField = "",
    nickname: NicknameField = "",
    image_1: ImageField = None,
    image_2: ImageField = None,
    image_3: ImageField = None,
) -> PostCreated:
    """Reply to an existing thread with up to three images.

    Raises:
        NotFound: If the board or parent thread does not exist.
        ImageError: If an uploaded image is rejected.
    """
    submission = _submission(title, content, nickname, [image_1, image_2, image_3])
    post = await context.posts.create_comment(board_slug, parent_thread, submission)
    return _created(post)
