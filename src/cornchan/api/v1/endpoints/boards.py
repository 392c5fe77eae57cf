# src/cornchan/api/v1/endpoints/boards.py
"""Board and thread read endpoints for the cornchan API."""

from __future__ import annotations

from fastapi import APIRouter

from cornchan.schemas import Board, BoardPage, ThreadPage

from ..dependencies import ContextDep

router = APIRouter(prefix="/boards", tags=["boards"])


@router.get("/", response_model=list[Board])
async def list_boards(context: ContextDep) -> list[Board]:
    """List all boards."""
    return await context.boards.list_all()


@router.get("/{board_slug}", response_model=BoardPage)
async def get_board(board_slug: str, context: ContextDep) -> BoardPage:
    """Get a board and every post on it, newest first.

    Raises:
        NotFound: If the board does not exist.
    """
    board = await context.boards.get(board_slug)
    threads = await context.threads.list_for_board(board_slug)
    return BoardPage(board=board, threads=threads)


@router.get("/{board_slug}/threads/{thread_id}", response_model=ThreadPage)
async def get_thread(board_slug: str, thread_id: int, context: ContextDep) -> ThreadPage:
    """Get a thread's opening post and its comments.

    Raises:
        NotFound: If the board or the post does not exist.
    """
    board = await context.boards.get(board_slug)
    thread = await context.threads.get_by_id(board_slug, thread_id)
    comments = await context.threads.list_comments(board_slug, thread_id)
    return ThreadPage(board=board, thread=thread, comments=comments)
