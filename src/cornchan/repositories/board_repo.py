"""Data access helpers for working with boards."""
from __future__ import annotations

from pydantic import ValidationError

from cornchan.core.errors import EncodingError, NotFound
from cornchan.db.keys import BOARDS_KEY
from cornchan.db.store import KeyValueStore
from cornchan.schemas.board import Board
from cornchan.services.identity import board_key, ident

__all__ = ["BoardRepository"]


def _load_board(raw: str) -> Board:
    try:
        return Board.model_validate_json(raw)
    except ValidationError as exc:
        raise EncodingError(f"Corrupt board record: {exc.error_count()} error(s)") from exc


class BoardRepository:
    """Thin wrapper around store access for board entities."""

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize the repository with a key-value store."""
        self.store = store

    async def get(self, slug: str) -> Board:
        """Return the board for ``slug``.

        Raises:
            NotFound: If no board is stored under that slug.
            EncodingError: If the stored record is not a valid board.
        """
        raw = await self.store.get(BOARDS_KEY, board_key(slug))
        if raw is None:
            raise NotFound("Board not found")
        return _load_board(raw)

    async def list_all(self) -> list[Board]:
        """Return every board ordered by name."""
        entries = await self.store.get_all(BOARDS_KEY)
        boards = [_load_board(raw) for raw in entries.values()]
        return sorted(boards, key=lambda board: board.name)

    async def put(self, board: Board) -> str:
        """Store ``board``, overwriting any board with the same slug."""
        key = ident(board)
        await self.store.put(BOARDS_KEY, key, board.model_dump_json())
        return key
