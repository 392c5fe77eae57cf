"""Tests for identity strings and slugs."""

from __future__ import annotations

import pytest

from cornchan.schemas import Board, CommentThread, ParentThread
from cornchan.services.identity import ident, slugify


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 7,
        "nickname": "Anonymous",
        "title": "t",
        "content": "c",
        "timestamp": 1_700_000_000,
        "board": "r",
    }
    payload.update(overrides)
    return payload


def test_board_identity_uses_slug() -> None:
    board = Board(name="Random Stuff", slug="Random_Stuff", description="")
    assert ident(board) == "board:Random_Stuff"


def test_parent_identity_orders_board_timestamp_id() -> None:
    parent = ParentThread(**_payload())
    assert ident(parent) == "thread:r:1700000000:7"


def test_comment_identity_suffixes_parent() -> None:
    comment = CommentThread(**_payload(id=8), parent_thread=7)
    assert ident(comment) == "thread:r:1700000000:8:7"


def test_timestamp_is_not_padded() -> None:
    parent = ParentThread(**_payload(timestamp=9, id=1))
    assert ident(parent) == "thread:r:9:1"


def test_ident_rejects_unknown_entities() -> None:
    with pytest.raises(TypeError):
        ident("not an entity")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Random", "Random"),
        ("test board", "test_board"),
        ("  padded name \n", "padded_name"),
        ("tabs\tand\r\nbreaks", "tabs_and__breaks"),
        ("a  b", "a__b"),
        ("日本 語", "日本_語"),
        ("no\u00a0break", "no\u00a0break"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected


@pytest.mark.parametrize("name", ["", "   ", " x y ", "tech\t\tnews", "ünïcødé board\n"])
def test_slugify_is_idempotent(name: str) -> None:
    assert slugify(slugify(name)) == slugify(name)
