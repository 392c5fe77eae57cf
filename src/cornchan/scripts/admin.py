"""Out-of-band administration: seed boards and manage IP bans."""
from __future__ import annotations

import argparse
import asyncio
import sys
import time

from cornchan.core.errors import CornchanError
from cornchan.core.settings import settings
from cornchan.db.store import KeyValueStore, open_store
from cornchan.repositories.board_repo import BoardRepository
from cornchan.schemas import Board
from cornchan.services.bans import BanService
from cornchan.services.identity import slugify


async def add_board(store: KeyValueStore, name: str, description: str, slug: str | None) -> Board:
    """Create or overwrite a board, deriving the slug from the name by default."""
    board = Board(name=name, slug=slug or slugify(name), description=description)
    key = await BoardRepository(store).put(board)
    print(f"[admin] stored {key}")
    return board


async def list_boards(store: KeyValueStore) -> list[Board]:
    boards = await BoardRepository(store).list_all()
    for board in boards:
        print(f"/{board.slug}/\t{board.name}\t{board.description}")
    return boards


async def ban(store: KeyValueStore, address: str, seconds: int) -> int:
    """Ban ``address`` for ``seconds`` from now and return the expiry."""
    expires_at = int(time.time()) + seconds
    digest = await BanService(store).issue_ban(address, expires_at)
    print(f"[admin] banned {digest.hex()} until {expires_at}")
    return expires_at


async def unban(store: KeyValueStore, address: str) -> bool:
    removed = await BanService(store).lift_ban(address)
    print(f"[admin] {'lifted ban on' if removed else 'no ban found for'} {address}")
    return removed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage cornchan boards and bans")
    parser.add_argument(
        "--url",
        default=None,
        help="Override Redis URL (defaults to REDIS_URL)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    board_cmd = sub.add_parser("board", help="Create or overwrite a board")
    board_cmd.add_argument("name")
    board_cmd.add_argument("--description", default="")
    board_cmd.add_argument("--slug", default=None, help="Explicit slug instead of the slugified name")

    sub.add_parser("boards", help="List boards")

    ban_cmd = sub.add_parser("ban", help="Ban an IP address from posting")
    ban_cmd.add_argument("address")
    ban_cmd.add_argument("--seconds", type=int, default=86_400)

    unban_cmd = sub.add_parser("unban", help="Lift a ban early")
    unban_cmd.add_argument("address")
    return parser


async def run(args: argparse.Namespace) -> None:
    async with open_store(args.url or settings.redis_url) as store:
        if args.command == "board":
            await add_board(store, args.name, args.description, args.slug)
        elif args.command == "boards":
            await list_boards(store)
        elif args.command == "ban":
            await ban(store, args.address, args.seconds)
        elif args.command == "unban":
            await unban(store, args.address)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(run(args))
    except CornchanError as exc:
        print(f"[admin] ERROR: {exc.detail}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
