"""Top-level keys in the backing store."""

from typing import Final

BOARDS_KEY: Final[str] = "boards"
THREADS_KEY: Final[str] = "threads"
BANNED_IPS_KEY: Final[str] = "banned_ips"
POST_COUNT_KEY: Final[str] = "post_count"
