"""IP ban gate for post creation."""

from __future__ import annotations

import logging
import time
from enum import Enum

from cornchan.core.errors import EncodingError, Forbidden
from cornchan.db.keys import BANNED_IPS_KEY
from cornchan.db.store import KeyValueStore
from cornchan.utils.hash import hash_ip

logger = logging.getLogger(__name__)


class BanStatus(str, Enum):
    """Outcome of a ban check."""

    ALLOWED = "allowed"
    BLOCKED = "blocked"


def _now() -> int:
    return int(time.time())


class BanService:
    """Service checking callers against the ``banned_ips`` table.

    The table maps the Keccak-224 digest of a textual IP address to the unix
    timestamp at which the ban is lifted. Expired records are deleted the next
    time they are observed.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    async def check(self, address: str, *, now: int | None = None) -> BanStatus:
        """Return whether ``address`` may post right now."""
        digest = hash_ip(address)
        raw_expiry = await self.store.get(BANNED_IPS_KEY, digest)
        if raw_expiry is None:
            return BanStatus.ALLOWED

        try:
            expiry = int(raw_expiry)
        except ValueError as exc:
            raise EncodingError(f"Corrupt ban record for {digest.hex()}") from exc

        current = _now() if now is None else now
        if expiry > current:
            logger.warning("Address %s is banned until %d", digest.hex(), expiry)
            return BanStatus.BLOCKED

        logger.debug("Ban for %s expired at %s; removing", digest.hex(), raw_expiry)
        await self.store.delete(BANNED_IPS_KEY, digest)
        return BanStatus.ALLOWED

    async def enforce(self, address: str, *, now: int | None = None) -> None:
        """Raise :class:`Forbidden` if ``address`` has an active ban."""
        if await self.check(address, now=now) is BanStatus.BLOCKED:
            raise Forbidden("banned")

    async def issue_ban(self, address: str, expires_at: int) -> bytes:
        """Ban ``address`` until the unix timestamp ``expires_at``."""
        digest = hash_ip(address)
        await self.store.put(BANNED_IPS_KEY, digest, str(int(expires_at)))
        logger.info("Banned %s until %d", digest.hex(), expires_at)
        return digest

    async def lift_ban(self, address: str) -> bool:
        """Remove any ban on ``address``; return whether one existed."""
        return await self.store.delete(BANNED_IPS_KEY, hash_ip(address))
