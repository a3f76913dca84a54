"""Sweeper for expired token rows.

Expired verification and reset tokens are already rejected on use, and an
expired session token is refused by the codec, so their rows only take up
space. This service deletes them.
"""

from tollgate.core.clock import Clock, utc_now
from tollgate.core.logging import get_logger
from tollgate.domain.ports import CleanupResult, TokenStore

logger = get_logger(__name__)


class TokenCleanupService:
    """Deletes expired blacklist, verification and password reset rows."""

    def __init__(self, token_store: TokenStore, clock: Clock = utc_now) -> None:
        self.token_store = token_store
        self.clock = clock

    async def run_once(self) -> CleanupResult:
        """Run one sweep and report how many rows were removed."""
        result = await self.token_store.purge_expired(self.clock())
        logger.info(
            "Expired tokens purged",
            blacklisted=result.blacklisted,
            verification=result.verification,
            password_reset=result.password_reset,
            total=result.total,
        )
        return result
