"""
Key domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
from datetime import datetime
from typing import Optional

from keys.domain.key import is_expired, utcnow
from keys.ports.key_repository import KeyRepository

logger = logging.getLogger(__name__)


class KeyJanitor:
    """
    Domain service that persists the expiry of keys past their window.

    It only writes what ``is_expired`` already implies, so it can run
    alongside the lazy expiry checks of activation and verification.
    """

    def __init__(self, repository: KeyRepository):
        """Initialize janitor with the key repository."""
        self.repository = repository

    async def sweep(self, now: Optional[datetime] = None) -> int:
        """
        Transition every active key past its expiry time to expired.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            Number of keys whose status changed
        """
        now = now or utcnow()
        candidates = await self.repository.find_expired_active(now)

        expired = 0
        for key in candidates:
            if not is_expired(key, now):
                continue
            try:
                if await self.repository.mark_expired(key.id):
                    expired += 1
                    logger.info("Marked key %s as expired", key.id)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(
                    "Error marking key %s as expired: %s",
                    key.id,
                    e,
                    exc_info=True,
                )
        return expired
