"""
Signal Collector: gathers the profile metrics the Alt Scorer consumes.

The five fetches run concurrently and fail independently. A failed fetch
leaves its slot empty (``None``) and never aborts the others; the collector
always waits for every branch to settle before returning.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from ..models import GroupMembership, SignalSet

logger = logging.getLogger(__name__)


class ProfileSource(ABC):
    """Per-subject profile queries against the external platform."""

    @abstractmethod
    async def get_account_created(self, user_id: int) -> datetime:
        """Account creation timestamp."""

    @abstractmethod
    async def get_friend_count(self, user_id: int) -> int:
        """Number of friends."""

    @abstractmethod
    async def get_favorite_count(self, user_id: int) -> int:
        """Number of favorited games (first page only)."""

    @abstractmethod
    async def get_badge_count(self, user_id: int) -> int:
        """Number of badges (first page only)."""

    @abstractmethod
    async def get_group_memberships(self, user_id: int) -> list[GroupMembership]:
        """Groups the subject belongs to, with their role in each."""


def account_age_days(created: datetime, now: datetime) -> int:
    """Whole days between ``created`` and ``now``."""
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (now - created) // timedelta(days=1)


class SignalCollector:
    """Fan out the five profile fetches for one subject and join them."""

    def __init__(self, source: ProfileSource):
        self._source = source

    async def collect(self, user_id: int, now: datetime | None = None) -> SignalSet:
        now = now or datetime.now(timezone.utc)

        created, friends, favorites, badges, groups = await asyncio.gather(
            self._source.get_account_created(user_id),
            self._source.get_friend_count(user_id),
            self._source.get_favorite_count(user_id),
            self._source.get_badge_count(user_id),
            self._source.get_group_memberships(user_id),
            return_exceptions=True,
        )

        signals = SignalSet()

        created = self._settled(user_id, "account_created", created)
        if created is not None:
            signals.account_created = created
            signals.account_age_days = account_age_days(created, now)

        signals.friend_count = self._settled(user_id, "friend_count", friends)
        signals.favorite_count = self._settled(user_id, "favorite_count", favorites)
        signals.badge_count = self._settled(user_id, "badge_count", badges)

        groups = self._settled(user_id, "groups", groups)
        if groups is not None:
            signals.groups = groups
            signals.group_count = len(groups)

        return signals

    @staticmethod
    def _settled(user_id: int, name: str, result):
        """Unwrap a gathered result, logging and discarding failures."""
        if isinstance(result, Exception):
            logger.warning(f"[SIGNALS] {name} failed for user {user_id}: {result}")
            return None
        if isinstance(result, BaseException):
            raise result
        return result
