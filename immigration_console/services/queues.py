"""Applicant queues: group members at the pending and failed immigration ranks."""

import asyncio
import logging
from abc import ABC, abstractmethod

from ..core.errors import ConsoleError
from ..models import Applicant, ApplicantQueue

logger = logging.getLogger(__name__)


class MembershipSource(ABC):
    """Lists the members holding a given rank in the immigration group."""

    @abstractmethod
    async def get_members_in_rank(self, rank: int) -> list[dict]:
        """Every member at ``rank`` (all pages), as ``{userId, username, displayName}``."""


class QueueService:
    """Builds the two applicant queues the panel shows."""

    def __init__(self, source: MembershipSource, pending_rank: int, failed_rank: int):
        self._source = source
        self._ranks = {
            ApplicantQueue.PENDING: pending_rank,
            ApplicantQueue.FAILED: failed_rank,
        }

    async def list_queue(self, queue: ApplicantQueue) -> list[Applicant]:
        """Applicants in ``queue``. An upstream failure yields an empty queue."""
        rank = self._ranks[queue]
        try:
            members = await self._source.get_members_in_rank(rank)
        except ConsoleError as e:
            logger.error(f"[GROUP] Failed to get members for rank {rank}: {e}")
            return []
        applicants = []
        for member in members:
            applicant = self._to_applicant(member, queue)
            if applicant is None:
                logger.warning(f"[GROUP] Skipping member without a user id in rank {rank}: {member!r}")
                continue
            applicants.append(applicant)
        return applicants

    async def list_all(self) -> dict[ApplicantQueue, list[Applicant]]:
        pending, failed = await asyncio.gather(
            self.list_queue(ApplicantQueue.PENDING),
            self.list_queue(ApplicantQueue.FAILED),
        )
        return {ApplicantQueue.PENDING: pending, ApplicantQueue.FAILED: failed}

    @staticmethod
    def _to_applicant(member: dict, queue: ApplicantQueue) -> Applicant | None:
        if not isinstance(member, dict):
            return None
        # Older payloads nest the user under "user" and use id/name
        user = member.get("user") or member
        try:
            user_id = int(user.get("userId") or user.get("id"))
        except (TypeError, ValueError):
            return None
        return Applicant(
            user_id=user_id,
            username=user.get("username") or user.get("name") or "Unknown",
            display_name=user.get("displayName"),
            queue=queue,
        )
