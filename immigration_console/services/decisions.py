"""
Decision service: staff accept/deny actions and staff notes.

A staff action does two logically independent things:
1. Saves the staff note (if any), replacing the previous one.
2. Moves the subject to the target rank on the external platform.

The note is saved before the rank mutation is attempted, and a failed
mutation never undoes it. Mutation failures are logged and reported back in
the outcome; they are not raised.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone

from ..core.errors import ConsoleError, InvalidArgumentError
from ..models import RankUpdateStatus, StaffDecision, StaffNote

logger = logging.getLogger(__name__)


class RankMutationService(ABC):
    """Sets a subject's rank within the immigration group."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the service is configured to make changes at all."""

    @abstractmethod
    async def set_rank(self, user_id: int, rank: int) -> None:
        """Move ``user_id`` to ``rank``. Raises UpstreamUnavailableError on failure."""


# =============================================================================
# DISPATCHER
# =============================================================================


class DecisionDispatcher:
    """Resolves a staff decision to the rank it moves the subject to."""

    def __init__(self, accepted_rank: int, denied_rank: int):
        self._ranks = {
            StaffDecision.ACCEPT: accepted_rank,
            StaffDecision.DENY: denied_rank,
        }

    def dispatch(self, user_id: int, decision: str | StaffDecision) -> int:
        """Return the target rank for ``decision``."""
        try:
            staff_decision = StaffDecision(decision)
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown decision {decision!r} for user {user_id}"
            ) from None
        return self._ranks[staff_decision]


# =============================================================================
# NOTES
# =============================================================================


class NoteStore:
    """Latest staff note per subject, in process memory."""

    def __init__(self):
        self._notes: dict[str, StaffNote] = {}

    def get(self, user_id: int | str) -> StaffNote | None:
        return self._notes.get(str(user_id))

    def save(
        self,
        user_id: int | str,
        text: str | None,
        staff_username: str,
        now: datetime | None = None,
    ) -> StaffNote | None:
        """Replace the note for ``user_id``. Blank text leaves the old note alone."""
        trimmed = (text or "").strip()
        if not trimmed:
            return None
        note = StaffNote(
            user_id=str(user_id),
            text=trimmed,
            updated_by=staff_username or "unknown",
            updated_at=now or datetime.now(timezone.utc),
        )
        self._notes[note.user_id] = note
        return note


# =============================================================================
# SERVICE
# =============================================================================


@dataclass
class DecisionOutcome:
    """Result of a staff decision."""

    user_id: int
    decision: StaffDecision
    target_rank: int
    rank_update: RankUpdateStatus
    note: StaffNote | None = None


class DecisionService:
    """Applies staff decisions: note first, then the rank change."""

    def __init__(
        self,
        dispatcher: DecisionDispatcher,
        notes: NoteStore,
        rank_service: RankMutationService,
    ):
        self.dispatcher = dispatcher
        self.notes = notes
        self.rank_service = rank_service

    async def decide(
        self,
        user_id: int,
        decision: str,
        staff_username: str,
        comment: str | None = None,
    ) -> DecisionOutcome:
        """Record a staff decision about ``user_id``.

        Raises InvalidArgumentError for an unknown decision, after the note
        has been saved.
        """
        note = self.notes.save(user_id, comment, staff_username)
        target_rank = self.dispatcher.dispatch(user_id, decision)
        staff_decision = StaffDecision(decision)

        if not self.rank_service.enabled:
            logger.warning(
                "[RANKING] Missing ROBLOX_COOKIE / IMMIGRATION_GROUP_ID; skipping rank."
            )
            rank_update = RankUpdateStatus.SKIPPED
        else:
            try:
                await self.rank_service.set_rank(user_id, target_rank)
                rank_update = RankUpdateStatus.APPLIED
                logger.info(
                    f"[RANKING] Ranked user {user_id} to rank {target_rank} "
                    f"(decision={staff_decision.value}, by {staff_username})"
                )
            except ConsoleError as e:
                logger.error(f"[RANKING] Failed to rank user {user_id}: {e}")
                rank_update = RankUpdateStatus.FAILED

        return DecisionOutcome(
            user_id=user_id,
            decision=staff_decision,
            target_rank=target_rank,
            rank_update=rank_update,
            note=note,
        )
