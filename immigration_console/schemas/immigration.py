"""Pydantic schemas for the immigration panel."""

from datetime import datetime

from pydantic import Field

from ..models import AltVerdict, ApplicantQueue, RankUpdateStatus, StaffDecision
from .base import ConsoleBaseModel


class NoteResponse(ConsoleBaseModel):
    user_id: str
    text: str
    updated_by: str
    updated_at: datetime


class ApplicantResponse(ConsoleBaseModel):
    user_id: int
    username: str
    display_name: str | None = None
    queue: ApplicantQueue
    available_decisions: list[StaffDecision]
    note: NoteResponse | None = None


class PanelResponse(ConsoleBaseModel):
    logged_in_as: str
    pending: list[ApplicantResponse]
    failed: list[ApplicantResponse]
    total: int


class GroupMembershipResponse(ConsoleBaseModel):
    group_id: int
    group_name: str
    role_name: str
    blacklisted: bool = False


class SignalsResponse(ConsoleBaseModel):
    """Raw signal values. ``None`` marks a failed fetch."""

    account_age_days: int | None = None
    friend_count: int | None = None
    favorite_count: int | None = None
    badge_count: int | None = None
    group_count: int | None = None


class EvaluationResponse(ConsoleBaseModel):
    user_id: int
    account_created: datetime | None = None
    signals: SignalsResponse
    failed_signals: list[str]
    score: int
    verdict: AltVerdict
    groups: list[GroupMembershipResponse] | None = None


class DecisionRequest(ConsoleBaseModel):
    user_id: int | None = Field(default=None, alias="userId")
    decision: str | None = None
    comment: str | None = None


class DecisionResponse(ConsoleBaseModel):
    user_id: int
    decision: StaffDecision
    target_rank: int
    rank_update: RankUpdateStatus
    note: NoteResponse | None = None


class ImageUrlResponse(ConsoleBaseModel):
    image_url: str | None = None
