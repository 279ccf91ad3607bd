"""API routes for the immigration panel: queues, alt checks, decisions and notes."""

import logging

from fastapi import APIRouter

from ..core.dependencies import (
    CurrentStaffDep,
    DecisionServiceDep,
    NoteStoreDep,
    QueueServiceDep,
    RobloxClientDep,
    SettingsDep,
    SignalCollectorDep,
)
from ..core.errors import InvalidArgumentError, NotFoundError, UpstreamUnavailableError
from ..models import Applicant, ApplicantQueue, StaffDecision
from ..schemas import (
    ApplicantResponse,
    DecisionRequest,
    DecisionResponse,
    EvaluationResponse,
    GroupMembershipResponse,
    ImageUrlResponse,
    NoteResponse,
    PanelResponse,
    SignalsResponse,
)
from ..services import NoteStore, score

logger = logging.getLogger(__name__)

router = APIRouter(tags=["immigration"])

# Failed applicants can only be moved back to the immigration office
QUEUE_DECISIONS: dict[ApplicantQueue, list[StaffDecision]] = {
    ApplicantQueue.PENDING: [StaffDecision.ACCEPT, StaffDecision.DENY],
    ApplicantQueue.FAILED: [StaffDecision.ACCEPT],
}


# =============================================================================
# HELPERS
# =============================================================================


def applicant_to_response(applicant: Applicant, notes: NoteStore) -> ApplicantResponse:
    """Convert an Applicant to a response schema, attaching its latest note."""
    note = notes.get(applicant.user_id)
    return ApplicantResponse(
        user_id=applicant.user_id,
        username=applicant.username,
        display_name=applicant.display_name,
        queue=applicant.queue,
        available_decisions=QUEUE_DECISIONS[applicant.queue],
        note=NoteResponse.model_validate(note) if note else None,
    )


# =============================================================================
# PANEL
# =============================================================================


@router.get("/panel", response_model=PanelResponse)
async def get_panel(
    current_staff: CurrentStaffDep,
    queues: QueueServiceDep,
    notes: NoteStoreDep,
):
    """Pending and failed immigration applicants with their staff notes."""
    by_queue = await queues.list_all()
    pending = [applicant_to_response(a, notes) for a in by_queue[ApplicantQueue.PENDING]]
    failed = [applicant_to_response(a, notes) for a in by_queue[ApplicantQueue.FAILED]]
    return PanelResponse(
        logged_in_as=current_staff.username,
        pending=pending,
        failed=failed,
        total=len(pending) + len(failed),
    )


@router.get("/applicants/{user_id}/evaluation", response_model=EvaluationResponse)
async def evaluate_applicant(
    user_id: int,
    current_staff: CurrentStaffDep,
    collector: SignalCollectorDep,
    settings: SettingsDep,
):
    """Collect an applicant's profile signals and run the alt check."""
    signals = await collector.collect(user_id)
    result = score(signals)
    blacklisted = set(settings.blacklisted_groups)

    groups = None
    if signals.groups is not None:
        groups = [
            GroupMembershipResponse(
                group_id=g.group_id,
                group_name=g.group_name,
                role_name=g.role_name,
                blacklisted=g.group_id in blacklisted,
            )
            for g in signals.groups
        ]

    return EvaluationResponse(
        user_id=user_id,
        account_created=signals.account_created,
        signals=SignalsResponse.model_validate(signals),
        failed_signals=signals.failed_signals,
        score=result.total,
        verdict=result.verdict,
        groups=groups,
    )


@router.get("/applicants/{user_id}/avatar", response_model=ImageUrlResponse)
async def get_avatar(user_id: int, current_staff: CurrentStaffDep, client: RobloxClientDep):
    try:
        return ImageUrlResponse(image_url=await client.get_avatar_headshot_url(user_id))
    except UpstreamUnavailableError as e:
        logger.warning(f"[ROBLOX] Avatar lookup failed for {user_id}: {e}")
        return ImageUrlResponse(image_url=None)


@router.get("/groups/{group_id}/icon", response_model=ImageUrlResponse)
async def get_group_icon(group_id: int, current_staff: CurrentStaffDep, client: RobloxClientDep):
    try:
        return ImageUrlResponse(image_url=await client.get_group_icon_url(group_id))
    except UpstreamUnavailableError as e:
        logger.warning(f"[GROUP ICON] Lookup failed for {group_id}: {e}")
        return ImageUrlResponse(image_url=None)


# =============================================================================
# DECISIONS & NOTES
# =============================================================================


@router.post("/decision", response_model=DecisionResponse)
async def record_decision(
    data: DecisionRequest,
    current_staff: CurrentStaffDep,
    service: DecisionServiceDep,
):
    """Accept or deny an applicant, saving the staff note first.

    A failed rank change is reported in ``rank_update``; the request itself
    still succeeds and the note stays saved.
    """
    if not data.user_id or not data.decision:
        raise InvalidArgumentError("Missing userId or decision")

    outcome = await service.decide(
        user_id=data.user_id,
        decision=data.decision,
        staff_username=current_staff.username,
        comment=data.comment,
    )
    return DecisionResponse(
        user_id=outcome.user_id,
        decision=outcome.decision,
        target_rank=outcome.target_rank,
        rank_update=outcome.rank_update,
        note=NoteResponse.model_validate(outcome.note) if outcome.note else None,
    )


@router.get("/notes/{user_id}", response_model=NoteResponse)
async def get_note(user_id: int, current_staff: CurrentStaffDep, notes: NoteStoreDep):
    """Latest staff note about an applicant."""
    note = notes.get(user_id)
    if not note:
        raise NotFoundError("No notes yet")
    return NoteResponse.model_validate(note)
