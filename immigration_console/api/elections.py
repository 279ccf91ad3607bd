"""API routes for election management and the party roster.

All election state is in process memory and resets when the server restarts.
"""

from datetime import datetime

from fastapi import APIRouter

from ..core.dependencies import CurrentStaffDep, RegistryDep
from ..models import Election, ElectionKey
from ..schemas import (
    ElectionKeyRequest,
    ElectionResponse,
    ElectionScheduleUpdate,
    ElectionsOverview,
    ElectionToggleRequest,
    PartyCreate,
    PartyDelete,
    PartyResponse,
)
from ..services import ElectionRegistry, available_actions, resolve_phase

router = APIRouter(prefix="/elections", tags=["elections"])


# =============================================================================
# HELPERS
# =============================================================================


def election_to_response(election: Election, now: datetime | None = None) -> ElectionResponse:
    """Convert an Election to a response schema with its phase resolved."""
    phase = resolve_phase(election, now)
    return ElectionResponse(
        key=election.key,
        name=election.name,
        enabled=election.enabled,
        phase=phase,
        available_actions=available_actions(phase),
        registration_end=election.registration_end,
        election_end=election.election_end,
        required_signatures=election.required_signatures,
        election_started=election.election_started,
        results_finalized=election.results_finalized,
        registration_count=len(election.registrations),
        ballot_candidate_count=sum(1 for r in election.registrations if r.get("onBallot")),
        renamable=election.key == ElectionKey.CUSTOM,
    )


def overview(registry: ElectionRegistry) -> ElectionsOverview:
    return ElectionsOverview(
        elections=[election_to_response(e) for e in registry.list_elections()],
        parties=[PartyResponse.model_validate(p) for p in registry.list_parties()],
    )


# =============================================================================
# ELECTIONS
# =============================================================================


@router.get("", response_model=ElectionsOverview)
async def list_elections(current_staff: CurrentStaffDep, registry: RegistryDep):
    """All elections with their current phase, plus the party roster."""
    return overview(registry)


@router.get("/{key}", response_model=ElectionResponse)
async def get_election(key: str, current_staff: CurrentStaffDep, registry: RegistryDep):
    return election_to_response(registry.get(key))


@router.post("/toggle", response_model=ElectionResponse)
async def toggle_election(
    data: ElectionToggleRequest,
    current_staff: CurrentStaffDep,
    registry: RegistryDep,
):
    """Turn an election on or off."""
    return election_to_response(registry.toggle(data.key, data.enabled))


@router.post("/update", response_model=ElectionResponse)
async def update_election(
    data: ElectionScheduleUpdate,
    current_staff: CurrentStaffDep,
    registry: RegistryDep,
):
    """Set deadlines and the signature threshold (and the custom election's name)."""
    election = registry.update_schedule(
        data.key,
        registration_end=data.registration_end,
        election_end=data.election_end,
        required_signatures=data.required_signatures,
        name=data.name,
    )
    return election_to_response(election)


@router.post("/begin", response_model=ElectionResponse)
async def begin_election(
    data: ElectionKeyRequest,
    current_staff: CurrentStaffDep,
    registry: RegistryDep,
):
    """Move an election out of registration filtering into voting."""
    return election_to_response(registry.begin(data.key))


@router.post("/finalize", response_model=ElectionResponse)
async def finalize_election(
    data: ElectionKeyRequest,
    current_staff: CurrentStaffDep,
    registry: RegistryDep,
):
    """Close out results filtering."""
    return election_to_response(registry.finalize(data.key))


# =============================================================================
# PARTIES
# =============================================================================


@router.post("/party/add", response_model=ElectionsOverview)
async def add_party(data: PartyCreate, current_staff: CurrentStaffDep, registry: RegistryDep):
    """Add a party. A blank name is ignored."""
    registry.add_party(data.name)
    return overview(registry)


@router.post("/party/delete", response_model=ElectionsOverview)
async def delete_party(data: PartyDelete, current_staff: CurrentStaffDep, registry: RegistryDep):
    """Remove a party. Unknown or non-numeric ids are ignored."""
    if data.id is not None:
        registry.delete_party(data.id)
    return overview(registry)
