"""Pydantic schemas for elections and parties."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from ..models import ElectionAction, ElectionKey, ElectionPhase
from .base import ConsoleBaseModel


# =============================================================================
# REQUESTS
# =============================================================================


class ElectionKeyRequest(ConsoleBaseModel):
    """Body for actions that only name an election."""

    # Plain string so unknown keys reach the registry and come back as 404
    key: str


class ElectionToggleRequest(ElectionKeyRequest):
    enabled: bool


class ElectionScheduleUpdate(ElectionKeyRequest):
    """Schedule form. Absent deadlines are cleared."""

    registration_end: str | None = Field(default=None, alias="registrationEnd")
    election_end: str | None = Field(default=None, alias="electionEnd")
    # Coerced by the registry; junk becomes 0 rather than a 422
    required_signatures: Any = Field(default=None, alias="requiredSignatures")
    name: str | None = None

    @field_validator("registration_end", "election_end", mode="before")
    @classmethod
    def stringify_deadline(cls, v: Any) -> str | None:
        """Non-string deadlines reach the parser as text and end up unset."""
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def ignore_non_string_name(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None


class PartyCreate(ConsoleBaseModel):
    name: str | None = None


class PartyDelete(ConsoleBaseModel):
    id: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def non_numeric_id_matches_nothing(cls, v: Any) -> int | None:
        if isinstance(v, bool):
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None


# =============================================================================
# RESPONSES
# =============================================================================


class PartyResponse(ConsoleBaseModel):
    id: int
    name: str


class ElectionResponse(ConsoleBaseModel):
    """An election with its phase resolved at read time."""

    key: ElectionKey
    name: str
    enabled: bool
    phase: ElectionPhase
    available_actions: list[ElectionAction]
    registration_end: datetime | None
    election_end: datetime | None
    required_signatures: int
    election_started: bool
    results_finalized: bool
    registration_count: int
    ballot_candidate_count: int
    renamable: bool


class ElectionsOverview(ConsoleBaseModel):
    elections: list[ElectionResponse]
    parties: list[PartyResponse]
