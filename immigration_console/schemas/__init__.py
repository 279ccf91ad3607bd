"""Pydantic schemas for API request/response validation."""

from .base import ConsoleBaseModel, ErrorDetail, ErrorResponse
from .elections import (
    ElectionKeyRequest,
    ElectionResponse,
    ElectionScheduleUpdate,
    ElectionsOverview,
    ElectionToggleRequest,
    PartyCreate,
    PartyDelete,
    PartyResponse,
)
from .immigration import (
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

__all__ = [
    # Base
    "ConsoleBaseModel",
    "ErrorDetail",
    "ErrorResponse",
    # Elections
    "ElectionKeyRequest",
    "ElectionToggleRequest",
    "ElectionScheduleUpdate",
    "ElectionResponse",
    "ElectionsOverview",
    "PartyCreate",
    "PartyDelete",
    "PartyResponse",
    # Immigration
    "ApplicantResponse",
    "DecisionRequest",
    "DecisionResponse",
    "EvaluationResponse",
    "GroupMembershipResponse",
    "ImageUrlResponse",
    "NoteResponse",
    "PanelResponse",
    "SignalsResponse",
]
