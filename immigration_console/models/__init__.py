"""Domain entities for the staff console."""

from .models import (
    # Enums
    AltVerdict,
    ApplicantQueue,
    ElectionAction,
    ElectionKey,
    ElectionPhase,
    RankUpdateStatus,
    StaffDecision,
    # Elections
    Election,
    Party,
    # Applicants
    AltScore,
    Applicant,
    GroupMembership,
    SignalSet,
    StaffNote,
)

__all__ = [
    # Enums
    "AltVerdict",
    "ApplicantQueue",
    "ElectionAction",
    "ElectionKey",
    "ElectionPhase",
    "RankUpdateStatus",
    "StaffDecision",
    # Elections
    "Election",
    "Party",
    # Applicants
    "AltScore",
    "Applicant",
    "GroupMembership",
    "SignalSet",
    "StaffNote",
]
