"""In-memory domain entities for the staff console.

Nothing here is persisted: every entity lives for the lifetime of the process.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum as PyEnum


# =============================================================================
# ENUMS
# =============================================================================


class ElectionKey(str, PyEnum):
    """The fixed set of elections the console manages."""

    PRESIDENTIAL = "presidential"
    SENATE = "senate"
    HOUSE = "house"
    MAYOR = "mayor"
    CUSTOM = "custom1"  # Only election whose name staff may change


class ElectionPhase(str, PyEnum):
    """Display phase of an election, derived on every read."""

    DISABLED = "Disabled"
    SETUP = "Setup"
    REGISTRATION = "Registration"
    FILTERING_REGISTRATIONS = "Filtering (Registrations)"
    VOTING = "Voting"
    FILTERING_RESULTS = "Filtering (Results)"
    COMPLETED = "Completed"


class ElectionAction(str, PyEnum):
    """Manual staff actions that advance an election."""

    BEGIN = "begin"
    FINALIZE = "finalize"


class AltVerdict(str, PyEnum):
    """Three-level alt-account classification."""

    NOT_AN_ALT = "Not an Alt"
    POSSIBLY_ALT = "Possibly an Alt"
    DEFINITELY_ALT = "Definitely an Alt"


class StaffDecision(str, PyEnum):
    """Accept/deny outcome of an immigration review."""

    ACCEPT = "accept"
    DENY = "deny"


class ApplicantQueue(str, PyEnum):
    """Which role-based queue an applicant was drawn from."""

    PENDING = "pending"
    FAILED = "failed"


class RankUpdateStatus(str, PyEnum):
    """Outcome of the external rank mutation behind a staff decision."""

    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"


# =============================================================================
# ELECTIONS & PARTIES
# =============================================================================


@dataclass
class Election:
    """A named, phase-gated voting campaign.

    ``election_started`` and ``results_finalized`` are one-way flags; only the
    registry's begin/finalize operations set them and nothing resets them.
    """

    key: ElectionKey
    name: str
    enabled: bool = False
    registration_end: datetime | None = None
    election_end: datetime | None = None
    required_signatures: int = 0
    election_started: bool = False
    results_finalized: bool = False
    # Populated by the game integration once it exists
    registrations: list[dict] = field(default_factory=list)
    votes: list[dict] = field(default_factory=list)


@dataclass
class Party:
    """A political party on the roster."""

    id: int
    name: str


# =============================================================================
# APPLICANTS
# =============================================================================


@dataclass
class StaffNote:
    """Latest staff note about a subject. Saving replaces the previous one."""

    user_id: str
    text: str
    updated_by: str
    updated_at: datetime


@dataclass
class GroupMembership:
    """One group a subject belongs to, as reported by the platform."""

    group_id: int
    group_name: str
    role_name: str


@dataclass
class Applicant:
    """A group member sitting in one of the immigration queues."""

    user_id: int
    username: str
    display_name: str | None
    queue: ApplicantQueue


@dataclass
class SignalSet:
    """Independently fetched profile metrics for one subject.

    ``None`` marks a signal whose fetch failed.
    """

    account_created: datetime | None = None
    account_age_days: int | None = None
    friend_count: int | None = None
    favorite_count: int | None = None
    badge_count: int | None = None
    group_count: int | None = None
    groups: list[GroupMembership] | None = None

    SIGNAL_NAMES = (
        "account_age_days",
        "friend_count",
        "favorite_count",
        "badge_count",
        "group_count",
    )

    @property
    def failed_signals(self) -> list[str]:
        return [name for name in self.SIGNAL_NAMES if getattr(self, name) is None]


@dataclass
class AltScore:
    """Total alt score and its verdict."""

    total: int
    verdict: AltVerdict
