"""Business logic services for the staff console."""

from .alt_scorer import score, verdict_for
from .decisions import (
    DecisionDispatcher,
    DecisionOutcome,
    DecisionService,
    NoteStore,
    RankMutationService,
)
from .elections import (
    ElectionNotFoundError,
    ElectionRegistry,
    coerce_signatures,
    parse_timestamp,
)
from .phase import available_actions, resolve_phase
from .queues import MembershipSource, QueueService
from .roblox import RobloxClient
from .signals import ProfileSource, SignalCollector

__all__ = [
    # Elections
    "ElectionRegistry",
    "ElectionNotFoundError",
    "resolve_phase",
    "available_actions",
    "parse_timestamp",
    "coerce_signatures",
    # Alt check
    "ProfileSource",
    "SignalCollector",
    "score",
    "verdict_for",
    # Decisions
    "DecisionDispatcher",
    "DecisionOutcome",
    "DecisionService",
    "NoteStore",
    "RankMutationService",
    # Queues
    "MembershipSource",
    "QueueService",
    # Platform
    "RobloxClient",
]
