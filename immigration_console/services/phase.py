"""
Phase Resolver: derives an election's display phase.

The phase is never stored. It is computed on every read from the election's
``enabled`` gate, its two deadlines and the two manual one-way flags, so an
election can wait in a filtering phase indefinitely until staff act on it.

    Disabled -> Setup -> Registration -> Filtering (Registrations)
             -> Voting -> Filtering (Results) -> Completed
"""

from datetime import datetime, timezone

from ..models import Election, ElectionAction, ElectionPhase


def resolve_phase(election: Election, now: datetime | None = None) -> ElectionPhase:
    """Return the phase of ``election`` at ``now`` (defaults to the current UTC time).

    First matching rule wins.
    """
    now = now or datetime.now(timezone.utc)

    if not election.enabled:
        return ElectionPhase.DISABLED
    if election.registration_end is None or election.election_end is None:
        return ElectionPhase.SETUP
    if now < election.registration_end:
        return ElectionPhase.REGISTRATION
    if not election.election_started:
        return ElectionPhase.FILTERING_REGISTRATIONS
    # An election_end earlier than registration_end is not rejected; such an
    # election jumps straight from filtering to Filtering (Results).
    if now < election.election_end:
        return ElectionPhase.VOTING
    if not election.results_finalized:
        return ElectionPhase.FILTERING_RESULTS
    return ElectionPhase.COMPLETED


def available_actions(phase: ElectionPhase) -> list[ElectionAction]:
    """Staff actions the console offers in ``phase``."""
    if phase == ElectionPhase.FILTERING_REGISTRATIONS:
        return [ElectionAction.BEGIN]
    if phase == ElectionPhase.FILTERING_RESULTS:
        return [ElectionAction.FINALIZE]
    return []
