"""
Election Registry: the five elections and the party roster.

All state lives in process memory and is lost on restart. There is no locking:
concurrent staff edits to the same election are last-write-wins.
"""

import logging
import re
from datetime import datetime, timezone

from ..core.errors import NotFoundError
from ..models import Election, ElectionKey, Party

logger = logging.getLogger(__name__)


DEFAULT_ELECTION_NAMES: dict[ElectionKey, str] = {
    ElectionKey.PRESIDENTIAL: "Presidential Elections",
    ElectionKey.SENATE: "Senate Elections",
    ElectionKey.HOUSE: "House Elections",
    ElectionKey.MAYOR: "Mayor Elections",
    ElectionKey.CUSTOM: "Custom Election",
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ElectionNotFoundError(NotFoundError):
    """Election key is not one of the fixed keys."""


# =============================================================================
# PARSING HELPERS
# =============================================================================


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 / ``datetime-local`` string into an aware UTC datetime.

    Empty or unparseable input yields ``None`` (unset). Naive values are UTC.
    """
    if value is None or not str(value).strip():
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning(f"[ELECTIONS] Ignoring unparseable timestamp {value!r}")
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def coerce_signatures(value: str | int | None) -> int:
    """Leading integer of ``value``, clamped at zero. Anything else is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


# =============================================================================
# REGISTRY
# =============================================================================


class ElectionRegistry:
    """Holds the fixed set of elections and the party roster."""

    def __init__(self):
        self._elections: dict[ElectionKey, Election] = {
            key: Election(key=key, name=name)
            for key, name in DEFAULT_ELECTION_NAMES.items()
        }
        self._parties: list[Party] = []
        self._next_party_id = 1

    # =========================================================================
    # ELECTIONS
    # =========================================================================

    def get(self, key: str | ElectionKey) -> Election:
        """Look up an election by key, raising ElectionNotFoundError if unknown."""
        try:
            election_key = ElectionKey(key)
        except ValueError:
            raise ElectionNotFoundError(f"Unknown election key: {key}") from None
        return self._elections[election_key]

    def list_elections(self) -> list[Election]:
        """All elections, in their fixed order."""
        return list(self._elections.values())

    def toggle(self, key: str | ElectionKey, enabled: bool) -> Election:
        """Turn an election on or off. No other field changes."""
        election = self.get(key)
        election.enabled = enabled
        logger.info(f"[ELECTIONS] {election.key.value} enabled={enabled}")
        return election

    def update_schedule(
        self,
        key: str | ElectionKey,
        registration_end: str | None = None,
        election_end: str | None = None,
        required_signatures: str | int | None = None,
        name: str | None = None,
    ) -> Election:
        """Replace an election's deadlines and signature threshold.

        Missing deadlines clear the stored value. ``name`` only applies to the
        custom election and only when it is non-blank.
        """
        election = self.get(key)
        election.registration_end = parse_timestamp(registration_end)
        election.election_end = parse_timestamp(election_end)
        election.required_signatures = coerce_signatures(required_signatures)

        if election.key == ElectionKey.CUSTOM and name and name.strip():
            election.name = name.strip()

        logger.info(
            f"[ELECTIONS] {election.key.value} schedule updated: "
            f"registration_end={election.registration_end}, "
            f"election_end={election.election_end}, "
            f"required_signatures={election.required_signatures}"
        )
        return election

    def begin(self, key: str | ElectionKey) -> Election:
        """Mark voting as started. Not gated on the current phase."""
        election = self.get(key)
        election.election_started = True
        logger.info(f"[ELECTIONS] {election.key.value} election started")
        return election

    def finalize(self, key: str | ElectionKey) -> Election:
        """Mark results as finalized. Not gated on the current phase."""
        election = self.get(key)
        election.results_finalized = True
        logger.info(f"[ELECTIONS] {election.key.value} results finalized")
        return election

    # =========================================================================
    # PARTIES
    # =========================================================================

    def list_parties(self) -> list[Party]:
        return list(self._parties)

    def add_party(self, name: str | None) -> Party | None:
        """Add a party. Blank names are dropped without error."""
        if not name or not name.strip():
            return None
        party = Party(id=self._next_party_id, name=name.strip())
        self._next_party_id += 1
        self._parties.append(party)
        logger.info(f"[ELECTIONS] Party #{party.id} added: {party.name}")
        return party

    def delete_party(self, party_id: int) -> bool:
        """Remove a party by id. Returns False when no such party exists."""
        for index, party in enumerate(self._parties):
            if party.id == party_id:
                del self._parties[index]
                logger.info(f"[ELECTIONS] Party #{party_id} removed")
                return True
        return False
