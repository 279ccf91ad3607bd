"""Shared fixtures: fake platform client, settings and an authenticated API client."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from immigration_console.core import Settings, UpstreamUnavailableError, get_settings
from immigration_console.core.dependencies import (
    get_note_store,
    get_registry,
    get_roblox_client,
    get_session_store,
)
from immigration_console.core.security import SessionStore
from immigration_console.main import app
from immigration_console.models import GroupMembership
from immigration_console.services import (
    ElectionRegistry,
    MembershipSource,
    NoteStore,
    ProfileSource,
    RankMutationService,
)

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

PENDING_RANK = 5
DENIED_RANK = 235
BLACKLISTED_GROUP = 666


# =============================================================================
# FAKE PLATFORM
# =============================================================================


class FakeRobloxClient(ProfileSource, MembershipSource, RankMutationService):
    """In-memory stand-in for the Roblox client.

    Any signal named in ``failing`` raises UpstreamUnavailableError.
    """

    def __init__(
        self,
        created: datetime | None = None,
        friends: int = 10,
        favorites: int = 5,
        badges: int = 5,
        groups: list[GroupMembership] | None = None,
        failing: set[str] | None = None,
        enabled: bool = True,
    ):
        self.created = created or datetime(2020, 1, 1, tzinfo=timezone.utc)
        self.friends = friends
        self.favorites = favorites
        self.badges = badges
        self.groups = groups if groups is not None else [
            GroupMembership(group_id=i, group_name=f"Group {i}", role_name="Member")
            for i in range(1, 11)
        ]
        self.failing = failing or set()
        self._enabled = enabled
        self.members: dict[int, list[dict]] = {}
        self.failing_ranks: set[int] = set()
        self.rank_error: Exception | None = None
        self.rank_calls: list[tuple[int, int]] = []

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise UpstreamUnavailableError(f"{name} unavailable")

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def get_account_created(self, user_id: int) -> datetime:
        self._check("account_created")
        return self.created

    async def get_friend_count(self, user_id: int) -> int:
        self._check("friend_count")
        return self.friends

    async def get_favorite_count(self, user_id: int) -> int:
        self._check("favorite_count")
        return self.favorites

    async def get_badge_count(self, user_id: int) -> int:
        self._check("badge_count")
        return self.badges

    async def get_group_memberships(self, user_id: int) -> list[GroupMembership]:
        self._check("groups")
        return self.groups

    async def get_members_in_rank(self, rank: int) -> list[dict]:
        if rank in self.failing_ranks:
            raise UpstreamUnavailableError(f"rank {rank} unavailable")
        return self.members.get(rank, [])

    async def set_rank(self, user_id: int, rank: int) -> None:
        self.rank_calls.append((user_id, rank))
        if self.rank_error:
            raise self.rank_error

    async def get_group_icon_url(self, group_id: int) -> str | None:
        self._check("icon")
        return f"https://cdn.example/groups/{group_id}.png"

    async def get_avatar_headshot_url(self, user_id: int) -> str | None:
        self._check("avatar")
        return f"https://cdn.example/avatars/{user_id}.png"


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def registry() -> ElectionRegistry:
    return ElectionRegistry()


@pytest.fixture
def notes() -> NoteStore:
    return NoteStore()


@pytest.fixture
def fake_client() -> FakeRobloxClient:
    return FakeRobloxClient()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ADMIN_ACCOUNTS='[{"username": "officer1", "password": "hunter2"}]',
        BLACKLISTED_GROUPS=f"{BLACKLISTED_GROUP}, not-a-number",
        ROBLOX_COOKIE="cookie",
        IMMIGRATION_GROUP_ID=1234,
        IMMIGRATION_ROLE_ID=PENDING_RANK,
        DENIED_RANK=DENIED_RANK,
        secret_key="test-secret",
    )


@pytest.fixture
def client(settings, registry, notes, fake_client):
    """Unauthenticated API client with fresh in-memory state."""
    sessions = SessionStore(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_session_store] = lambda: sessions
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_note_store] = lambda: notes
    app.dependency_overrides[get_roblox_client] = lambda: fake_client

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def staff_client(client):
    """API client logged in as officer1."""
    response = client.post("/login", json={"username": "officer1", "password": "hunter2"})
    assert response.status_code == 200
    return client
