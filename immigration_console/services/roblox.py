"""
Roblox client: the console's only window onto the external platform.

Implements the three collaborator interfaces the services depend on:
- ProfileSource (per-subject signals for the alt check)
- MembershipSource (members of the immigration group by rank)
- RankMutationService (moving a member to another rank)

Every call is bounded by ``roblox_timeout_seconds``. Transport errors and
non-2xx responses raise UpstreamUnavailableError.
"""

import logging
from datetime import datetime
from typing import Any

import httpx

from ..core.config import Settings
from ..core.errors import NotFoundError, UpstreamUnavailableError
from ..models import GroupMembership
from .decisions import RankMutationService
from .queues import MembershipSource
from .signals import ProfileSource

logger = logging.getLogger(__name__)


USERS_API = "https://users.roblox.com/v1"
FRIENDS_API = "https://friends.roblox.com/v1"
GAMES_API = "https://games.roblox.com/v1"
BADGES_API = "https://badges.roblox.com/v1"
GROUPS_API = "https://groups.roblox.com/v1"
THUMBNAILS_API = "https://thumbnails.roblox.com/v1"

CSRF_HEADER = "x-csrf-token"
MEMBERS_PAGE_SIZE = 100
# Favorites and badges only need to distinguish "none" from "some"
FIRST_PAGE_LIMIT = 10


class RobloxClient(ProfileSource, MembershipSource, RankMutationService):
    """Async HTTP client for the Roblox web APIs."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport
        self._csrf_token: str | None = None
        self._roles: list[dict] | None = None

    @property
    def enabled(self) -> bool:
        return self._settings.roblox_enabled

    @property
    def group_id(self) -> int:
        return self._settings.immigration_group_id

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self._settings.roblox_cookie:
            headers["Cookie"] = f".ROBLOSECURITY={self._settings.roblox_cookie}"
        return httpx.AsyncClient(
            timeout=self._settings.roblox_timeout_seconds,
            headers=headers,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return its JSON body.

        Mutating requests go through the CSRF handshake: the platform answers
        the first attempt with 403 and a fresh token, which is retried once.
        """
        async with self._client() as client:
            try:
                response = await client.request(
                    method, url, params=params, json=json, headers=self._csrf_headers()
                )
                if response.status_code == 403 and CSRF_HEADER in response.headers:
                    self._csrf_token = response.headers[CSRF_HEADER]
                    response = await client.request(
                        method, url, params=params, json=json, headers=self._csrf_headers()
                    )
            except httpx.HTTPError as e:
                raise UpstreamUnavailableError(f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            raise UpstreamUnavailableError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}"
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"{method} {url} returned invalid JSON") from e

    def _csrf_headers(self) -> dict[str, str]:
        return {CSRF_HEADER: self._csrf_token} if self._csrf_token else {}

    # =========================================================================
    # SESSION
    # =========================================================================

    async def get_authenticated_user(self) -> dict[str, Any]:
        """The account the configured cookie belongs to."""
        return await self._request("GET", f"{USERS_API}/users/authenticated")

    async def check_login(self) -> None:
        """Log which account the console acts as. Never raises."""
        if not self._settings.roblox_cookie:
            logger.warning(
                "[ROBLOX] ROBLOX_COOKIE not set; ranking and member fetch will be disabled."
            )
            return
        try:
            user = await self.get_authenticated_user()
            logger.info(f"[ROBLOX] Logged in as {user.get('name')} (ID: {user.get('id')})")
        except UpstreamUnavailableError as e:
            logger.error(f"[ROBLOX] Failed to log in with cookie: {e}")

    # =========================================================================
    # PROFILE SOURCE
    # =========================================================================

    async def get_account_created(self, user_id: int) -> datetime:
        data = await self._request("GET", f"{USERS_API}/users/{user_id}")
        created = data.get("created")
        if not created:
            raise UpstreamUnavailableError(f"No creation date for user {user_id}")
        try:
            return datetime.fromisoformat(created.replace("Z", "+00:00"))
        except ValueError as e:
            raise UpstreamUnavailableError(f"Bad creation date {created!r}") from e

    async def get_friend_count(self, user_id: int) -> int:
        data = await self._request("GET", f"{FRIENDS_API}/users/{user_id}/friends/count")
        return int(data.get("count") or 0)

    async def get_favorite_count(self, user_id: int) -> int:
        data = await self._request(
            "GET",
            f"{GAMES_API}/users/{user_id}/favorite/games",
            params={"limit": FIRST_PAGE_LIMIT},
        )
        return len(data.get("data") or [])

    async def get_badge_count(self, user_id: int) -> int:
        data = await self._request(
            "GET",
            f"{BADGES_API}/users/{user_id}/badges",
            params={"limit": FIRST_PAGE_LIMIT},
        )
        return len(data.get("data") or [])

    async def get_group_memberships(self, user_id: int) -> list[GroupMembership]:
        data = await self._request("GET", f"{GROUPS_API}/users/{user_id}/groups/roles")
        return [
            GroupMembership(
                group_id=int(entry["group"]["id"]),
                group_name=entry["group"].get("name", ""),
                role_name=(entry.get("role") or {}).get("name", ""),
            )
            for entry in data.get("data") or []
        ]

    # =========================================================================
    # ROLES & MEMBERS
    # =========================================================================

    async def get_group_roles(self) -> list[dict]:
        """Roles of the immigration group, fetched once per process."""
        if not self.group_id:
            return []
        if self._roles is None:
            data = await self._request("GET", f"{GROUPS_API}/groups/{self.group_id}/roles")
            self._roles = data.get("roles") or []
            logger.info(f"[ROLES] Loaded {len(self._roles)} roles for group {self.group_id}")
        return self._roles

    async def get_role_id_for_rank(self, rank: int) -> int | None:
        """Role-set id of the role holding ``rank``, or None."""
        for role in await self.get_group_roles():
            if role.get("rank") == rank and role.get("id") is not None:
                return int(role["id"])
        logger.warning(f"[ROLES] No role found in group {self.group_id} with rank {rank}")
        return None

    async def get_members_in_rank(self, rank: int) -> list[dict]:
        if not self.enabled:
            return []
        role_id = await self.get_role_id_for_rank(rank)
        if role_id is None:
            return []

        members: list[dict] = []
        cursor: str | None = None
        while True:
            params: dict[str, Any] = {"limit": MEMBERS_PAGE_SIZE, "sortOrder": "Asc"}
            if cursor:
                params["cursor"] = cursor
            page = await self._request(
                "GET",
                f"{GROUPS_API}/groups/{self.group_id}/roles/{role_id}/users",
                params=params,
            )
            members.extend(page.get("data") or [])
            cursor = page.get("nextPageCursor")
            if not cursor:
                break

        logger.info(
            f"[GROUP] Got {len(members)} members for rank {rank} (rolesetId {role_id})"
        )
        return members

    # =========================================================================
    # RANK MUTATION
    # =========================================================================

    async def set_rank(self, user_id: int, rank: int) -> None:
        role_id = await self.get_role_id_for_rank(rank)
        if role_id is None:
            raise NotFoundError(f"No role with rank {rank} in group {self.group_id}")
        await self._request(
            "PATCH",
            f"{GROUPS_API}/groups/{self.group_id}/users/{user_id}",
            json={"roleId": role_id},
        )

    # =========================================================================
    # THUMBNAILS
    # =========================================================================

    async def get_group_icon_url(self, group_id: int) -> str | None:
        data = await self._request(
            "GET",
            f"{THUMBNAILS_API}/groups/icons",
            params={
                "groupIds": group_id,
                "size": "420x420",
                "format": "Png",
                "isCircular": "false",
            },
        )
        return self._first_image_url(data)

    async def get_avatar_headshot_url(self, user_id: int) -> str | None:
        data = await self._request(
            "GET",
            f"{THUMBNAILS_API}/users/avatar-headshot",
            params={
                "userIds": user_id,
                "size": "150x150",
                "format": "Png",
                "isCircular": "false",
            },
        )
        return self._first_image_url(data)

    @staticmethod
    def _first_image_url(data: dict[str, Any]) -> str | None:
        entries = data.get("data") or []
        if entries and entries[0].get("imageUrl"):
            return entries[0]["imageUrl"]
        return None
