"""
Tests for the Roblox client against a mocked HTTP transport.

These tests verify:
1. Profile endpoints are parsed into signals
2. Member listings follow pagination cursors to the end
3. Rank changes go through the CSRF token handshake
4. Transport errors and non-2xx responses raise UpstreamUnavailableError
"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from immigration_console.core import NotFoundError, Settings, UpstreamUnavailableError
from immigration_console.services import RobloxClient

from .conftest import DENIED_RANK, PENDING_RANK

ROLES = {
    "groupId": 1234,
    "roles": [
        {"id": 9001, "name": "Guest", "rank": 0},
        {"id": 9005, "name": "Immigration Office", "rank": PENDING_RANK},
        {"id": 9235, "name": "Denied", "rank": DENIED_RANK},
    ],
}


class FakeRoblox:
    """Routes mocked requests by host and path, recording every request seen."""

    def __init__(self, routes: dict[tuple[str, str], object]):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, f"{request.url.host}{request.url.path}"))
        if handler is None:
            return httpx.Response(404, json={"errors": [{"message": "NotFound"}]})
        if callable(handler):
            return handler(request)
        return httpx.Response(200, json=handler)


def make_client(settings: Settings, fake: FakeRoblox) -> RobloxClient:
    return RobloxClient(settings, transport=httpx.MockTransport(fake))


# =============================================================================
# TEST: PROFILE SIGNALS
# =============================================================================


class TestProfile:

    async def test_profile_endpoints(self, settings):
        fake = FakeRoblox({
            ("GET", "users.roblox.com/v1/users/77"): {
                "id": 77,
                "name": "newbie",
                "created": "2025-05-20T08:15:00.123Z",
            },
            ("GET", "friends.roblox.com/v1/users/77/friends/count"): {"count": 2},
            ("GET", "games.roblox.com/v1/users/77/favorite/games"): {"data": [{"id": 1}]},
            ("GET", "badges.roblox.com/v1/users/77/badges"): {"data": []},
            ("GET", "groups.roblox.com/v1/users/77/groups/roles"): {
                "data": [
                    {"group": {"id": 666, "name": "Raiders"}, "role": {"name": "Member", "rank": 1}},
                    {"group": {"id": 5, "name": "Citizens"}, "role": {"name": "Citizen", "rank": 10}},
                ]
            },
        })
        client = make_client(settings, fake)

        created = await client.get_account_created(77)
        assert created == datetime(2025, 5, 20, 8, 15, 0, 123000, tzinfo=timezone.utc)
        assert await client.get_friend_count(77) == 2
        assert await client.get_favorite_count(77) == 1
        assert await client.get_badge_count(77) == 0

        groups = await client.get_group_memberships(77)
        assert [(g.group_id, g.group_name, g.role_name) for g in groups] == [
            (666, "Raiders", "Member"),
            (5, "Citizens", "Citizen"),
        ]

    async def test_requests_carry_session_cookie(self, settings):
        fake = FakeRoblox({("GET", "friends.roblox.com/v1/users/1/friends/count"): {"count": 0}})
        await make_client(settings, fake).get_friend_count(1)

        assert fake.requests[0].headers["Cookie"] == ".ROBLOSECURITY=cookie"

    async def test_missing_creation_date_is_a_failure(self, settings):
        fake = FakeRoblox({("GET", "users.roblox.com/v1/users/1"): {"id": 1}})
        with pytest.raises(UpstreamUnavailableError):
            await make_client(settings, fake).get_account_created(1)

    async def test_error_status_raises(self, settings):
        fake = FakeRoblox({
            ("GET", "friends.roblox.com/v1/users/1/friends/count"): lambda r: httpx.Response(
                429, json={"errors": [{"message": "TooManyRequests"}]}
            )
        })
        with pytest.raises(UpstreamUnavailableError):
            await make_client(settings, fake).get_friend_count(1)

    async def test_transport_error_raises(self, settings):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake = FakeRoblox({("GET", "badges.roblox.com/v1/users/1/badges"): unreachable})
        with pytest.raises(UpstreamUnavailableError):
            await make_client(settings, fake).get_badge_count(1)

    async def test_invalid_json_raises(self, settings):
        fake = FakeRoblox({
            ("GET", "friends.roblox.com/v1/users/1/friends/count"): lambda r: httpx.Response(
                200, text="<html>maintenance</html>"
            )
        })
        with pytest.raises(UpstreamUnavailableError):
            await make_client(settings, fake).get_friend_count(1)


# =============================================================================
# TEST: MEMBERS
# =============================================================================


class TestMembers:

    async def test_pages_are_followed(self, settings):
        def members(request: httpx.Request) -> httpx.Response:
            assert request.url.params["limit"] == "100"
            assert request.url.params["sortOrder"] == "Asc"
            if request.url.params.get("cursor") == "page2":
                return httpx.Response(200, json={
                    "data": [{"userId": 3, "username": "c", "displayName": "C"}],
                    "nextPageCursor": None,
                })
            return httpx.Response(200, json={
                "data": [
                    {"userId": 1, "username": "a", "displayName": "A"},
                    {"userId": 2, "username": "b", "displayName": "B"},
                ],
                "nextPageCursor": "page2",
            })

        fake = FakeRoblox({
            ("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES,
            ("GET", "groups.roblox.com/v1/groups/1234/roles/9005/users"): members,
        })
        result = await make_client(settings, fake).get_members_in_rank(PENDING_RANK)

        assert [m["userId"] for m in result] == [1, 2, 3]

    async def test_roles_are_fetched_once(self, settings):
        fake = FakeRoblox({
            ("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES,
            ("GET", "groups.roblox.com/v1/groups/1234/roles/9005/users"): {"data": []},
            ("GET", "groups.roblox.com/v1/groups/1234/roles/9235/users"): {"data": []},
        })
        client = make_client(settings, fake)
        await client.get_members_in_rank(PENDING_RANK)
        await client.get_members_in_rank(DENIED_RANK)

        role_fetches = [r for r in fake.requests if r.url.path == "/v1/groups/1234/roles"]
        assert len(role_fetches) == 1

    async def test_unknown_rank_has_no_members(self, settings):
        fake = FakeRoblox({("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES})
        assert await make_client(settings, fake).get_members_in_rank(42) == []

    async def test_unconfigured_client_makes_no_requests(self):
        fake = FakeRoblox({})
        client = make_client(Settings(ROBLOX_COOKIE="", IMMIGRATION_GROUP_ID=0), fake)

        assert client.enabled is False
        assert await client.get_members_in_rank(PENDING_RANK) == []
        assert fake.requests == []


# =============================================================================
# TEST: RANK MUTATION
# =============================================================================


class TestSetRank:

    async def test_csrf_handshake(self, settings):
        def patch(request: httpx.Request) -> httpx.Response:
            if request.headers.get("x-csrf-token") != "tok-1":
                return httpx.Response(403, headers={"x-csrf-token": "tok-1"}, json={})
            assert json.loads(request.content) == {"roleId": 9235}
            return httpx.Response(200, json={})

        fake = FakeRoblox({
            ("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES,
            ("PATCH", "groups.roblox.com/v1/groups/1234/users/55"): patch,
        })
        await make_client(settings, fake).set_rank(55, DENIED_RANK)

        patches = [r for r in fake.requests if r.method == "PATCH"]
        assert len(patches) == 2

    async def test_token_is_reused(self, settings):
        def patch(request: httpx.Request) -> httpx.Response:
            if request.headers.get("x-csrf-token") != "tok-1":
                return httpx.Response(403, headers={"x-csrf-token": "tok-1"}, json={})
            return httpx.Response(200, json={})

        fake = FakeRoblox({
            ("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES,
            ("PATCH", "groups.roblox.com/v1/groups/1234/users/55"): patch,
        })
        client = make_client(settings, fake)
        await client.set_rank(55, DENIED_RANK)
        await client.set_rank(55, PENDING_RANK)

        assert len([r for r in fake.requests if r.method == "PATCH"]) == 3

    async def test_forbidden_without_token_raises(self, settings):
        fake = FakeRoblox({
            ("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES,
            ("PATCH", "groups.roblox.com/v1/groups/1234/users/55"): lambda r: httpx.Response(
                403, json={"errors": [{"message": "Insufficient permissions"}]}
            ),
        })
        with pytest.raises(UpstreamUnavailableError):
            await make_client(settings, fake).set_rank(55, DENIED_RANK)

    async def test_missing_role_raises_not_found(self, settings):
        fake = FakeRoblox({("GET", "groups.roblox.com/v1/groups/1234/roles"): ROLES})
        with pytest.raises(NotFoundError):
            await make_client(settings, fake).set_rank(55, 99)

    async def test_role_without_id_is_ignored(self, settings):
        roles = {"roles": [{"name": "Broken", "rank": DENIED_RANK}]}
        fake = FakeRoblox({("GET", "groups.roblox.com/v1/groups/1234/roles"): roles})
        client = make_client(settings, fake)

        assert await client.get_role_id_for_rank(DENIED_RANK) is None
        with pytest.raises(NotFoundError):
            await client.set_rank(55, DENIED_RANK)


# =============================================================================
# TEST: THUMBNAILS & LOGIN CHECK
# =============================================================================


class TestThumbnails:

    async def test_avatar_url(self, settings):
        fake = FakeRoblox({
            ("GET", "thumbnails.roblox.com/v1/users/avatar-headshot"): {
                "data": [{"targetId": 8, "state": "Completed", "imageUrl": "https://tr.rbxcdn.com/a.png"}]
            }
        })
        assert await make_client(settings, fake).get_avatar_headshot_url(8) == "https://tr.rbxcdn.com/a.png"
        assert fake.requests[0].url.params["userIds"] == "8"

    async def test_missing_icon_is_none(self, settings):
        fake = FakeRoblox({("GET", "thumbnails.roblox.com/v1/groups/icons"): {"data": []}})
        assert await make_client(settings, fake).get_group_icon_url(3) is None

    async def test_check_login_never_raises(self, settings):
        fake = FakeRoblox({
            ("GET", "users.roblox.com/v1/users/authenticated"): lambda r: httpx.Response(401, json={})
        })
        await make_client(settings, fake).check_login()
        assert len(fake.requests) == 1
