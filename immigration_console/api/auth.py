"""Authentication API routes for the staff console.

Staff accounts come from the ADMIN_ACCOUNTS setting. A successful login sets
an HttpOnly session cookie; every other route requires it.
"""

import logging

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from ..core.dependencies import CurrentStaffDep, SessionStoreDep, SettingsDep
from ..core.errors import AuthenticationError
from ..core.security import verify_staff_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================


class LoginRequest(BaseModel):
    """Login request with staff username and password."""
    username: str | None = None
    password: str | None = None


class StaffInfo(BaseModel):
    """The signed-in staff member."""
    username: str


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.post("/login", response_model=StaffInfo)
async def login(
    request: LoginRequest,
    response: Response,
    settings: SettingsDep,
    sessions: SessionStoreDep,
):
    """Login with a staff username and password."""
    if not verify_staff_password(settings.admin_accounts, request.username, request.password):
        logger.warning(f"[AUTH] Failed login for {request.username!r}")
        raise AuthenticationError("Invalid login")

    token = sessions.create(request.username)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        path="/",
    )
    logger.info(f"[AUTH] {request.username} logged in")
    return StaffInfo(username=request.username)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    settings: SettingsDep,
    sessions: SessionStoreDep,
    current_staff: CurrentStaffDep,
):
    """End the current session and clear its cookie."""
    sessions.destroy(current_staff.token)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/me", response_model=StaffInfo)
async def me(current_staff: CurrentStaffDep):
    """The staff member the session belongs to."""
    return StaffInfo(username=current_staff.username)
