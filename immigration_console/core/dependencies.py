"""FastAPI dependencies for authentication and shared services."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from ..services import (
    DecisionDispatcher,
    DecisionService,
    ElectionRegistry,
    NoteStore,
    QueueService,
    RobloxClient,
    SignalCollector,
)
from .config import Settings, get_settings
from .errors import AuthenticationError
from .security import SessionStore

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_settings)]


# =============================================================================
# PROCESS-WIDE STATE
# =============================================================================


@lru_cache
def get_session_store() -> SessionStore:
    return SessionStore(get_settings())


@lru_cache
def get_registry() -> ElectionRegistry:
    return ElectionRegistry()


@lru_cache
def get_note_store() -> NoteStore:
    return NoteStore()


@lru_cache
def get_roblox_client() -> RobloxClient:
    return RobloxClient(get_settings())


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
RegistryDep = Annotated[ElectionRegistry, Depends(get_registry)]
NoteStoreDep = Annotated[NoteStore, Depends(get_note_store)]
RobloxClientDep = Annotated[RobloxClient, Depends(get_roblox_client)]


# =============================================================================
# PER-REQUEST SERVICES
# =============================================================================


def get_decision_service(
    settings: SettingsDep,
    notes: NoteStoreDep,
    client: RobloxClientDep,
) -> DecisionService:
    dispatcher = DecisionDispatcher(
        accepted_rank=settings.immigration_rank,
        denied_rank=settings.denied_rank,
    )
    return DecisionService(dispatcher, notes, client)


def get_queue_service(settings: SettingsDep, client: RobloxClientDep) -> QueueService:
    return QueueService(
        client,
        pending_rank=settings.immigration_rank,
        failed_rank=settings.denied_rank,
    )


def get_signal_collector(client: RobloxClientDep) -> SignalCollector:
    return SignalCollector(client)


DecisionServiceDep = Annotated[DecisionService, Depends(get_decision_service)]
QueueServiceDep = Annotated[QueueService, Depends(get_queue_service)]
SignalCollectorDep = Annotated[SignalCollector, Depends(get_signal_collector)]


# =============================================================================
# AUTHENTICATION
# =============================================================================


class CurrentStaff:
    """The signed-in staff member acting on this request."""

    def __init__(self, username: str, token: str):
        self.username = username
        self.token = token


async def get_current_staff(
    request: Request,
    settings: SettingsDep,
    sessions: SessionStoreDep,
) -> CurrentStaff:
    """Dependency to get the signed-in staff member from the session cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    payload = sessions.resolve(token)
    if payload is None:
        raise AuthenticationError("Not authenticated")
    return CurrentStaff(username=payload.sub, token=token)


CurrentStaffDep = Annotated[CurrentStaff, Depends(get_current_staff)]
