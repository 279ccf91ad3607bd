"""API routes for the staff console."""

from fastapi import APIRouter

from .auth import router as auth_router
from .elections import router as elections_router
from .immigration import router as immigration_router

# Main API router
api_router = APIRouter()

# Auth routes (login, logout, me)
api_router.include_router(auth_router)

# Immigration panel, alt checks, decisions
api_router.include_router(immigration_router)

# Elections and parties
api_router.include_router(elections_router)

__all__ = ["api_router"]
