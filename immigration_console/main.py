"""RUS Control: staff console FastAPI application.

Staff review immigration applicants (with an automated alt-account check),
accept or deny them on the group, keep notes, and run the in-game elections.
All state is in memory and resets on restart.
"""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import api_router
from .core import (
    AuthenticationError,
    ConsoleError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamUnavailableError,
    get_settings,
)
from .core.dependencies import get_roblox_client
from .schemas import ErrorDetail, ErrorResponse

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"[STARTUP] {settings.app_name} {settings.app_version} ({settings.environment})")
    if not settings.admin_accounts:
        logger.warning("[AUTH] No staff accounts configured; nobody can log in.")

    await get_roblox_client().check_login()
    yield


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## RUS Control

    Staff console for the immigration office and elections.

    ### Key Features

    - **Immigration Panel**: Pending and failed applicants, drawn from their group ranks.
    - **Alt Check**: Account age, friends, favorites, badges and groups scored into a verdict.
    - **Decisions**: Accept/deny moves the applicant's rank; staff notes are kept per applicant.
    - **Elections**: Five phase-gated elections and a party roster.

    ### Authentication

    `POST /login` sets an HttpOnly session cookie used by every other endpoint.
    """,
    lifespan=lifespan,
)

if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


ERROR_STATUS: dict[type[ConsoleError], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    UpstreamUnavailableError: status.HTTP_502_BAD_GATEWAY,
}


@app.exception_handler(ConsoleError)
async def console_error_handler(request: Request, exc: ConsoleError):
    """Render domain errors as the standard error envelope."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.code, message=str(exc)).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as the standard error envelope."""
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ())[1:]) or None,
            message=error.get("msg", "Invalid value"),
            code=error.get("type", "invalid"),
        )
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="validation_error",
            message="Request validation failed",
            details=details,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    error_detail = str(exc)
    if settings.debug or settings.environment != "production":
        error_detail = f"{str(exc)}\n{traceback.format_exc()}"

    logger.error(f"[ERROR] Unhandled exception: {error_detail}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="internal_error",
            message=f"An unexpected error occurred: {str(exc)[:200]}",
        ).model_dump(),
    )


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "immigration_console.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
