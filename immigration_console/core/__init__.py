"""Core application utilities.

Route dependencies live in ``core.dependencies`` and are imported from there
directly, since they depend on the services package.
"""

from .config import Settings, get_settings
from .errors import (
    AuthenticationError,
    ConsoleError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamUnavailableError,
)
from .security import SessionPayload, SessionStore, verify_staff_password

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ConsoleError",
    "NotFoundError",
    "InvalidArgumentError",
    "UpstreamUnavailableError",
    "AuthenticationError",
    # Security
    "SessionStore",
    "SessionPayload",
    "verify_staff_password",
]
