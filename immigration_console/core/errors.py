"""Exceptions shared by the console services and routes."""


class ConsoleError(Exception):
    """Base exception for console operations."""

    code = "console_error"


class NotFoundError(ConsoleError):
    """Referenced entity does not exist."""

    code = "not_found"


class InvalidArgumentError(ConsoleError):
    """Caller supplied a value the operation cannot accept."""

    code = "invalid_argument"


class UpstreamUnavailableError(ConsoleError):
    """An external platform call failed or returned an error."""

    code = "upstream_unavailable"


class AuthenticationError(ConsoleError):
    """No valid staff session."""

    code = "not_authenticated"
