"""Error taxonomy shared by the flows, the access gate and the HTTP layer."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised while wiring the application when required settings are unusable."""


class AuthGateError(Exception):
    """Base class for failures that map onto a client-visible response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthGateError):
    status_code = 400
    default_message = "Email and password are required"


class DuplicateEmail(AuthGateError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(AuthGateError):
    """Wrong password and unknown email both surface as this error."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(AuthGateError):
    status_code = 401
    default_message = "Invalid token"


class NotFound(AuthGateError):
    status_code = 404
    default_message = "User not found"


class InvalidToken(Exception):
    """Raised by the token verifier for bad signatures, malformed or expired tokens."""
