"""
Domain exceptions.

Typed exceptions for explicit error handling.
Every failure of the session/favorites core is one of these.
"""

from __future__ import annotations

from typing import Optional


# ═══════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════


class MyFlixError(Exception):
    """
    Base exception for all client errors.

    Allows the UI layer to catch every core failure with a single
    except clause and show a short notification.
    """

    pass


# ═══════════════════════════════════════════════════════════
# AUTHENTICATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class AuthError(MyFlixError):
    """
    Authentication failed.

    Raised when:
    - Login credentials are rejected
    - Backend answers 401 to an authenticated call

    Example:
        >>> raise AuthError("Invalid username or password")
    """

    pass


class NotAuthenticatedError(AuthError):
    """
    Operation requires a live session for a given user.

    Raised when:
    - No session is held
    - The held session belongs to another username

    Example:
        >>> raise NotAuthenticatedError("No session for user 'ana'")
    """

    pass


# ═══════════════════════════════════════════════════════════
# VALIDATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class ValidationError(MyFlixError):
    """
    Input or payload validation failed.

    Raised when:
    - A required field is missing (e.g. password on profile edit)
    - Backend rejects a write with 400/422
    - Backend response does not match the expected entity shape

    Example:
        >>> raise ValidationError("password required")
    """

    pass


class DateParseError(ValidationError):
    """
    Date input cannot be parsed into a calendar instant.

    Example:
        >>> raise DateParseError("Cannot parse date: 'yesterday-ish'")
    """

    pass


# ═══════════════════════════════════════════════════════════
# EXTERNAL SERVICE EXCEPTIONS
# ═══════════════════════════════════════════════════════════


class NetworkError(MyFlixError):
    """
    Remote call failed.

    Raised when:
    - Connection refused, DNS failure, timeout
    - Backend answers with an unexpected status code

    Attributes:
        status_code: HTTP status when the server answered, else None

    Example:
        >>> raise NetworkError("Backend error: 503", status_code=503)
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
