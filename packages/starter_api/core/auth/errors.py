"""
Authentication error types.

Unauthenticated and Forbidden are terminal responses for a request: the
caller either supplied no credential or supplied one that was rejected.
"""

from fastapi import HTTPException, status


class InvalidTokenError(Exception):
    """Token could not be decoded, was signed with another key, or has expired."""


class Unauthenticated(HTTPException):
    """No credential was supplied with the request."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    """A credential was supplied but is missing, malformed, expired or forged."""

    def __init__(self, detail: str = "Invalid or expired token"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class PasswordHashingError(HTTPException):
    def __init__(self, detail: str = "Could not process password"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
