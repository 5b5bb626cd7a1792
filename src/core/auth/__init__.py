"""Single-admin login and signed session tokens."""

from .sessions import AdminSession, SessionTokenService

__all__ = [
    "AdminSession",
    "SessionTokenService",
]
