"""
Admin session tokens.

There is one admin account, configured through the environment. A
successful login yields a signed token stored in an HTTP-only cookie;
every admin request verifies the signature and the expiry server-side,
so a cookie can't be forged or extended by the browser.
"""

import hmac
import logging
import time
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

logger = logging.getLogger(__name__)

_SALT = "admin-session"


@dataclass(frozen=True)
class AdminSession:
    email: str
    issued_at: int
    expires_at: int


class SessionTokenService:
    def __init__(
        self,
        secret_key: str,
        admin_email: str,
        admin_password: str,
        ttl_seconds: int = 86400,
    ) -> None:
        self._signing_enabled = bool(secret_key)
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_SALT)
        self._admin_email = admin_email
        self._admin_password = admin_password
        self.ttl_seconds = ttl_seconds

    def verify_credentials(self, email: str, password: str) -> bool:
        """
        Exact match against the configured pair.

        Unset credentials never match, and neither does anything while no
        signing secret is configured.
        """
        if not self._signing_enabled:
            logger.warning("Admin login attempted but no session secret is configured")
            return False

        if not self._admin_email or not self._admin_password:
            logger.warning("Admin login attempted but admin credentials are not configured")
            return False

        email_ok = hmac.compare_digest(email.encode(), self._admin_email.encode())
        password_ok = hmac.compare_digest(password.encode(), self._admin_password.encode())
        return email_ok and password_ok

    def issue(self, email: str) -> str:
        if not self._signing_enabled:
            raise ValueError("Cannot issue admin sessions without a secret key")

        issued_at = int(time.time())
        return self._serializer.dumps({
            "sub": email,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        })

    def verify(self, token: Optional[str]) -> Optional[AdminSession]:
        """The session a token stands for, or None if it's forged, expired or stale."""
        if not token or not self._signing_enabled:
            return None

        try:
            data = self._serializer.loads(token, max_age=self.ttl_seconds)
        except SignatureExpired:
            logger.debug("Admin session expired")
            return None
        except BadSignature:
            logger.warning("Rejected admin session with bad signature")
            return None

        if not isinstance(data, dict):
            return None

        email = data.get("sub")
        expires_at = data.get("exp")
        if not isinstance(email, str) or not isinstance(expires_at, int):
            return None

        if expires_at <= time.time():
            return None

        # Changing the admin email invalidates existing sessions
        if email != self._admin_email:
            return None

        return AdminSession(
            email=email,
            issued_at=int(data.get("iat", 0)),
            expires_at=expires_at,
        )
