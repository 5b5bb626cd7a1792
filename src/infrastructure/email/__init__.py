"""
Transactional email via Resend.

Implements the EmailSender protocol from core.notifications.
"""

from .client import (
    EmailConfig,
    EmailError,
    MockEmailClient,
    ResendEmailClient,
    create_email_client,
)

__all__ = [
    "EmailConfig",
    "EmailError",
    "MockEmailClient",
    "ResendEmailClient",
    "create_email_client",
]
