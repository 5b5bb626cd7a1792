"""
Resend email client wrapper.

Implements the EmailSender protocol from core.notifications:
1. Translates OutgoingEmail into Resend's send parameters
2. Runs the synchronous SDK call off the event loop
3. Wraps every provider failure in EmailError

Mock mode records messages in memory instead of sending them.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

import resend

from src.core.notifications import EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)


class EmailError(Exception):
    """Raised when the provider rejects or fails to send a message."""
    pass


@dataclass
class EmailConfig:
    api_key: str


class ResendEmailClient(EmailSender):
    """
    EmailSender backed by Resend.

    The SDK reads its key from a module global, so the key is set when
    the client is created. An empty key is allowed; sends then fail with
    EmailError, which callers report like any other send failure.
    """

    def __init__(self, config: EmailConfig) -> None:
        self._config = config
        resend.api_key = config.api_key

    async def send(self, email: OutgoingEmail) -> str:
        if not self._config.api_key:
            logger.error("Email send attempted without an API key")
            raise EmailError("Email API key is not configured")

        params = {
            "from": email.from_address,
            "to": email.to,
            "subject": email.subject,
            "html": email.html,
        }
        if email.reply_to:
            params["reply_to"] = email.reply_to

        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            logger.error(
                "Failed to send email",
                extra={"subject": email.subject, "error": str(e)}
            )
            raise EmailError(f"Send failed: {e}")

        email_id = response.get("id") if isinstance(response, dict) else None
        if not email_id:
            logger.error("Email provider returned no id", extra={"subject": email.subject})
            raise EmailError("Send failed: provider returned no message id")

        logger.info("Sent email", extra={"email_id": email_id, "to": email.to})

        return email_id


# ---------------------------------------------------------------------------
# Mock Client for Local Development
# ---------------------------------------------------------------------------

class MockEmailClient(EmailSender):
    """
    Records outgoing email instead of sending it.

    Set fail_with to make every send raise, for testing error paths.
    """

    def __init__(self) -> None:
        self.sent: list[OutgoingEmail] = []
        self.fail_with: Optional[str] = None
        logger.info("Initialized mock email client (in-memory)")

    async def send(self, email: OutgoingEmail) -> str:
        if self.fail_with:
            raise EmailError(self.fail_with)

        self.sent.append(email)
        email_id = f"mock-{uuid4().hex}"

        logger.debug(
            "Recorded email in mock client",
            extra={"email_id": email_id, "subject": email.subject}
        )

        return email_id

    def _clear(self) -> None:
        """Forget recorded messages and failure mode (for test cleanup)."""
        self.sent.clear()
        self.fail_with = None


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_email_client(
    config: Optional[EmailConfig] = None,
    mock_mode: bool = False,
) -> EmailSender:
    """
    Create email client based on configuration.

    Args:
        config: Email configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        EmailSender implementation (Resend or Mock)
    """
    if mock_mode:
        return MockEmailClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return ResendEmailClient(config)
