"""
Message inbox workflow.

Mail sent to the site's domain arrives through the provider's inbound
webhook. Each message is stored for the admin inbox, then forwarded to
the studio's personal address so nothing depends on someone checking the
admin page.
"""

import asyncio
import html
import logging
from typing import Any, AsyncIterator, Optional, Protocol

from ..notifications import EmailSender, OutgoingEmail
from .models import InboundMessage, MessageStatus, StatusFilter

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(Exception):
    """Raised when inbound mail arrives but no email provider is configured."""
    pass


class MessageStore(Protocol):
    def add(self, message: InboundMessage) -> InboundMessage: ...
    def list_all(self) -> list[InboundMessage]: ...
    def get(self, message_id: str) -> InboundMessage: ...
    def update_status(self, message_id: str, status: MessageStatus) -> None: ...
    def delete(self, message_id: str) -> None: ...
    def count_by_status(self, status: MessageStatus) -> int: ...


# ---------------------------------------------------------------------------
# Forwarding
# ---------------------------------------------------------------------------

def _address_text(value: Any) -> str:
    """Providers send `to` as a string or a list of strings."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def forward_subject(message: InboundMessage) -> str:
    return f"FWD: {message.subject or 'No Subject'} (from {message.sender})"


def render_forward_html(message: InboundMessage, site_domain: str) -> str:
    # The original HTML body is passed through as-is; only header values are escaped
    body = message.html or (
        f'<pre style="white-space: pre-wrap;">{html.escape(message.text)}</pre>'
    )

    return f"""
        <div style="font-family: sans-serif; padding: 20px; background: #f9fafb; border-radius: 8px;">
            <div style="margin-bottom: 20px; border-bottom: 1px solid #e5e7eb; padding-bottom: 10px;">
                <p><strong>From:</strong> {html.escape(message.sender)}</p>
                <p><strong>To:</strong> {html.escape(message.recipient)}</p>
                <p><strong>Subject:</strong> {html.escape(message.subject)}</p>
            </div>
            <div style="background: white; padding: 20px; border-radius: 4px; border: 1px solid #e5e7eb;">
                {body}
            </div>
            <p style="margin-top: 20px; font-size: 12px; color: #6b7280;">
                This email was received at {html.escape(site_domain)} and automatically forwarded.
            </p>
        </div>
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class InboxService:
    def __init__(
        self,
        messages: MessageStore,
        email: EmailSender,
        forward_to: str,
        forward_from: str,
        site_domain: str,
        email_configured: bool = True,
    ) -> None:
        self._messages = messages
        self._email = email
        self._forward_to = forward_to
        self._forward_from = forward_from
        self._site_domain = site_domain
        self._email_configured = email_configured

    def list_messages(
        self,
        query: str = "",
        status: StatusFilter = StatusFilter.ALL,
    ) -> list[InboundMessage]:
        """Newest first, filtered by search text and read status."""
        return [
            message for message in self._messages.list_all()
            if message.matches(query) and status.matches(message.status)
        ]

    async def watch(
        self,
        poll_interval: float,
        query: str = "",
        status: StatusFilter = StatusFilter.ALL,
    ) -> AsyncIterator[list[InboundMessage]]:
        """
        Yield the filtered message list now and again whenever it changes.

        Polls the store; runs until the consumer stops iterating.
        """
        last_seen: Optional[tuple] = None

        while True:
            snapshot = self.list_messages(query, status)
            fingerprint = tuple((m.id, m.status.value) for m in snapshot)

            if fingerprint != last_seen:
                last_seen = fingerprint
                yield snapshot

            await asyncio.sleep(poll_interval)

    def toggle_status(self, message_id: str) -> InboundMessage:
        message = self._messages.get(message_id)
        message.status = message.status.toggled
        self._messages.update_status(message_id, message.status)
        return message

    def set_status(self, message_id: str, status: MessageStatus) -> None:
        self._messages.update_status(message_id, status)

    def delete(self, message_id: str) -> None:
        self._messages.delete(message_id)

    def unread_count(self) -> int:
        return self._messages.count_by_status(MessageStatus.UNREAD)

    async def receive_inbound(self, payload: dict[str, Any]) -> InboundMessage:
        """
        Store an inbound email, then forward it.

        If storing fails nothing is forwarded. If forwarding fails the
        message stays in the inbox and the error propagates.
        """
        if not self._email_configured:
            logger.error("Inbound email received but email service is not configured")
            raise EmailNotConfiguredError("Email service misconfigured")

        fields = payload
        # Event-style webhooks wrap the email in a "data" envelope
        if "from" not in payload and isinstance(payload.get("data"), dict):
            fields = payload["data"]

        message = InboundMessage(
            sender=_address_text(fields.get("from")),
            recipient=_address_text(fields.get("to")),
            subject=fields.get("subject") or "",
            text=fields.get("text") or "",
            html=fields.get("html") or "",
            payload=payload,
        )

        self._messages.add(message)

        email_id = await self._email.send(OutgoingEmail(
            from_address=self._forward_from,
            to=[self._forward_to],
            subject=forward_subject(message),
            html=render_forward_html(message, self._site_domain),
        ))

        logger.info(
            "Forwarded inbound email",
            extra={"message_id": message.id, "email_id": email_id}
        )

        return message
