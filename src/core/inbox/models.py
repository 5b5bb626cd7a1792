"""
Domain models for the message inbox.

A message is one email received on the site's domain. There is a single
global inbox; messages have no owner.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


class MessageStatus(Enum):
    UNREAD = "unread"
    READ = "read"

    @property
    def toggled(self) -> "MessageStatus":
        return MessageStatus.READ if self is MessageStatus.UNREAD else MessageStatus.UNREAD


class StatusFilter(Enum):
    """Status filter offered by the inbox UI."""
    ALL = "all"
    UNREAD = "unread"
    READ = "read"

    def matches(self, status: MessageStatus) -> bool:
        return self is StatusFilter.ALL or self.value == status.value


@dataclass
class InboundMessage:
    """
    An email as stored in the inbox.

    payload keeps the provider's webhook body verbatim for debugging.
    """
    sender: str
    recipient: str
    subject: str
    text: str = ""
    html: str = ""
    status: MessageStatus = MessageStatus.UNREAD
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payload: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid4().hex)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on sender, subject or body text."""
        needle = query.lower()
        if not needle:
            return True
        return (
            needle in (self.sender or "").lower()
            or needle in (self.subject or "").lower()
            or needle in (self.text or "").lower()
        )
