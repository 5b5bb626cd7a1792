"""
Admin message inbox.

Stores mail received on the site's domain and forwards a copy to the
studio's own address.
"""

from .models import InboundMessage, MessageStatus, StatusFilter
from .service import EmailNotConfiguredError, InboxService, MessageStore

__all__ = [
    "InboundMessage",
    "MessageStatus",
    "StatusFilter",
    "EmailNotConfiguredError",
    "InboxService",
    "MessageStore",
]
