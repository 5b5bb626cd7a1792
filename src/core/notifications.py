"""
Outgoing email seam.

Booking requests and forwarded inbox mail are the only email the site
sends. Workflows build an OutgoingEmail and hand it to whatever
EmailSender they were given (Resend in production, a recorder in tests).
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class OutgoingEmail:
    from_address: str
    to: list[str]
    subject: str
    html: str
    reply_to: Optional[str] = None


class EmailSender(Protocol):
    """
    Interface for transactional email providers.

    send returns the provider's message id and raises on any failure.
    """

    async def send(self, email: OutgoingEmail) -> str:
        ...
