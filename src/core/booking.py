"""
Booking requests from the public site.

A booking is not stored anywhere: it becomes a notification email to the
studio, with reply-to set to the client so answering is one click.
"""

import html
import logging
from dataclasses import dataclass
from datetime import date

from .notifications import EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)


SERVICE_LABELS = {
    "photography": "Photography",
    "videography": "Videography",
    "both": "Photography & Videography",
}


@dataclass
class BookingRequest:
    """A validated booking form submission."""
    name: str
    email: str
    service_type: str
    preferred_date: date
    message: str


def service_label(service_type: str) -> str:
    return SERVICE_LABELS.get(service_type, service_type)


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: date) -> str:
    """June 1st, 2024"""
    return f"{value.strftime('%B')} {_ordinal(value.day)}, {value.year}"


def render_booking_html(booking: BookingRequest) -> str:
    name = html.escape(booking.name)
    email = html.escape(booking.email)

    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="color: #f97316; border-bottom: 2px solid #f97316; padding-bottom: 10px;">
                New Booking Request
            </h1>

            <div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <h2 style="margin-top: 0; color: #1e293b;">Client Details</h2>
                <p><strong>Name:</strong> {name}</p>
                <p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>
            </div>

            <div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <h2 style="margin-top: 0; color: #1e293b;">Booking Details</h2>
                <p><strong>Service Type:</strong> {html.escape(service_label(booking.service_type))}</p>
                <p><strong>Preferred Date:</strong> {format_long_date(booking.preferred_date)}</p>
            </div>

            <div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <h2 style="margin-top: 0; color: #1e293b;">Message</h2>
                <p style="white-space: pre-wrap;">{html.escape(booking.message)}</p>
            </div>

            <hr style="border: none; border-top: 1px solid #e2e8f0; margin: 30px 0;">

            <p style="color: #64748b; font-size: 14px;">
                Reply directly to this email to contact the client at {email}
            </p>
        </div>
    """


class BookingService:
    def __init__(self, email: EmailSender, notify_to: str, from_address: str) -> None:
        self._email = email
        self._notify_to = notify_to
        self._from_address = from_address

    async def submit(self, booking: BookingRequest) -> str:
        """Send the studio a notification. Returns the provider's email id."""
        email_id = await self._email.send(OutgoingEmail(
            from_address=self._from_address,
            to=[self._notify_to],
            subject=f"New Booking Request from {booking.name}",
            html=render_booking_html(booking),
            reply_to=booking.email,
        ))

        logger.info(
            "Sent booking notification",
            extra={"email_id": email_id, "service_type": booking.service_type}
        )

        return email_id
