"""Unit tests for booking notifications."""

import asyncio
from datetime import date

import pytest

from src.core.booking import (
    BookingRequest,
    BookingService,
    format_long_date,
    render_booking_html,
    service_label,
)
from src.infrastructure.email.client import MockEmailClient


def make_booking(**overrides) -> BookingRequest:
    fields = dict(
        name="Jane Doe",
        email="jane@example.org",
        service_type="both",
        preferred_date=date(2024, 6, 1),
        message="We'd love a summer wedding shoot.",
    )
    fields.update(overrides)
    return BookingRequest(**fields)


@pytest.mark.parametrize("value,expected", [
    (date(2024, 6, 1), "June 1st, 2024"),
    (date(2024, 6, 2), "June 2nd, 2024"),
    (date(2024, 6, 3), "June 3rd, 2024"),
    (date(2024, 6, 4), "June 4th, 2024"),
    (date(2024, 6, 11), "June 11th, 2024"),
    (date(2024, 6, 12), "June 12th, 2024"),
    (date(2024, 6, 13), "June 13th, 2024"),
    (date(2024, 6, 21), "June 21st, 2024"),
    (date(2024, 6, 22), "June 22nd, 2024"),
    (date(2024, 12, 31), "December 31st, 2024"),
])
def test_format_long_date(value, expected):
    assert format_long_date(value) == expected


@pytest.mark.parametrize("service_type,expected", [
    ("photography", "Photography"),
    ("videography", "Videography"),
    ("both", "Photography & Videography"),
    ("drone", "drone"),
])
def test_service_label(service_type, expected):
    assert service_label(service_type) == expected


def test_html_lists_details_and_escapes_input():
    html = render_booking_html(make_booking(message="<script>alert(1)</script> hello there"))

    assert "Jane Doe" in html
    assert "mailto:jane@example.org" in html
    assert "Photography &amp; Videography" in html
    assert "June 1st, 2024" in html
    assert "<script>" not in html
    assert "Reply directly to this email to contact the client at jane@example.org" in html


def test_submit_sends_notification_with_reply_to():
    email = MockEmailClient()
    service = BookingService(email, notify_to="studio@example.com", from_address="Booking <b@example.com>")

    email_id = asyncio.run(service.submit(make_booking()))

    [sent] = email.sent
    assert email_id.startswith("mock-")
    assert sent.to == ["studio@example.com"]
    assert sent.from_address == "Booking <b@example.com>"
    assert sent.subject == "New Booking Request from Jane Doe"
    assert sent.reply_to == "jane@example.org"
