"""
Unit tests for the media and inbox domain models.

These tests verify model behavior without touching external services
(no object storage, no database).
"""

import pytest

from src.core.inbox.models import InboundMessage, MessageStatus, StatusFilter
from src.core.media.models import GalleryRenameIntent, RenameStatus


def make_intent(**overrides) -> GalleryRenameIntent:
    fields = dict(
        old_slug="wedding",
        new_slug="summer",
        source_paths=[
            "photos/wedding/.placeholder",
            "photos/wedding/1_a.jpg",
            "photos/wedding/2_b.jpg",
        ],
        created_at=1,
        updated_at=1,
    )
    fields.update(overrides)
    return GalleryRenameIntent(**fields)


class TestGalleryRenameIntent:

    def test_new_intent_is_pending_with_everything_remaining(self):
        intent = make_intent()

        assert intent.status is RenameStatus.PENDING
        assert intent.remaining_copies == intent.source_paths
        assert intent.remaining_deletes == intent.source_paths

    def test_remaining_copies_matches_by_file_name(self):
        intent = make_intent(copied_paths=["photos/summer/1_a.jpg"])

        assert intent.remaining_copies == [
            "photos/wedding/.placeholder",
            "photos/wedding/2_b.jpg",
        ]

    def test_remaining_deletes(self):
        intent = make_intent(deleted_paths=["photos/wedding/.placeholder"])

        assert intent.remaining_deletes == [
            "photos/wedding/1_a.jpg",
            "photos/wedding/2_b.jpg",
        ]

    def test_ids_are_unique(self):
        assert make_intent().id != make_intent().id

    @pytest.mark.parametrize("status,is_open", [
        (RenameStatus.PENDING, True),
        (RenameStatus.COPIED, True),
        (RenameStatus.FAILED, True),
        (RenameStatus.COMPLETED, False),
        (RenameStatus.ROLLED_BACK, False),
    ])
    def test_open_statuses(self, status, is_open):
        assert status.is_open is is_open


class TestMessageModels:

    def test_toggled(self):
        assert MessageStatus.UNREAD.toggled is MessageStatus.READ
        assert MessageStatus.READ.toggled is MessageStatus.UNREAD

    def test_status_filter(self):
        assert StatusFilter.ALL.matches(MessageStatus.READ)
        assert StatusFilter.ALL.matches(MessageStatus.UNREAD)
        assert StatusFilter.UNREAD.matches(MessageStatus.UNREAD)
        assert not StatusFilter.UNREAD.matches(MessageStatus.READ)

    def test_new_message_defaults(self):
        message = InboundMessage(sender="a@x.com", recipient="b@x.com", subject="hi")

        assert message.status is MessageStatus.UNREAD
        assert message.received_at.tzinfo is not None
        assert message.payload == {}

    def test_query_match_ignores_missing_fields(self):
        message = InboundMessage(sender="a@x.com", recipient="b@x.com", subject=None, text=None)

        assert message.matches("a@x")
        assert not message.matches("subject")
        assert message.matches("")
