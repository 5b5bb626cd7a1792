"""
Snowflake repository for received email.

Backs the admin inbox. The inbound webhook is the only writer of new rows;
the admin UI flips status and deletes. Every write is a single-row
statement with no concurrency check, so concurrent admins get last write
wins.
"""

import json
import logging
from typing import Optional

from src.core.inbox.models import InboundMessage, MessageStatus

from .base import SnowflakeConnection, load_variant

logger = logging.getLogger(__name__)


class MessageNotFoundError(Exception):
    """Raised when a message id doesn't exist."""
    pass


_SELECT_COLUMNS = """
    id, from_address, to_address, subject, text, html,
    received_at, status, payload
"""


class MessageRepository:
    """Repository for the received_emails collection."""

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def add(self, message: InboundMessage) -> InboundMessage:
        cursor = self._conn.cursor()

        try:
            # VARIANT values can't be bound in a VALUES clause, hence INSERT ... SELECT
            cursor.execute("""
                INSERT INTO received_emails (
                    id, from_address, to_address, subject, text, html,
                    received_at, status, payload
                )
                SELECT %s, %s, %s, %s, %s, %s, %s, %s, PARSE_JSON(%s)
            """, (
                message.id,
                message.sender,
                message.recipient,
                message.subject,
                message.text,
                message.html,
                message.received_at,
                message.status.value,
                json.dumps(message.payload, default=str),
            ))

            self._conn.commit()

            logger.info(
                "Stored received email",
                extra={"message_id": message.id, "from": message.sender}
            )

            return message

        except Exception as e:
            logger.error(
                "Failed to store received email",
                extra={"from": message.sender, "error": str(e)}
            )
            raise
        finally:
            cursor.close()

    def list_all(self) -> list[InboundMessage]:
        """All messages, newest first."""
        cursor = self._conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_SELECT_COLUMNS}
                FROM received_emails
                ORDER BY received_at DESC
            """)

            return [self._build_message(row) for row in cursor.fetchall()]

        finally:
            cursor.close()

    def get(self, message_id: str) -> InboundMessage:
        cursor = self._conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_SELECT_COLUMNS}
                FROM received_emails
                WHERE id = %s
            """, (message_id,))

            row = cursor.fetchone()
            if not row:
                raise MessageNotFoundError(f"Message {message_id} not found")

            return self._build_message(row)

        finally:
            cursor.close()

    def update_status(self, message_id: str, status: MessageStatus) -> None:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                UPDATE received_emails
                SET status = %s
                WHERE id = %s
            """, (status.value, message_id))

            if cursor.rowcount == 0:
                raise MessageNotFoundError(f"Message {message_id} not found")

            self._conn.commit()

        finally:
            cursor.close()

    def delete(self, message_id: str) -> None:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM received_emails
                WHERE id = %s
            """, (message_id,))

            if cursor.rowcount == 0:
                raise MessageNotFoundError(f"Message {message_id} not found")

            self._conn.commit()

            logger.info("Deleted received email", extra={"message_id": message_id})

        finally:
            cursor.close()

    def count_by_status(self, status: MessageStatus) -> int:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                SELECT COUNT(*)
                FROM received_emails
                WHERE status = %s
            """, (status.value,))

            row = cursor.fetchone()
            return int(row[0]) if row else 0

        finally:
            cursor.close()

    def _build_message(self, row) -> InboundMessage:
        payload: Optional[dict] = load_variant(row[8], default={})
        return InboundMessage(
            id=row[0],
            sender=row[1] or "",
            recipient=row[2] or "",
            subject=row[3] or "",
            text=row[4] or "",
            html=row[5] or "",
            received_at=row[6],
            status=MessageStatus(row[7]),
            payload=payload or {},
        )
