"""
Snowflake repository for the display-name overlay.

The object store can't rename a blob without copying it, so user-chosen
names for videos and galleries live here instead, keyed by a sanitized
path (see core.media.naming). One row per key; the last write wins.
"""

import logging
from typing import Optional

from src.core.media.models import DisplayNameRecord, DisplayNameType

from .base import SnowflakeConnection

logger = logging.getLogger(__name__)


class DisplayNameRepository:
    """Reads and writes display-name records."""

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def get(self, key: str) -> Optional[DisplayNameRecord]:
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                SELECT key, path, gallery_id, display_name, type, updated_at
                FROM display_names
                WHERE key = %s
            """, (key,))

            row = cursor.fetchone()
            if not row:
                return None

            return DisplayNameRecord(
                key=row[0],
                path=row[1],
                gallery_id=row[2],
                display_name=row[3],
                type=DisplayNameType(row[4]),
                updated_at=int(row[5]),
            )

        finally:
            cursor.close()

    def get_display_name(self, key: str) -> Optional[str]:
        record = self.get(key)
        return record.display_name if record else None

    def upsert(self, record: DisplayNameRecord) -> None:
        """Insert or replace the record stored under record.key."""
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                MERGE INTO display_names AS target
                USING (
                    SELECT %s AS key, %s AS path, %s AS gallery_id,
                           %s AS display_name, %s AS type, %s AS updated_at
                ) AS source
                ON target.key = source.key
                WHEN MATCHED THEN UPDATE SET
                    path = source.path,
                    gallery_id = source.gallery_id,
                    display_name = source.display_name,
                    type = source.type,
                    updated_at = source.updated_at
                WHEN NOT MATCHED THEN INSERT (
                    key, path, gallery_id, display_name, type, updated_at
                ) VALUES (
                    source.key, source.path, source.gallery_id,
                    source.display_name, source.type, source.updated_at
                )
            """, (
                record.key,
                record.path,
                record.gallery_id,
                record.display_name,
                record.type.value,
                record.updated_at,
            ))

            self._conn.commit()

            logger.info(
                "Saved display name",
                extra={"key": record.key, "type": record.type.value}
            )

        except Exception as e:
            logger.error(
                "Failed to save display name",
                extra={"key": record.key, "error": str(e)}
            )
            raise
        finally:
            cursor.close()

    def delete(self, key: str) -> bool:
        """Remove the record under key. Returns False if there was none."""
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM display_names
                WHERE key = %s
            """, (key,))

            self._conn.commit()
            return cursor.rowcount > 0

        except Exception as e:
            logger.error(
                "Failed to delete display name",
                extra={"key": key, "error": str(e)}
            )
            raise
        finally:
            cursor.close()
