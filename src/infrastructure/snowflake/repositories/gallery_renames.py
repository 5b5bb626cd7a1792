"""
Snowflake repository for gallery rename intents.

A gallery rename copies every photo into a new folder and then deletes the
originals. The intent row is written before the first copy and updated
after every step, so a crash anywhere in the sequence leaves a record of
what was copied and what was deleted.
"""

import json
import logging
from typing import Optional

from src.core.media.models import GalleryRenameIntent, RenameStatus

from .base import SnowflakeConnection, load_variant

logger = logging.getLogger(__name__)


class RenameIntentNotFoundError(Exception):
    """Raised when a rename intent id doesn't exist."""
    pass


_SELECT_COLUMNS = """
    intent_id, old_slug, new_slug, source_paths, copied_paths,
    deleted_paths, status, error, created_at, updated_at
"""

_OPEN_STATUSES = tuple(s.value for s in RenameStatus if s.is_open)


class GalleryRenameRepository:
    """Repository for the gallery_renames table."""

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def save(self, intent: GalleryRenameIntent) -> None:
        """Insert or update the intent. Called after every saga step."""
        cursor = self._conn.cursor()

        try:
            cursor.execute("""
                MERGE INTO gallery_renames AS target
                USING (
                    SELECT %s AS intent_id, %s AS old_slug, %s AS new_slug,
                           PARSE_JSON(%s) AS source_paths,
                           PARSE_JSON(%s) AS copied_paths,
                           PARSE_JSON(%s) AS deleted_paths,
                           %s AS status, %s AS error,
                           %s AS created_at, %s AS updated_at
                ) AS source
                ON target.intent_id = source.intent_id
                WHEN MATCHED THEN UPDATE SET
                    copied_paths = source.copied_paths,
                    deleted_paths = source.deleted_paths,
                    status = source.status,
                    error = source.error,
                    updated_at = source.updated_at
                WHEN NOT MATCHED THEN INSERT (
                    intent_id, old_slug, new_slug, source_paths, copied_paths,
                    deleted_paths, status, error, created_at, updated_at
                ) VALUES (
                    source.intent_id, source.old_slug, source.new_slug,
                    source.source_paths, source.copied_paths, source.deleted_paths,
                    source.status, source.error, source.created_at, source.updated_at
                )
            """, (
                intent.id,
                intent.old_slug,
                intent.new_slug,
                json.dumps(intent.source_paths),
                json.dumps(intent.copied_paths),
                json.dumps(intent.deleted_paths),
                intent.status.value,
                intent.error,
                intent.created_at,
                intent.updated_at,
            ))

            self._conn.commit()

            logger.debug(
                "Saved gallery rename intent",
                extra={"intent_id": intent.id, "status": intent.status.value}
            )

        except Exception as e:
            logger.error(
                "Failed to save gallery rename intent",
                extra={"intent_id": intent.id, "error": str(e)}
            )
            raise
        finally:
            cursor.close()

    def get(self, intent_id: str) -> GalleryRenameIntent:
        cursor = self._conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_SELECT_COLUMNS}
                FROM gallery_renames
                WHERE intent_id = %s
            """, (intent_id,))

            row = cursor.fetchone()
            if not row:
                raise RenameIntentNotFoundError(f"Rename {intent_id} not found")

            return self._build_intent(row)

        finally:
            cursor.close()

    def list_open(self) -> list[GalleryRenameIntent]:
        """Renames that are still pending, half-done, or failed."""
        cursor = self._conn.cursor()

        try:
            placeholders = ", ".join(["%s"] * len(_OPEN_STATUSES))
            cursor.execute(f"""
                SELECT {_SELECT_COLUMNS}
                FROM gallery_renames
                WHERE status IN ({placeholders})
                ORDER BY created_at
            """, _OPEN_STATUSES)

            return [self._build_intent(row) for row in cursor.fetchall()]

        finally:
            cursor.close()

    def find_open_for_slug(self, slug: str) -> Optional[GalleryRenameIntent]:
        """An open rename that reads from or writes to the given folder, if any."""
        for intent in self.list_open():
            if slug in (intent.old_slug, intent.new_slug):
                return intent
        return None

    def _build_intent(self, row) -> GalleryRenameIntent:
        return GalleryRenameIntent(
            id=row[0],
            old_slug=row[1],
            new_slug=row[2],
            source_paths=load_variant(row[3], default=[]),
            copied_paths=load_variant(row[4], default=[]),
            deleted_paths=load_variant(row[5], default=[]),
            status=RenameStatus(row[6]),
            error=row[7],
            created_at=int(row[8]),
            updated_at=int(row[9]),
        )
