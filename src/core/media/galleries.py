"""
Gallery admin workflow.

A gallery is a folder under the photo root. The object store has no
native folders, so a gallery exists as long as at least one object sits
under its prefix: creating one writes a zero-byte placeholder.

Renaming a gallery means moving every object to a new prefix. That is a
multi-step mutation with no transaction around it, so it runs as a saga:

1. persist an intent record listing every source object
2. copy phase: download + re-upload each object under the new folder,
   recording each copy on the intent
3. move the gallery's display-name record to the new id
4. delete phase: delete each original, recording each delete

A failure in the copy phase is compensated by deleting the copies, which
leaves the gallery exactly as it was. A failure in the delete phase leaves
every photo present in the new folder, so the intent stays "copied" and is
resumed rather than rolled back.
"""

import logging
import mimetypes
from dataclasses import dataclass
from typing import Optional

from .models import (
    DisplayNameRecord,
    DisplayNameType,
    Gallery,
    GalleryPhoto,
    GalleryRenameIntent,
    RenameStatus,
)
from .naming import (
    PLACEHOLDER_NAME,
    file_name,
    gallery_display_name,
    gallery_slug,
    is_image,
    join_path,
    now_ms,
    overlay_key_for_gallery,
    photo_file_name,
)
from .stores import BlobStore, DisplayNameStore, RenameIntentStore

logger = logging.getLogger(__name__)


class GalleryError(Exception):
    """Base class for gallery workflow failures."""
    pass


class InvalidGalleryNameError(GalleryError):
    """Raised when a name doesn't produce a usable folder slug."""
    pass


class GalleryNotFoundError(GalleryError):
    """Raised when a gallery folder holds no objects."""
    pass


class GalleryRenameConflictError(GalleryError):
    """Raised when a rename would collide with another rename or an existing folder."""
    pass


class GalleryRenameStateError(GalleryError):
    """Raised when resume/rollback is asked of a rename in the wrong state."""
    pass


class GalleryRenameError(GalleryError):
    """
    Raised when a rename fails partway.

    The intent carries the state the saga left behind: rolled_back,
    failed (compensation failed too) or copied (resumable).
    """

    def __init__(self, message: str, intent: GalleryRenameIntent) -> None:
        super().__init__(message)
        self.intent = intent


@dataclass
class PhotoUpload:
    """A file received from the admin UI."""
    file_name: str
    data: bytes
    content_type: Optional[str] = None


def _validate_folder_id(gallery_id: str) -> str:
    if not gallery_id or "/" in gallery_id or gallery_id in (".", ".."):
        raise InvalidGalleryNameError(f"Invalid gallery id: {gallery_id!r}")
    return gallery_id


def _slug_for_name(name: str) -> str:
    slug = gallery_slug(name)
    if not slug or "/" in slug or slug in (".", ".."):
        raise InvalidGalleryNameError(f"Invalid gallery name: {name!r}")
    return slug


class GalleryService:
    """
    Gallery operations composed from the blob store and the overlay.

    Stateless apart from its collaborators; create one per request.
    """

    def __init__(
        self,
        storage: BlobStore,
        display_names: DisplayNameStore,
        renames: RenameIntentStore,
        photos_prefix: str = "photos",
    ) -> None:
        self._storage = storage
        self._display_names = display_names
        self._renames = renames
        self._root = photos_prefix.strip("/")

    def _folder(self, gallery_id: str) -> str:
        return join_path(self._root, gallery_id)

    # -----------------------------------------------------------------------
    # Listing
    # -----------------------------------------------------------------------

    async def list_galleries(self) -> list[Gallery]:
        """
        Every folder under the photo root, with its cover image.

        Listing failures are logged and reported as an empty list, so
        callers can't tell "no galleries" from "listing failed".
        """
        try:
            root = await self._storage.list_folder(self._root)

            galleries = []
            for folder in root.prefixes:
                galleries.append(await self._build_gallery(folder))

            return galleries

        except Exception as e:
            logger.error("Error listing galleries", extra={"error": str(e)})
            return []

    async def _build_gallery(self, gallery_id: str) -> Gallery:
        contents = await self._storage.list_folder(self._folder(gallery_id))

        cover_image = None
        first_image = next((item for item in contents.items if is_image(item.name)), None)
        if first_image:
            cover_image = await self._storage.get_url(first_image.path)

        return Gallery(
            id=gallery_id,
            name=self._resolve_name(gallery_id),
            cover_image=cover_image,
            created_at=now_ms(),
        )

    def _resolve_name(self, gallery_id: str) -> str:
        name = gallery_display_name(gallery_id)
        try:
            stored = self._display_names.get_display_name(overlay_key_for_gallery(gallery_id))
        except Exception as e:
            logger.warning(
                "Display name lookup failed",
                extra={"gallery_id": gallery_id, "error": str(e)}
            )
            return name
        return stored or name

    async def list_photos(self, gallery_id: str) -> list[GalleryPhoto]:
        """Photos in one gallery, placeholder excluded."""
        _validate_folder_id(gallery_id)
        contents = await self._storage.list_folder(self._folder(gallery_id))

        photos = []
        for item in contents.items:
            if item.name == PLACEHOLDER_NAME:
                continue
            photos.append(GalleryPhoto(
                path=item.path,
                name=item.name,
                url=await self._storage.get_url(item.path),
            ))
        return photos

    # -----------------------------------------------------------------------
    # Create / upload
    # -----------------------------------------------------------------------

    async def create_gallery(self, name: str) -> Gallery:
        slug = _slug_for_name(name)

        await self._storage.upload(
            join_path(self._folder(slug), PLACEHOLDER_NAME),
            b"",
            content_type="text/plain",
        )

        logger.info("Created gallery", extra={"gallery_id": slug})

        return Gallery(
            id=slug,
            name=self._resolve_name(slug),
            created_at=now_ms(),
        )

    async def upload_photos(
        self,
        gallery_id: str,
        uploads: list[PhotoUpload],
    ) -> list[GalleryPhoto]:
        """
        Store each file under a timestamp-prefixed name.

        No type or size checks beyond what the object store enforces.
        """
        _validate_folder_id(gallery_id)

        photos = []
        for upload in uploads:
            name = photo_file_name(file_name(upload.file_name))
            path = join_path(self._folder(gallery_id), name)

            await self._storage.upload(path, upload.data, content_type=upload.content_type)
            photos.append(GalleryPhoto(
                path=path,
                name=name,
                url=await self._storage.get_url(path),
            ))

        logger.info(
            "Uploaded photos",
            extra={"gallery_id": gallery_id, "count": len(photos)}
        )

        return photos

    def set_display_name(self, gallery_id: str, display_name: str) -> DisplayNameRecord:
        """Rename a gallery in the overlay only; the folder keeps its slug."""
        _validate_folder_id(gallery_id)

        record = DisplayNameRecord(
            key=overlay_key_for_gallery(gallery_id),
            gallery_id=gallery_id,
            display_name=display_name,
            type=DisplayNameType.GALLERY,
            updated_at=now_ms(),
        )
        self._display_names.upsert(record)
        return record

    # -----------------------------------------------------------------------
    # Rename saga
    # -----------------------------------------------------------------------

    async def rename_gallery(self, old_slug: str, new_name: str) -> Optional[GalleryRenameIntent]:
        """
        Move a gallery to the folder derived from new_name.

        Returns the completed intent, or None when the name maps to the
        same folder. Raises GalleryRenameError if the saga stops partway.
        """
        _validate_folder_id(old_slug)
        new_slug = _slug_for_name(new_name)

        if new_slug == old_slug:
            return None

        for slug in (old_slug, new_slug):
            open_intent = self._renames.find_open_for_slug(slug)
            if open_intent:
                raise GalleryRenameConflictError(
                    f"Gallery {slug!r} is part of unfinished rename {open_intent.id}"
                )

        target = await self._storage.list_folder(self._folder(new_slug))
        if target.items or target.prefixes:
            raise GalleryRenameConflictError(f"Gallery {new_slug!r} already exists")

        source = await self._storage.list_folder(self._folder(old_slug))
        if not source.items:
            raise GalleryNotFoundError(f"Gallery {old_slug!r} not found")

        timestamp = now_ms()
        intent = GalleryRenameIntent(
            old_slug=old_slug,
            new_slug=new_slug,
            source_paths=[item.path for item in source.items],
            created_at=timestamp,
            updated_at=timestamp,
        )
        self._renames.save(intent)

        logger.info(
            "Starting gallery rename",
            extra={
                "intent_id": intent.id,
                "old_slug": old_slug,
                "new_slug": new_slug,
                "objects": len(intent.source_paths),
            }
        )

        await self._run(intent)
        return intent

    def list_open_renames(self) -> list[GalleryRenameIntent]:
        return self._renames.list_open()

    async def resume_rename(self, intent_id: str) -> GalleryRenameIntent:
        """Carry an unfinished rename forward from wherever it stopped."""
        intent = self._renames.get(intent_id)

        if not intent.status.is_open:
            raise GalleryRenameStateError(
                f"Rename {intent_id} is {intent.status.value}; nothing to resume"
            )

        if intent.status is RenameStatus.FAILED:
            intent.status = RenameStatus.PENDING

        await self._run(intent)
        return intent

    async def rollback_rename(self, intent_id: str) -> GalleryRenameIntent:
        """
        Undo a rename that hasn't finished copying.

        Once every object is copied, originals may already be deleted, so
        the only way out is forward (resume).
        """
        intent = self._renames.get(intent_id)

        if intent.status not in (RenameStatus.PENDING, RenameStatus.FAILED):
            raise GalleryRenameStateError(
                f"Rename {intent_id} is {intent.status.value}; only pending or failed renames roll back"
            )

        await self._compensate(intent, intent.error or "rolled back by operator")
        if intent.status is not RenameStatus.ROLLED_BACK:
            raise GalleryRenameError("Rollback failed", intent)
        return intent

    async def _run(self, intent: GalleryRenameIntent) -> None:
        if intent.status is RenameStatus.PENDING:
            await self._copy_phase(intent)
        if intent.status is RenameStatus.COPIED:
            await self._delete_phase(intent)

    def _save(self, intent: GalleryRenameIntent) -> None:
        intent.updated_at = now_ms()
        self._renames.save(intent)

    async def _copy_phase(self, intent: GalleryRenameIntent) -> None:
        new_folder = self._folder(intent.new_slug)

        try:
            for source in intent.remaining_copies:
                # Download and re-upload; R2 has no cross-prefix rename
                data = await self._storage.download(source)
                target = join_path(new_folder, file_name(source))
                content_type, _ = mimetypes.guess_type(target)
                await self._storage.upload(target, data, content_type=content_type)

                intent.copied_paths.append(target)
                self._save(intent)

        except Exception as e:
            logger.error(
                "Gallery rename copy failed",
                extra={"intent_id": intent.id, "error": str(e)}
            )
            await self._compensate(intent, str(e))
            raise GalleryRenameError(f"Failed to rename gallery: {e}", intent)

        intent.status = RenameStatus.COPIED
        intent.error = None
        self._save(intent)

    async def _delete_phase(self, intent: GalleryRenameIntent) -> None:
        try:
            self._move_display_name(intent)

            for source in intent.remaining_deletes:
                await self._storage.delete(source)
                intent.deleted_paths.append(source)
                self._save(intent)

        except Exception as e:
            logger.error(
                "Gallery rename delete failed; rename can be resumed",
                extra={"intent_id": intent.id, "error": str(e)}
            )
            intent.error = str(e)
            try:
                self._save(intent)
            except Exception as save_error:
                logger.error(
                    "Failed to record rename error",
                    extra={"intent_id": intent.id, "error": str(save_error)}
                )
            raise GalleryRenameError(f"Failed to rename gallery: {e}", intent)

        intent.status = RenameStatus.COMPLETED
        intent.error = None
        self._save(intent)

        logger.info(
            "Gallery rename completed",
            extra={"intent_id": intent.id, "new_slug": intent.new_slug}
        )

    def _move_display_name(self, intent: GalleryRenameIntent) -> None:
        """Re-key the gallery's overlay record. Idempotent, so resume can repeat it."""
        old_key = overlay_key_for_gallery(intent.old_slug)
        record = self._display_names.get(old_key)
        if record is None:
            return

        self._display_names.upsert(DisplayNameRecord(
            key=overlay_key_for_gallery(intent.new_slug),
            gallery_id=intent.new_slug,
            display_name=record.display_name,
            type=DisplayNameType.GALLERY,
            updated_at=now_ms(),
        ))
        self._display_names.delete(old_key)

    async def _compensate(self, intent: GalleryRenameIntent, error: str) -> None:
        """Delete every copy written so far. Marks the intent rolled_back or failed."""
        try:
            for target in list(intent.copied_paths):
                if await self._storage.exists(target):
                    await self._storage.delete(target)
                intent.copied_paths.remove(target)
            intent.status = RenameStatus.ROLLED_BACK

        except Exception as e:
            logger.error(
                "Gallery rename compensation failed",
                extra={"intent_id": intent.id, "error": str(e)}
            )
            intent.status = RenameStatus.FAILED

        intent.error = error
        try:
            self._save(intent)
        except Exception as e:
            logger.error(
                "Failed to record rename state",
                extra={"intent_id": intent.id, "status": intent.status.value, "error": str(e)}
            )
