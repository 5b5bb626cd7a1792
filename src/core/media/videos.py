"""
Video admin workflow.

Videos live under the video root, either directly or one folder deep.
Display names come from the file name unless the overlay has a record
for the video's path.
"""

import logging
from typing import Optional

from .models import DisplayNameRecord, DisplayNameType, Video
from .naming import (
    file_name,
    is_video,
    join_path,
    now_ms,
    overlay_key_for_path,
    video_display_name,
    video_file_name,
)
from .stores import BlobStore, DisplayNameStore, StoredBlob

logger = logging.getLogger(__name__)


class VideoNotFoundError(Exception):
    """Raised when no blob exists at a video path."""
    pass


class VideoService:
    def __init__(
        self,
        storage: BlobStore,
        display_names: DisplayNameStore,
        videos_prefix: str = "videos",
    ) -> None:
        self._storage = storage
        self._display_names = display_names
        self._root = videos_prefix.strip("/")

    async def list_videos(self) -> list[Video]:
        """
        Videos at the root and one folder deep, in listing order.

        Listing failures are logged and reported as an empty list.
        """
        try:
            root = await self._storage.list_folder(self._root)

            videos = [await self._build_video(item) for item in root.items if is_video(item.name)]

            for folder in root.prefixes:
                contents = await self._storage.list_folder(join_path(self._root, folder))
                for item in contents.items:
                    if is_video(item.name):
                        videos.append(await self._build_video(item, folder))

            return videos

        except Exception as e:
            logger.error("Error listing videos", extra={"error": str(e)})
            return []

    async def _build_video(self, item: StoredBlob, folder: Optional[str] = None) -> Video:
        try:
            name = self._display_names.get_display_name(overlay_key_for_path(item.path))
        except Exception as e:
            logger.warning(
                "Display name lookup failed",
                extra={"path": item.path, "error": str(e)}
            )
            name = None

        return Video(
            id=f"{folder}-{item.name}" if folder else item.name,
            name=name or video_display_name(item.name),
            url=await self._storage.get_url(item.path),
            path=item.path,
        )

    async def upload_video(
        self,
        original_name: str,
        data: bytes,
        content_type: Optional[str] = None,
        title: Optional[str] = None,
    ) -> Video:
        name = video_file_name(file_name(original_name), title=title)
        path = join_path(self._root, name)

        await self._storage.upload(path, data, content_type=content_type)

        logger.info("Uploaded video", extra={"path": path, "size_bytes": len(data)})

        return Video(
            id=name,
            name=video_display_name(name),
            url=await self._storage.get_url(path),
            path=path,
        )

    async def rename_video(self, path: str, new_name: str) -> DisplayNameRecord:
        """Set the video's display name. The blob itself is not touched."""
        await self._require_video(path)

        record = DisplayNameRecord(
            key=overlay_key_for_path(path),
            path=path,
            display_name=new_name,
            type=DisplayNameType.VIDEO,
            updated_at=now_ms(),
        )
        self._display_names.upsert(record)

        logger.info("Renamed video", extra={"path": path})

        return record

    async def delete_video(self, path: str) -> None:
        """
        Delete the blob, then its overlay record.

        A leftover overlay record with no blob is cleaned up too, so a
        retried delete finishes the job.
        """
        self._check_under_root(path)
        key = overlay_key_for_path(path)

        blob_existed = await self._storage.exists(path)
        if blob_existed:
            await self._storage.delete(path)

        record_existed = self._display_names.delete(key)

        if not blob_existed and not record_existed:
            raise VideoNotFoundError(f"Video not found: {path}")

        logger.info(
            "Deleted video",
            extra={"path": path, "had_display_name": record_existed}
        )

    def _check_under_root(self, path: str) -> None:
        if not path.startswith(f"{self._root}/") or ".." in path.split("/"):
            raise VideoNotFoundError(f"Video not found: {path}")

    async def _require_video(self, path: str) -> None:
        self._check_under_root(path)
        if not await self._storage.exists(path):
            raise VideoNotFoundError(f"Video not found: {path}")
