"""
Public portfolio content.

The public pages show every image under the photo root (root files and
one folder deep) and the same videos the admin sees, shaped for display.
"""

import logging

from .models import PortfolioImage, PortfolioVideo
from .naming import is_image, join_path
from .stores import BlobStore
from .videos import VideoService

logger = logging.getLogger(__name__)

GENERAL_CATEGORY = "General"


def category_for_folder(folder: str) -> str:
    return folder[:1].upper() + folder[1:]


class PortfolioService:
    def __init__(
        self,
        storage: BlobStore,
        videos: VideoService,
        photos_prefix: str = "photos",
    ) -> None:
        self._storage = storage
        self._videos = videos
        self._root = photos_prefix.strip("/")

    async def list_images(self) -> list[PortfolioImage]:
        """Images for the public gallery. Failures give an empty list."""
        try:
            root = await self._storage.list_folder(self._root)

            images = []
            for item in root.items:
                if is_image(item.name):
                    images.append(PortfolioImage(
                        id=item.name,
                        src=await self._storage.get_url(item.path),
                        category=GENERAL_CATEGORY,
                    ))

            for folder in root.prefixes:
                contents = await self._storage.list_folder(join_path(self._root, folder))
                for item in contents.items:
                    if is_image(item.name):
                        images.append(PortfolioImage(
                            id=f"{folder}-{item.name}",
                            src=await self._storage.get_url(item.path),
                            category=category_for_folder(folder),
                        ))

            return images

        except Exception as e:
            logger.error("Error fetching portfolio images", extra={"error": str(e)})
            return []

    async def list_videos(self) -> list[PortfolioVideo]:
        """Videos for the public reel; the video itself doubles as thumbnail."""
        return [
            PortfolioVideo(
                id=video.id,
                title=video.name,
                video_url=video.url,
                thumbnail=video.url,
            )
            for video in await self._videos.list_videos()
        ]
