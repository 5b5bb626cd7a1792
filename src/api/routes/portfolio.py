"""
Public portfolio endpoints.

Read-only views of the media library for the public gallery and video
pages. Both return an empty list rather than an error when storage is
unavailable, so the pages degrade to their empty states.
"""

from fastapi import APIRouter

from ..dependencies import PortfolioServiceDep
from ..schemas import CamelModel

router = APIRouter()


class ImageItem(CamelModel):
    id: str
    src: str
    category: str


class VideoItem(CamelModel):
    id: str
    title: str
    video_url: str
    thumbnail: str
    duration: str


@router.get("/images", response_model=list[ImageItem], summary="Portfolio images")
async def portfolio_images(portfolio: PortfolioServiceDep) -> list[ImageItem]:
    return [
        ImageItem(id=image.id, src=image.src, category=image.category)
        for image in await portfolio.list_images()
    ]


@router.get("/videos", response_model=list[VideoItem], summary="Portfolio videos")
async def portfolio_videos(portfolio: PortfolioServiceDep) -> list[VideoItem]:
    return [
        VideoItem(
            id=video.id,
            title=video.title,
            video_url=video.video_url,
            thumbnail=video.thumbnail,
            duration=video.duration,
        )
        for video in await portfolio.list_videos()
    ]
