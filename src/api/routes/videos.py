"""
Video admin endpoints.

Video paths contain slashes, so they travel in the body or query string
rather than the URL path.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status
from pydantic import Field

from ...core.media.videos import VideoNotFoundError
from ...infrastructure.storage.client import StorageError
from ..dependencies import VideoServiceDep
from ..schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class VideoItem(CamelModel):
    id: str
    name: str
    url: str
    path: str


class RenameVideoRequest(CamelModel):
    path: str = Field(description="Full storage path of the video")
    new_name: str = Field(min_length=1)


class RenameVideoResponse(CamelModel):
    path: str
    display_name: str
    updated_at: int


@router.get("", response_model=list[VideoItem], summary="List videos")
async def list_videos(videos: VideoServiceDep) -> list[VideoItem]:
    return [
        VideoItem(id=v.id, name=v.name, url=v.url, path=v.path)
        for v in await videos.list_videos()
    ]


@router.post(
    "",
    response_model=VideoItem,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a video",
)
async def upload_video(
    videos: VideoServiceDep,
    file: UploadFile = File(..., description="Video file"),
    title: Annotated[Optional[str], Form()] = None,
) -> VideoItem:
    data = await file.read()

    try:
        video = await videos.upload_video(
            original_name=file.filename or "upload",
            data=data,
            content_type=file.content_type,
            title=title or None,
        )
    except StorageError as e:
        logger.error("Failed to upload video", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload video",
        )

    return VideoItem(id=video.id, name=video.name, url=video.url, path=video.path)


@router.put(
    "/display-name",
    response_model=RenameVideoResponse,
    summary="Rename a video",
    description="Changes only the name shown; the file keeps its path and URL.",
)
async def rename_video(
    request: RenameVideoRequest,
    videos: VideoServiceDep,
) -> RenameVideoResponse:
    try:
        record = await videos.rename_video(request.path, request.new_name)
    except VideoNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return RenameVideoResponse(
        path=request.path,
        display_name=record.display_name,
        updated_at=record.updated_at,
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a video")
async def delete_video(
    videos: VideoServiceDep,
    path: str = Query(..., description="Full storage path of the video"),
) -> None:
    try:
        await videos.delete_video(path)
    except VideoNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageError as e:
        logger.error("Failed to delete video", extra={"path": path, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete video",
        )
