"""
Gallery admin endpoints.

Galleries are folders under the photo root. These endpoints back the
admin gallery manager: list, create, upload, rename in the overlay, and
the folder rename saga with its repair operations.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pydantic import Field

from ...core.media.galleries import (
    GalleryNotFoundError,
    GalleryRenameConflictError,
    GalleryRenameError,
    GalleryRenameStateError,
    InvalidGalleryNameError,
    PhotoUpload,
)
from ...core.media.models import GalleryRenameIntent
from ...infrastructure.snowflake.repositories import RenameIntentNotFoundError
from ...infrastructure.storage.client import StorageError
from ..dependencies import GalleryServiceDep
from ..schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class GalleryItem(CamelModel):
    id: str
    name: str
    cover_image: str | None = None
    created_at: int = Field(description="Milliseconds since the epoch, at read time")


class CreateGalleryRequest(CamelModel):
    name: str = Field(min_length=1, description="Gallery name; the folder slug is derived from it")


class PhotoItem(CamelModel):
    path: str
    name: str
    url: str


class DisplayNameRequest(CamelModel):
    display_name: str = Field(min_length=1)


class DisplayNameResponse(CamelModel):
    key: str
    display_name: str
    updated_at: int


class RenameGalleryRequest(CamelModel):
    new_name: str = Field(min_length=1)


class RenameItem(CamelModel):
    id: str
    old_slug: str
    new_slug: str
    status: str
    total: int
    copied: int
    deleted: int
    error: str | None = None
    created_at: int
    updated_at: int


class RenameGalleryResponse(CamelModel):
    renamed: bool
    gallery_id: str
    rename: RenameItem | None = None


def _rename_item(intent: GalleryRenameIntent) -> RenameItem:
    return RenameItem(
        id=intent.id,
        old_slug=intent.old_slug,
        new_slug=intent.new_slug,
        status=intent.status.value,
        total=len(intent.source_paths),
        copied=len(intent.copied_paths),
        deleted=len(intent.deleted_paths),
        error=intent.error,
        created_at=intent.created_at,
        updated_at=intent.updated_at,
    )


def _rename_failed(e: GalleryRenameError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "Failed to rename gallery",
            "rename": _rename_item(e.intent).model_dump(by_alias=True),
        },
    )


# ---------------------------------------------------------------------------
# Galleries
# ---------------------------------------------------------------------------

@router.get("", response_model=list[GalleryItem], summary="List galleries")
async def list_galleries(galleries: GalleryServiceDep) -> list[GalleryItem]:
    return [
        GalleryItem(
            id=gallery.id,
            name=gallery.name,
            cover_image=gallery.cover_image,
            created_at=gallery.created_at,
        )
        for gallery in await galleries.list_galleries()
    ]


@router.post(
    "",
    response_model=GalleryItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create an empty gallery",
)
async def create_gallery(
    request: CreateGalleryRequest,
    galleries: GalleryServiceDep,
) -> GalleryItem:
    try:
        gallery = await galleries.create_gallery(request.name)
    except InvalidGalleryNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        logger.error("Failed to create gallery", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create gallery",
        )

    return GalleryItem(id=gallery.id, name=gallery.name, created_at=gallery.created_at)


@router.get("/{gallery_id}/photos", response_model=list[PhotoItem], summary="List photos")
async def list_photos(gallery_id: str, galleries: GalleryServiceDep) -> list[PhotoItem]:
    try:
        photos = await galleries.list_photos(gallery_id)
    except InvalidGalleryNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        logger.error("Failed to list photos", extra={"gallery_id": gallery_id, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list photos",
        )

    return [PhotoItem(path=p.path, name=p.name, url=p.url) for p in photos]


@router.post(
    "/{gallery_id}/photos",
    response_model=list[PhotoItem],
    status_code=status.HTTP_201_CREATED,
    summary="Upload photos",
)
async def upload_photos(
    gallery_id: str,
    galleries: GalleryServiceDep,
    files: list[UploadFile] = File(..., description="Image files"),
) -> list[PhotoItem]:
    uploads = [
        PhotoUpload(
            file_name=f.filename or "upload",
            data=await f.read(),
            content_type=f.content_type,
        )
        for f in files
    ]

    try:
        photos = await galleries.upload_photos(gallery_id, uploads)
    except InvalidGalleryNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        logger.error("Failed to upload photos", extra={"gallery_id": gallery_id, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload photos",
        )

    return [PhotoItem(path=p.path, name=p.name, url=p.url) for p in photos]


@router.put(
    "/{gallery_id}/display-name",
    response_model=DisplayNameResponse,
    summary="Set a gallery's display name",
    description="Changes only the name shown; the folder and photo paths are unchanged.",
)
async def set_display_name(
    gallery_id: str,
    request: DisplayNameRequest,
    galleries: GalleryServiceDep,
) -> DisplayNameResponse:
    try:
        record = galleries.set_display_name(gallery_id, request.display_name)
    except InvalidGalleryNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return DisplayNameResponse(
        key=record.key,
        display_name=record.display_name,
        updated_at=record.updated_at,
    )


# ---------------------------------------------------------------------------
# Folder rename
# ---------------------------------------------------------------------------

@router.post(
    "/{gallery_id}/rename",
    response_model=RenameGalleryResponse,
    summary="Move a gallery to a new folder",
    description="Copies every photo to the folder derived from the new name, then deletes the originals.",
)
async def rename_gallery(
    gallery_id: str,
    request: RenameGalleryRequest,
    galleries: GalleryServiceDep,
) -> RenameGalleryResponse:
    try:
        intent = await galleries.rename_gallery(gallery_id, request.new_name)
    except InvalidGalleryNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GalleryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GalleryRenameConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except GalleryRenameError as e:
        raise _rename_failed(e)
    except StorageError as e:
        # Listing failed before any intent was recorded
        logger.error("Failed to rename gallery", extra={"gallery_id": gallery_id, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to rename gallery",
        )

    if intent is None:
        return RenameGalleryResponse(renamed=False, gallery_id=gallery_id)

    return RenameGalleryResponse(
        renamed=True,
        gallery_id=intent.new_slug,
        rename=_rename_item(intent),
    )


@router.get("/renames", response_model=list[RenameItem], summary="Unfinished renames")
async def list_open_renames(galleries: GalleryServiceDep) -> list[RenameItem]:
    return [_rename_item(intent) for intent in galleries.list_open_renames()]


@router.post("/renames/{rename_id}/resume", response_model=RenameItem, summary="Resume a rename")
async def resume_rename(rename_id: str, galleries: GalleryServiceDep) -> RenameItem:
    try:
        intent = await galleries.resume_rename(rename_id)
    except RenameIntentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GalleryRenameStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except GalleryRenameError as e:
        raise _rename_failed(e)

    return _rename_item(intent)


@router.post("/renames/{rename_id}/rollback", response_model=RenameItem, summary="Roll back a rename")
async def rollback_rename(rename_id: str, galleries: GalleryServiceDep) -> RenameItem:
    try:
        intent = await galleries.rollback_rename(rename_id)
    except RenameIntentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except GalleryRenameStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except GalleryRenameError as e:
        raise _rename_failed(e)

    return _rename_item(intent)
