"""
Portfolio media library.

Galleries, photos and videos stored as blobs, plus the display-name
overlay that lets the admin rename things without moving them.
"""

from .models import (
    DisplayNameRecord,
    DisplayNameType,
    Gallery,
    GalleryPhoto,
    GalleryRenameIntent,
    PortfolioImage,
    PortfolioVideo,
    RenameStatus,
    Video,
)
from .galleries import (
    GalleryError,
    GalleryNotFoundError,
    GalleryRenameConflictError,
    GalleryRenameError,
    GalleryRenameStateError,
    GalleryService,
    InvalidGalleryNameError,
    PhotoUpload,
)
from .portfolio import PortfolioService
from .videos import VideoNotFoundError, VideoService

__all__ = [
    "DisplayNameRecord",
    "DisplayNameType",
    "Gallery",
    "GalleryPhoto",
    "GalleryRenameIntent",
    "PortfolioImage",
    "PortfolioVideo",
    "RenameStatus",
    "Video",
    "GalleryError",
    "GalleryNotFoundError",
    "GalleryRenameConflictError",
    "GalleryRenameError",
    "GalleryRenameStateError",
    "GalleryService",
    "InvalidGalleryNameError",
    "PhotoUpload",
    "PortfolioService",
    "VideoNotFoundError",
    "VideoService",
]
