"""
Domain models for the portfolio media library.

These models represent galleries, photos, videos and the display-name
overlay. They have no dependencies on FastAPI, R2 or Snowflake, so the
admin workflows can be exercised against in-memory fakes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from uuid import uuid4


class DisplayNameType(Enum):
    """What a display-name record renames."""
    VIDEO = "video"
    GALLERY = "gallery"


@dataclass
class Gallery:
    """
    A photo gallery, backed by one folder under the photo root.

    The id is the folder name (slug). created_at is wall-clock time at
    read time in milliseconds; the object store keeps no folder metadata.
    """
    id: str
    name: str
    created_at: int
    cover_image: Optional[str] = None


@dataclass
class GalleryPhoto:
    """A single image blob inside a gallery folder."""
    path: str
    name: str
    url: str


@dataclass
class Video:
    """A video blob under the video root, with its resolved display name."""
    id: str
    name: str
    url: str
    path: str


@dataclass
class PortfolioImage:
    """An image as shown on the public gallery page."""
    id: str
    src: str
    category: str


@dataclass
class PortfolioVideo:
    """A video as shown on the public video reel."""
    id: str
    title: str
    video_url: str
    thumbnail: str
    duration: str = "0:00"


@dataclass
class DisplayNameRecord:
    """
    One entry of the display-name overlay.

    Video records carry the full storage path; gallery records carry the
    gallery id. updated_at is milliseconds since the epoch.
    """
    key: str
    display_name: str
    type: DisplayNameType
    updated_at: int
    path: Optional[str] = None
    gallery_id: Optional[str] = None


class RenameStatus(Enum):
    """
    Lifecycle of a gallery rename.

    PENDING: copying originals into the new folder
    COPIED: every original has a copy; deleting originals
    COMPLETED: originals gone, rename done
    ROLLED_BACK: copies removed, gallery untouched
    FAILED: compensation failed, needs resume or rollback by an operator
    """
    PENDING = "pending"
    COPIED = "copied"
    COMPLETED = "completed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"

    @property
    def is_open(self) -> bool:
        return self in (RenameStatus.PENDING, RenameStatus.COPIED, RenameStatus.FAILED)


@dataclass
class GalleryRenameIntent:
    """
    Persisted record of a gallery rename in flight.

    The copy and delete phases append to copied_paths and deleted_paths as
    they go, so an interrupted rename can be resumed or rolled back from
    exactly where it stopped.
    """
    old_slug: str
    new_slug: str
    source_paths: list[str]
    created_at: int
    updated_at: int
    id: str = field(default_factory=lambda: uuid4().hex)
    copied_paths: list[str] = field(default_factory=list)
    deleted_paths: list[str] = field(default_factory=list)
    status: RenameStatus = RenameStatus.PENDING
    error: Optional[str] = None

    @property
    def remaining_copies(self) -> list[str]:
        copied_names = {path.rsplit("/", 1)[-1] for path in self.copied_paths}
        return [p for p in self.source_paths if p.rsplit("/", 1)[-1] not in copied_names]

    @property
    def remaining_deletes(self) -> list[str]:
        deleted = set(self.deleted_paths)
        return [p for p in self.source_paths if p not in deleted]
