"""
Interfaces the media workflows depend on.

The workflows only need something that stores blobs by path and something
that stores display-name and rename records. Using Protocols here means
they don't know or care whether that's R2 and Snowflake or in-memory
mocks.
"""

from typing import Optional, Protocol, Sequence

from .models import DisplayNameRecord, GalleryRenameIntent


class StoredBlob(Protocol):
    path: str

    @property
    def name(self) -> str: ...


class FolderListing(Protocol):
    """Files directly inside a folder (key order) and its sub-folder names."""
    items: Sequence[StoredBlob]
    prefixes: Sequence[str]


class BlobStore(Protocol):
    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str: ...
    async def download(self, path: str) -> bytes: ...
    async def delete(self, path: str) -> None: ...
    async def list_folder(self, prefix: str) -> FolderListing: ...
    async def exists(self, path: str) -> bool: ...
    async def get_url(self, path: str) -> str: ...


class DisplayNameStore(Protocol):
    def get(self, key: str) -> Optional[DisplayNameRecord]: ...
    def get_display_name(self, key: str) -> Optional[str]: ...
    def upsert(self, record: DisplayNameRecord) -> None: ...
    def delete(self, key: str) -> bool: ...


class RenameIntentStore(Protocol):
    def save(self, intent: GalleryRenameIntent) -> None: ...
    def get(self, intent_id: str) -> GalleryRenameIntent: ...
    def list_open(self) -> list[GalleryRenameIntent]: ...
    def find_open_for_slug(self, slug: str) -> Optional[GalleryRenameIntent]: ...
