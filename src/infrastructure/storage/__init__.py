"""
Object storage integration for photos and videos.

Supports R2 (Cloudflare) and S3 (AWS) via S3-compatible API.
Includes mock mode for local development without credentials.
"""

from .client import (
    ListResult,
    MockStorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    StoredObject,
    create_storage_client,
)

__all__ = [
    "ListResult",
    "MockStorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "StoredObject",
    "create_storage_client",
]
