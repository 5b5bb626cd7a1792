"""
Object storage client for portfolio media.

Supports Cloudflare R2 (S3-compatible) with mock mode for local development.
Paths are hierarchical keys such as photos/<gallery>/<file> and
videos/<file>; "folders" exist only as shared key prefixes.

Mock mode stores blobs in memory, enabling API testing without
provisioning actual object storage.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """
    Configuration for R2/S3-compatible storage.

    public_base_url is the bucket's public domain. Without it, object URLs
    are presigned and expire after presigned_url_ttl_seconds.
    """
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "auto"  # R2 uses 'auto' for region
    public_base_url: Optional[str] = None
    presigned_url_ttl_seconds: int = 3600


@dataclass(frozen=True)
class StoredObject:
    """A blob found by a listing."""
    path: str
    size: int = 0

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class ListResult:
    """
    One level of a folder listing.

    items are the files directly inside the folder, in key order.
    prefixes are the names of the direct sub-folders.
    """
    items: list[StoredObject] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Using a protocol means tests can provide mocks and we can
    swap storage backends without changing dependent code.
    """

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """Write data at path and return the path."""
        ...

    async def download(self, path: str) -> bytes:
        """Read the blob at path."""
        ...

    async def delete(self, path: str) -> None:
        """Remove the blob at path."""
        ...

    async def list_folder(self, prefix: str) -> ListResult:
        """List the files and sub-folders directly under prefix."""
        ...

    async def exists(self, path: str) -> bool:
        """Whether a blob exists at path."""
        ...

    async def get_url(self, path: str) -> str:
        """URL a browser can load the blob from."""
        ...


def _folder_prefix(prefix: str) -> str:
    prefix = prefix.strip("/")
    return f"{prefix}/" if prefix else ""


class R2StorageClient:
    """
    Cloudflare R2 object storage client.

    Uses boto3 because R2 is S3-compatible. This abstraction means
    we could swap to actual S3, MinIO, or other S3-compatible storage
    with minimal changes.

    All methods are async to match the Protocol even though boto3 is
    synchronous.
    """

    def __init__(self, config: StorageConfig) -> None:
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for R2 storage. Install with: pip install boto3"
            )

        self._config = config

        # R2 requires v4 signatures and path-style addressing
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized R2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        extra_args = {'ContentType': content_type} if content_type else {}

        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=path,
                Body=data,
                **extra_args,
            )

            logger.debug(
                "Uploaded object",
                extra={"path": path, "size_bytes": len(data)}
            )

            return path

        except Exception as e:
            logger.error(
                "Failed to upload object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}")

    async def download(self, path: str) -> bytes:
        try:
            response = self._s3_client.get_object(
                Bucket=self._config.bucket_name,
                Key=path,
            )

            return response['Body'].read()

        except Exception as e:
            logger.error(
                "Failed to download object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Download failed: {e}")

    async def delete(self, path: str) -> None:
        try:
            self._s3_client.delete_object(
                Bucket=self._config.bucket_name,
                Key=path,
            )

            logger.info("Deleted object", extra={"path": path})

        except Exception as e:
            logger.error(
                "Failed to delete object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Delete failed: {e}")

    async def list_folder(self, prefix: str) -> ListResult:
        """
        List one level under prefix.

        Uses the "/" delimiter so nested keys come back as CommonPrefixes
        instead of items. S3 returns keys in lexical order, which callers
        rely on when picking a gallery cover.
        """
        folder = _folder_prefix(prefix)
        result = ListResult()

        try:
            paginator = self._s3_client.get_paginator('list_objects_v2')
            pages = paginator.paginate(
                Bucket=self._config.bucket_name,
                Prefix=folder,
                Delimiter='/',
            )

            for page in pages:
                for obj in page.get('Contents', []):
                    key = obj.get('Key')
                    # Some tools write a zero-byte "folder" key ending in "/"
                    if not key or key == folder or key.endswith('/'):
                        continue
                    result.items.append(StoredObject(path=key, size=obj.get('Size', 0)))

                for common in page.get('CommonPrefixes', []):
                    name = common['Prefix'][len(folder):].strip('/')
                    if name:
                        result.prefixes.append(name)

            return result

        except Exception as e:
            logger.error(
                "Failed to list objects",
                extra={"prefix": folder, "error": str(e)}
            )
            raise StorageError(f"List failed: {e}")

    async def exists(self, path: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            self._s3_client.head_object(
                Bucket=self._config.bucket_name,
                Key=path,
            )
            return True

        except ClientError as e:
            code = e.response.get('Error', {}).get('Code')
            if code in ('404', 'NoSuchKey', 'NotFound'):
                return False
            logger.error(
                "Failed to check object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Head failed: {e}")

        except Exception as e:
            logger.error(
                "Failed to check object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Head failed: {e}")

    async def get_url(self, path: str) -> str:
        """
        URL for displaying a blob.

        A public bucket domain gives stable URLs. Otherwise fall back to a
        presigned GET URL, which expires.
        """
        if self._config.public_base_url:
            return f"{self._config.public_base_url.rstrip('/')}/{quote(path)}"

        try:
            return self._s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self._config.bucket_name,
                    'Key': path,
                },
                ExpiresIn=self._config.presigned_url_ttl_seconds,
            )

        except Exception as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Presigned URL generation failed: {e}")


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development.

    Blobs live in a dictionary keyed by path and "URLs" are mock URIs.
    Listing mimics S3's delimiter behavior, including lexical key order.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self) -> None:
        self._objects: dict[str, bytes] = {}
        self._content_types: dict[str, Optional[str]] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        self._objects[path] = data
        self._content_types[path] = content_type

        logger.debug(
            "Stored object in mock storage",
            extra={"path": path, "size_bytes": len(data)}
        )

        return path

    async def download(self, path: str) -> bytes:
        if path not in self._objects:
            raise StorageError(f"Object not found: {path}")

        return self._objects[path]

    async def delete(self, path: str) -> None:
        if path not in self._objects:
            raise StorageError(f"Object not found: {path}")

        del self._objects[path]
        self._content_types.pop(path, None)

    async def list_folder(self, prefix: str) -> ListResult:
        folder = _folder_prefix(prefix)
        result = ListResult()
        seen_prefixes: set[str] = set()

        for key in sorted(self._objects):
            if not key.startswith(folder):
                continue
            remainder = key[len(folder):]
            if "/" in remainder:
                child = remainder.split("/", 1)[0]
                if child and child not in seen_prefixes:
                    seen_prefixes.add(child)
                    result.prefixes.append(child)
            else:
                result.items.append(StoredObject(path=key, size=len(self._objects[key])))

        return result

    async def exists(self, path: str) -> bool:
        return path in self._objects

    async def get_url(self, path: str) -> str:
        if path not in self._objects:
            raise StorageError(f"Object not found: {path}")

        return f"mock://storage/{path}"

    def content_type(self, path: str) -> Optional[str]:
        """Content type recorded at upload (for test assertions)."""
        return self._content_types.get(path)

    def paths(self) -> list[str]:
        """All stored paths in key order (for test assertions)."""
        return sorted(self._objects)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (R2 or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return R2StorageClient(config)
