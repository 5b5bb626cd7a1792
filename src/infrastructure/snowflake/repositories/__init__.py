"""
Repository pattern implementations for Snowflake.

Repositories translate between domain models and database representations.
"""

from .base import SnowflakeConfig, SnowflakeConnection, ensure_schema
from .display_names import DisplayNameRepository
from .gallery_renames import GalleryRenameRepository, RenameIntentNotFoundError
from .messages import MessageNotFoundError, MessageRepository

__all__ = [
    "DisplayNameRepository",
    "GalleryRenameRepository",
    "MessageNotFoundError",
    "MessageRepository",
    "RenameIntentNotFoundError",
    "SnowflakeConfig",
    "SnowflakeConnection",
    "ensure_schema",
]
