"""Social media mirrors shown on the public site."""

from .instagram import MOCK_POSTS, InstagramPost, normalize_feed

__all__ = [
    "MOCK_POSTS",
    "InstagramPost",
    "normalize_feed",
]
