"""Instagram feed service client."""

from .client import FeedClient, FeedFetchError

__all__ = ["FeedClient", "FeedFetchError"]
