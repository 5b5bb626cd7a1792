"""
Instagram mirror endpoint.

Serves recent image posts for the home page grid. Without a configured
feed URL it serves a fixed set of placeholder posts so the page still
renders in development.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import Field

from ...core.social.instagram import MOCK_POSTS, InstagramPost, normalize_feed
from ...infrastructure.instagram.client import FeedFetchError
from ..dependencies import FeedClientDep
from ..schemas import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class PostItem(CamelModel):
    id: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    permalink: str | None = None
    caption: str | None = None
    likes: int
    comments: int


class FeedResponse(CamelModel):
    posts: list[PostItem] = Field(default_factory=list)
    error: str | None = None
    is_mock: bool | None = None


def _post_item(post: InstagramPost) -> PostItem:
    return PostItem(
        id=str(post.id) if post.id is not None else None,
        media_url=post.media_url,
        media_type=post.media_type,
        permalink=post.permalink,
        caption=post.caption,
        likes=post.likes,
        comments=post.comments,
    )


@router.get(
    "",
    response_model=FeedResponse,
    response_model_exclude_none=True,
    summary="Recent Instagram posts",
)
async def get_instagram_feed(feed: FeedClientDep):
    if feed is None:
        return FeedResponse(
            error="Instagram Feed URL not configured",
            is_mock=True,
            posts=[_post_item(post) for post in MOCK_POSTS],
        )

    try:
        data = await feed.fetch()
    except FeedFetchError as e:
        logger.error("IG fetch error", extra={"error": str(e)})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch Instagram feed", "isMock": True},
        )

    return FeedResponse(posts=[_post_item(post) for post in normalize_feed(data)])
