"""
Unit tests for the Instagram mirror: feed normalization and the
caching HTTP client.
"""

import asyncio
import random

import httpx
import pytest

from src.core.social.instagram import MOCK_POSTS, normalize_feed
from src.infrastructure.instagram.client import FeedClient, FeedFetchError


class TestNormalizeFeed:

    def test_reads_posts_key_and_excludes_videos(self):
        data = {"posts": [
            {"id": "1", "mediaType": "IMAGE", "mediaUrl": "https://cdn/1.jpg", "likes": 5, "comments": 2},
            {"id": "2", "media_type": "VIDEO", "media_url": "https://cdn/2.mp4"},
            {"id": "3", "media_type": "CAROUSEL_ALBUM", "media_url": "https://cdn/3.jpg",
             "like_count": 9, "comments_count": 1},
        ]}

        posts = normalize_feed(data)

        assert [(p.id, p.media_type, p.media_url) for p in posts] == [
            ("1", "IMAGE", "https://cdn/1.jpg"),
            ("3", "CAROUSEL_ALBUM", "https://cdn/3.jpg"),
        ]
        assert (posts[1].likes, posts[1].comments) == (9, 1)

    def test_accepts_top_level_list(self):
        posts = normalize_feed([{"id": "1", "media_url": "u", "likes": 1, "comments": 1}])

        assert posts[0].media_type == "IMAGE"
        assert posts[0].media_url == "u"

    @pytest.mark.parametrize("data", [{"posts": None}, {"other": []}, "nonsense", None])
    def test_unexpected_shapes_give_no_posts(self, data):
        assert normalize_feed(data) == []

    def test_missing_counts_are_filled_in_range(self):
        rng = random.Random(7)
        posts = normalize_feed([{"id": str(i)} for i in range(50)], rng=rng)

        assert all(100 <= p.likes <= 1099 for p in posts)
        assert all(10 <= p.comments <= 59 for p in posts)

    def test_mock_posts(self):
        assert len(MOCK_POSTS) == 6
        assert [p.caption for p in MOCK_POSTS] == [f"Live Post {i}" for i in range(1, 7)]
        assert all(p.media_type == "IMAGE" for p in MOCK_POSTS)


class TestFeedClient:

    def make_client(self, handler, cache_seconds=3600):
        return FeedClient(
            feed_url="https://feeds.example.com/abc",
            cache_seconds=cache_seconds,
            transport=httpx.MockTransport(handler),
        )

    def test_fetch_is_cached(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(200, json={"posts": []})

        client = self.make_client(handler)

        assert asyncio.run(client.fetch()) == {"posts": []}
        assert asyncio.run(client.fetch()) == {"posts": []}
        assert len(calls) == 1

    def test_zero_cache_refetches(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(200, json=[])

        client = self.make_client(handler, cache_seconds=0)
        asyncio.run(client.fetch())
        asyncio.run(client.fetch())

        assert len(calls) == 2

    def test_non_2xx_raises(self):
        client = self.make_client(lambda request: httpx.Response(502, text="bad gateway"))

        with pytest.raises(FeedFetchError):
            asyncio.run(client.fetch())

    def test_bad_json_raises(self):
        client = self.make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(FeedFetchError):
            asyncio.run(client.fetch())

    def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = self.make_client(handler)

        with pytest.raises(FeedFetchError):
            asyncio.run(client.fetch())

    def test_failures_are_not_cached(self):
        responses = [httpx.Response(500), httpx.Response(200, json={"posts": []})]
        client = self.make_client(lambda request: responses.pop(0))

        with pytest.raises(FeedFetchError):
            asyncio.run(client.fetch())
        assert asyncio.run(client.fetch()) == {"posts": []}
