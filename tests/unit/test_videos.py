"""Unit tests for the video workflow and the public portfolio views."""

import asyncio

import pytest

from src.core.media.portfolio import PortfolioService
from src.core.media.videos import VideoNotFoundError, VideoService


@pytest.fixture
def videos(storage, display_names) -> VideoService:
    return VideoService(storage, display_names)


def seed(storage, *paths):
    for path in paths:
        asyncio.run(storage.upload(path, b"x"))


class TestListVideos:

    def test_root_and_one_level_deep(self, videos, storage):
        seed(
            storage,
            "videos/My_Reel.mp4",
            "videos/notes.txt",
            "videos/weddings/first_dance.MOV",
            "videos/weddings/deeper/skipped.mp4",
        )

        listed = asyncio.run(videos.list_videos())

        assert [(v.id, v.name, v.path) for v in listed] == [
            ("My_Reel.mp4", "My Reel", "videos/My_Reel.mp4"),
            ("weddings-first_dance.MOV", "first dance", "videos/weddings/first_dance.MOV"),
        ]
        assert listed[0].url == "mock://storage/videos/My_Reel.mp4"

    def test_empty_when_no_videos(self, videos):
        assert asyncio.run(videos.list_videos()) == []


class TestUploadVideo:

    def test_upload_with_title(self, videos, storage):
        video = asyncio.run(videos.upload_video("raw.mp4", b"data", "video/mp4", title="Summer Reel"))

        assert video.path.startswith("videos/Summer_Reel_")
        assert video.path.endswith(".mp4")
        assert storage.content_type(video.path) == "video/mp4"

    def test_upload_without_title(self, videos):
        video = asyncio.run(videos.upload_video("raw.mp4", b"data"))

        prefix, original = video.id.split("_", 1)
        assert prefix.isdigit()
        assert original == "raw.mp4"


class TestRenameVideo:

    def test_rename_changes_only_display_name(self, videos, storage):
        seed(storage, "videos/My_Reel.mp4")
        [before] = asyncio.run(videos.list_videos())

        asyncio.run(videos.rename_video("videos/My_Reel.mp4", "Showreel 2024"))

        [after] = asyncio.run(videos.list_videos())
        assert after.name == "Showreel 2024"
        assert after.url == before.url
        assert after.path == before.path
        assert storage.paths() == ["videos/My_Reel.mp4"]

    def test_rename_missing_video(self, videos, display_names):
        with pytest.raises(VideoNotFoundError):
            asyncio.run(videos.rename_video("videos/ghost.mp4", "Ghost"))

        assert display_names.get("videos_ghost-mp4") is None

    def test_rename_outside_video_root(self, videos, storage):
        seed(storage, "photos/a/b.jpg")

        with pytest.raises(VideoNotFoundError):
            asyncio.run(videos.rename_video("photos/a/b.jpg", "Nope"))


class TestDeleteVideo:

    def test_delete_removes_blob_and_display_name(self, videos, storage, display_names):
        seed(storage, "videos/weddings/first_dance.mp4")
        asyncio.run(videos.rename_video("videos/weddings/first_dance.mp4", "First Dance"))

        asyncio.run(videos.delete_video("videos/weddings/first_dance.mp4"))

        assert storage.paths() == []
        assert display_names.get("videos_weddings_first_dance-mp4") is None

    def test_delete_cleans_up_orphaned_display_name(self, videos, storage, display_names):
        seed(storage, "videos/a.mp4")
        asyncio.run(videos.rename_video("videos/a.mp4", "A"))
        asyncio.run(storage.delete("videos/a.mp4"))

        asyncio.run(videos.delete_video("videos/a.mp4"))

        assert display_names.get("videos_a-mp4") is None

    def test_delete_missing_video(self, videos):
        with pytest.raises(VideoNotFoundError):
            asyncio.run(videos.delete_video("videos/ghost.mp4"))


class TestPortfolio:

    def test_images_with_categories(self, storage, videos):
        seed(
            storage,
            "photos/hero.jpg",
            "photos/wedding/.placeholder",
            "photos/wedding/1_a.jpg",
        )
        portfolio = PortfolioService(storage, videos)

        images = asyncio.run(portfolio.list_images())

        assert [(i.id, i.category) for i in images] == [
            ("hero.jpg", "General"),
            ("wedding-1_a.jpg", "Wedding"),
        ]
        assert images[1].src == "mock://storage/photos/wedding/1_a.jpg"

    def test_videos_use_overlay_titles(self, storage, videos):
        seed(storage, "videos/My_Reel.mp4")
        asyncio.run(videos.rename_video("videos/My_Reel.mp4", "Showreel"))
        portfolio = PortfolioService(storage, videos)

        [video] = asyncio.run(portfolio.list_videos())

        assert video.title == "Showreel"
        assert video.video_url == video.thumbnail == "mock://storage/videos/My_Reel.mp4"
        assert video.duration == "0:00"
