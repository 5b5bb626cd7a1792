"""
Unit tests for media naming rules.

These are pure functions; no storage or database involved.
"""

import pytest

from src.core.media.naming import (
    file_name,
    gallery_display_name,
    gallery_slug,
    is_image,
    is_video,
    join_path,
    overlay_key_for_gallery,
    overlay_key_for_path,
    photo_file_name,
    video_display_name,
    video_file_name,
)


class TestGalleryNames:

    def test_slug_lowercases_and_joins_words(self):
        assert gallery_slug("Wedding 2024") == "wedding_2024"

    def test_slug_trims_and_collapses_whitespace(self):
        assert gallery_slug("  Summer   Shoot\tLA ") == "summer_shoot_la"

    def test_blank_name_gives_empty_slug(self):
        assert gallery_slug("   ") == ""

    def test_default_display_name_restores_spaces(self):
        assert gallery_display_name(gallery_slug("Wedding 2024")) == "wedding 2024"

    def test_overlay_key(self):
        assert overlay_key_for_gallery("wedding_2024") == "gallery_wedding_2024"


class TestVideoNames:

    def test_display_name_strips_extension_and_underscores(self):
        assert video_display_name("My_Reel_1718000000000.mp4") == "My Reel 1718000000000"

    def test_display_name_strips_only_last_extension(self):
        assert video_display_name("clip.final.mov") == "clip.final"

    def test_file_name_with_title(self):
        name = video_file_name("raw footage.MP4", title="My  Reel", timestamp_ms=1718000000000)
        assert name == "My_Reel_1718000000000.MP4"

    def test_file_name_without_title(self):
        name = video_file_name("reel.mp4", timestamp_ms=1718000000000)
        assert name == "1718000000000_reel.mp4"

    def test_file_name_with_title_and_no_extension(self):
        name = video_file_name("reel", title="Reel", timestamp_ms=5)
        assert name == "Reel_5.reel"


class TestPaths:

    def test_photo_file_name_prefixes_timestamp(self):
        assert photo_file_name("IMG_1.jpg", timestamp_ms=42) == "42_IMG_1.jpg"

    def test_overlay_key_sanitizes_path(self):
        assert overlay_key_for_path("videos/a/b.mp4") == "videos_a_b-mp4"

    def test_join_path_ignores_extra_slashes(self):
        assert join_path("photos/", "/wedding", "a.jpg") == "photos/wedding/a.jpg"

    def test_join_path_skips_empty_parts(self):
        assert join_path("", "videos", "") == "videos"

    def test_file_name(self):
        assert file_name("photos/wedding/a.jpg") == "a.jpg"
        assert file_name("a.jpg") == "a.jpg"


@pytest.mark.parametrize("name,expected", [
    ("a.jpg", True),
    ("a.JPEG", True),
    ("a.webp", True),
    ("a.mp4", False),
    (".placeholder", False),
])
def test_is_image(name, expected):
    assert is_image(name) is expected


@pytest.mark.parametrize("name,expected", [
    ("a.mp4", True),
    ("a.MOV", True),
    ("a.avi", True),
    ("a.mkv", False),
    ("a.jpg", False),
])
def test_is_video(name, expected):
    assert is_video(name) is expected
