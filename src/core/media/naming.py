"""
Naming rules for media paths and display names.

Every path the admin workflows write, and every name they show, is derived
here so the rules live in one place:

- gallery slugs:   "Wedding 2024"        -> "wedding_2024"
- photo names:     "IMG_1.jpg"           -> "1718000000000_IMG_1.jpg"
- video names:     title "My Reel"       -> "My_Reel_1718000000000.mp4"
- overlay keys:    "videos/a/b.mp4"      -> "videos_a_b-mp4"
"""

import re
import time
from typing import Optional

IMAGE_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)
VIDEO_PATTERN = re.compile(r"\.(mp4|webm|mov|avi)$", re.IGNORECASE)

PLACEHOLDER_NAME = ".placeholder"

_WHITESPACE = re.compile(r"\s+")


def now_ms() -> int:
    """Wall-clock time in milliseconds, the unit used for stored timestamps."""
    return int(time.time() * 1000)


def is_image(name: str) -> bool:
    return bool(IMAGE_PATTERN.search(name))


def is_video(name: str) -> bool:
    return bool(VIDEO_PATTERN.search(name))


def gallery_slug(name: str) -> str:
    """Folder name for a gallery: trimmed, whitespace runs to underscores, lower-cased."""
    return _WHITESPACE.sub("_", name.strip()).lower()


def gallery_display_name(slug: str) -> str:
    """Default display name of a gallery folder."""
    return slug.replace("_", " ")


def video_display_name(file_name: str) -> str:
    """Default display name of a video: last extension stripped, underscores to spaces."""
    stem = re.sub(r"\.[^/.]+$", "", file_name)
    return stem.replace("_", " ")


def overlay_key_for_path(path: str) -> str:
    """Overlay document key for a storage path."""
    return path.replace("/", "_").replace(".", "-")


def overlay_key_for_gallery(gallery_id: str) -> str:
    return f"gallery_{gallery_id}"


def photo_file_name(original_name: str, timestamp_ms: Optional[int] = None) -> str:
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{ts}_{original_name}"


def video_file_name(
    original_name: str,
    title: Optional[str] = None,
    timestamp_ms: Optional[int] = None,
) -> str:
    """
    Blob name for an uploaded video.

    With a title the title is baked into the name and the original name
    contributes only its extension (the text after its last dot, or the
    whole name when there is none).
    """
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    if title:
        extension = original_name.rsplit(".", 1)[-1]
        return f"{_WHITESPACE.sub('_', title)}_{ts}.{extension}"
    return f"{ts}_{original_name}"


def join_path(*parts: str) -> str:
    """Join path segments with single slashes, ignoring empty segments."""
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


def file_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]
