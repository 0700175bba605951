"""Static media extension tables and classification helpers.

Example:
    from media_browser.storage.media_types import is_media, mime_type_for
    is_media("clip.MP4")        # True
    mime_type_for("photo.jpg")  # "image/jpeg"
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Dict


DEFAULT_MIME_TYPE = "application/octet-stream"

VIDEO_EXTENSIONS = frozenset({
    ".mp4",
    ".webm",
    ".ogg",
    ".mov",
    ".avi",
    ".mkv",
    ".flv",
    ".wmv",
    ".m4v",
    ".mpg",
    ".mpeg",
})

IMAGE_EXTENSIONS = frozenset({
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".webp",
    ".ico",
    ".tiff",
})

MIME_TYPES: Dict[str, str] = {
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".ogg": "video/ogg",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".flv": "video/x-flv",
    ".wmv": "video/x-ms-wmv",
    ".m4v": "video/x-m4v",
    ".mpg": "video/mpeg",
    ".mpeg": "video/mpeg",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".ico": "image/x-icon",
    ".tiff": "image/tiff",
}


def _extension(name: str | PurePath) -> str:
    return PurePath(name).suffix.lower()


def is_video(name: str | PurePath) -> bool:
    return _extension(name) in VIDEO_EXTENSIONS


def is_image(name: str | PurePath) -> bool:
    return _extension(name) in IMAGE_EXTENSIONS


def is_media(name: str | PurePath) -> bool:
    """Return True for any recognized video or image file name."""

    return is_video(name) or is_image(name)


def mime_type_for(name: str | PurePath) -> str:
    """Look up the MIME type by extension, falling back to a generic binary type."""

    return MIME_TYPES.get(_extension(name), DEFAULT_MIME_TYPE)
