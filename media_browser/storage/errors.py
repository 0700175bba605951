"""Failure kinds raised by the storage layer.

Routers map each one to a distinct status code, so they must stay separate:
    PathTraversalError       -> 400
    MediaNotFoundError       -> 404
    RangeNotSatisfiableError -> 416 with ``Content-Range: bytes */<length>``
Any other ``OSError`` is an unexpected I/O failure (500).
"""

from __future__ import annotations


class MediaBrowserError(Exception):
    """Base class for expected, client-attributable failures."""


class PathTraversalError(MediaBrowserError):
    """The requested path resolves outside the configured root."""

    def __init__(self, raw_path: str | None, message: str = "Invalid path"):
        super().__init__(message)
        self.raw_path = raw_path


class MediaNotFoundError(MediaBrowserError, FileNotFoundError):
    """The requested directory or file does not exist (or is not servable media)."""


class RangeNotSatisfiableError(MediaBrowserError):
    """The requested byte range lies outside the file."""

    def __init__(self, length: int):
        super().__init__(f"Range not satisfiable for length {length}")
        self.length = length

    @property
    def content_range(self) -> str:
        return f"bytes */{self.length}"
