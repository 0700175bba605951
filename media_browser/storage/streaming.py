"""Byte-range planning and lazy file streaming for media responses.

Example:
    info = open_media(resolve(root, "clip1.mp4"))
    plan = plan_range(info, parse_range_header("bytes=500-999"))
    body = iter_file_range(info.path, plan.start, plan.length)
    # plan.status_code == 206, plan.headers["Content-Range"] == "bytes 500-999/10000"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Dict

from fastapi.concurrency import run_in_threadpool

from .errors import MediaNotFoundError, RangeNotSatisfiableError
from .media_types import is_media, mime_type_for
from .paths import ResolvedPath, require_file


logger = logging.getLogger("media_browser.streaming")

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_CACHE_MAX_AGE = 31536000
RANGE_SPEC_PATTERN = re.compile(r"^\s*(?P<start>\d*)\s*-\s*(?P<end>\d*)\s*$")


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte offsets; a missing bound is filled in by ``plan_range``."""

    start: int | None = None
    end: int | None = None


@dataclass(frozen=True)
class MediaInfo:
    path: Path
    mime_type: str
    length: int


@dataclass(frozen=True)
class RangePlan:
    status_code: int
    start: int
    length: int
    headers: Dict[str, str] = field(default_factory=dict)


def parse_range_header(value: str | None) -> ByteRange | None:
    """Parse a ``Range`` header into its first byte range.

    Returns None for a missing or malformed header so the caller serves the
    whole file. Ranges after the first are ignored.
    """

    if not value:
        return None
    unit, sep, ranges = value.partition("=")
    if not sep or unit.strip().lower() != "bytes":
        logger.warning("invalid_range_header", extra={"range": value})
        return None
    first = ranges.split(",", 1)[0]
    match = RANGE_SPEC_PATTERN.match(first)
    if not match or not (match.group("start") or match.group("end")):
        logger.warning("invalid_range_header", extra={"range": value})
        return None
    start = int(match.group("start")) if match.group("start") else None
    end = int(match.group("end")) if match.group("end") else None
    return ByteRange(start=start, end=end)


def open_media(resolved: ResolvedPath) -> MediaInfo:
    """Return MIME type and length for a resolved media file."""

    require_file(resolved)
    if not is_media(resolved.name):
        raise MediaNotFoundError(f"Media file not found: {resolved.relative}")
    try:
        stat = resolved.path.stat()
    except FileNotFoundError as exc:
        raise MediaNotFoundError(f"Media file not found: {resolved.relative}") from exc
    return MediaInfo(path=resolved.path, mime_type=mime_type_for(resolved.name), length=stat.st_size)


def _cache_control(max_age: int) -> str:
    return f"public, max-age={max_age}"


def plan_range(
    info: MediaInfo,
    byte_range: ByteRange | None,
    *,
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE,
) -> RangePlan:
    """Work out status, headers and the byte window for a request.

    Raises ``RangeNotSatisfiableError`` when the range starts past the end of
    the file or is inverted.
    """

    length = info.length
    headers = {
        "Accept-Ranges": "bytes",
        "Cache-Control": _cache_control(cache_max_age),
    }
    if byte_range is None:
        headers["Content-Length"] = str(length)
        return RangePlan(status_code=200, start=0, length=length, headers=headers)

    start = byte_range.start if byte_range.start is not None else 0
    end = byte_range.end if byte_range.end is not None else length - 1
    if start > end or start >= length:
        raise RangeNotSatisfiableError(length)
    end = min(end, length - 1)

    span = end - start + 1
    headers["Content-Range"] = f"bytes {start}-{end}/{length}"
    headers["Content-Length"] = str(span)
    return RangePlan(status_code=206, start=start, length=span, headers=headers)


async def iter_file_range(
    path: Path,
    start: int,
    length: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncIterator[bytes]:
    """Yield ``length`` bytes of ``path`` from ``start`` in offset order.

    Blocking reads run in the threadpool. The handle is closed when the
    generator finishes, fails or is cancelled by a client disconnect.
    """

    handle = await run_in_threadpool(open, path, "rb")
    try:
        if start:
            await run_in_threadpool(handle.seek, start)
        remaining = length
        while remaining > 0:
            chunk = await run_in_threadpool(handle.read, min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
    finally:
        handle.close()
