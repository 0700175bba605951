"""Media streaming endpoints with HTTP range support.

Example calls:
    curl -I http://localhost:5000/api/media/stream/clip1.mp4
    curl -H 'Range: bytes=500-999' http://localhost:5000/api/media/stream/clip1.mp4
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from media_browser.config import get_settings
from media_browser.storage.errors import PathTraversalError, RangeNotSatisfiableError
from media_browser.storage.paths import RootContext, normalize_relative_path, resolve
from media_browser.storage.root import current_root
from media_browser.storage.streaming import MediaInfo, iter_file_range, open_media, parse_range_header, plan_range


logger = logging.getLogger("media_browser.media")

router = APIRouter(prefix="/api/media/stream", tags=["media"])


def _require_media(path: str, root: RootContext) -> MediaInfo:
    if not normalize_relative_path(path):
        raise HTTPException(status_code=400, detail="Path is required")
    try:
        return open_media(resolve(root, path))
    except PathTraversalError as exc:
        raise HTTPException(status_code=400, detail="Invalid path") from exc
    except FileNotFoundError as exc:
        logger.info("media_not_found", extra={"path": path})
        raise HTTPException(status_code=404, detail="Media file not found") from exc
    except OSError as exc:
        logger.exception("media_info_failed", extra={"path": path})
        raise HTTPException(status_code=500, detail="Internal server error") from exc


@router.get("")
@router.get("/{path:path}")
async def stream_media(request: Request, path: str = "", root: RootContext = Depends(current_root)):
    """Stream a media file, honoring the first range of a ``Range`` header.

    Example:
        curl -H 'Range: bytes=0-1023' http://localhost:5000/api/media/stream/shows/pilot.mp4
    """

    info = await run_in_threadpool(_require_media, path, root)
    settings = get_settings()
    byte_range = parse_range_header(request.headers.get("range"))
    try:
        plan = plan_range(info, byte_range, cache_max_age=settings.cache_max_age)
    except RangeNotSatisfiableError as exc:
        logger.info("range_not_satisfiable", extra={"path": path, "range": request.headers.get("range")})
        return Response(status_code=416, headers={"Content-Range": exc.content_range})

    logger.info(
        "stream_media",
        extra={"path": path, "status": plan.status_code, "start": plan.start, "length": plan.length},
    )
    return StreamingResponse(
        iter_file_range(info.path, plan.start, plan.length, settings.stream_chunk_size),
        status_code=plan.status_code,
        headers=plan.headers,
        media_type=info.mime_type,
    )


@router.head("")
@router.head("/{path:path}")
async def stream_media_head(path: str = "", root: RootContext = Depends(current_root)):
    """Report length and type of a media file without sending the body."""

    info = await run_in_threadpool(_require_media, path, root)
    settings = get_settings()
    headers = {
        "Content-Length": str(info.length),
        "Accept-Ranges": "bytes",
        "Cache-Control": f"public, max-age={settings.cache_max_age}",
    }
    return Response(status_code=200, headers=headers, media_type=info.mime_type)
