"""Directory browsing and file metadata endpoints.

Example calls:
    curl http://localhost:5000/api/filesystem
    curl http://localhost:5000/api/filesystem/shows
    curl http://localhost:5000/api/filesystem/shows/pilot.mp4
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from media_browser.storage.errors import PathTraversalError
from media_browser.storage.links import directory_links, entry_links, file_links
from media_browser.storage.listing import Entry, Listing, list_directory
from media_browser.storage.paths import ResolvedPath, RootContext, resolve
from media_browser.storage.root import current_root
from media_browser.storage.streaming import open_media


logger = logging.getLogger("media_browser.filesystem")

router = APIRouter(prefix="/api/filesystem", tags=["filesystem"])


class FileSystemItemResponse(BaseModel):
    name: str
    path: str
    is_directory: bool
    media_type: str | None = None
    size: int | None = None
    modified: datetime | None = None
    links: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: Entry) -> "FileSystemItemResponse":
        return cls(
            name=entry.name,
            path=entry.relative_path,
            is_directory=entry.is_directory,
            media_type=entry.media_type,
            size=entry.size,
            modified=entry.modified,
            links=entry_links(entry),
        )


class DirectoryContentResponse(BaseModel):
    name: str
    path: str
    is_directory: bool = True
    items: List[FileSystemItemResponse] = Field(default_factory=list)
    links: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_listing(cls, listing: Listing) -> "DirectoryContentResponse":
        return cls(
            name=listing.name,
            path=listing.relative_path,
            items=[FileSystemItemResponse.from_entry(entry) for entry in listing.entries],
            links=directory_links(listing),
        )


def _file_response(resolved: ResolvedPath) -> FileSystemItemResponse:
    info = open_media(resolved)
    modified = datetime.fromtimestamp(info.path.stat().st_mtime, tz=timezone.utc)
    return FileSystemItemResponse(
        name=resolved.name,
        path=resolved.relative,
        is_directory=False,
        media_type=info.mime_type,
        size=info.length,
        modified=modified,
        links=file_links(resolved),
    )


@router.get("")
@router.get("/{path:path}")
def get_filesystem_entry(path: str = "", root: RootContext = Depends(current_root)):
    """Return a directory listing, or file metadata with navigation links.

    Example:
        curl http://localhost:5000/api/filesystem/clip1.mp4
    """

    try:
        resolved = resolve(root, path)
        if resolved.is_directory:
            listing = list_directory(resolved)
            logger.info("listed_directory", extra={"path": listing.relative_path, "count": len(listing.entries)})
            return DirectoryContentResponse.from_listing(listing)
        return _file_response(resolved)
    except PathTraversalError as exc:
        raise HTTPException(status_code=400, detail="Invalid path") from exc
    except FileNotFoundError as exc:
        logger.info("filesystem_not_found", extra={"path": path})
        raise HTTPException(status_code=404, detail="File not found") from exc
    except OSError as exc:
        logger.exception("filesystem_read_failed", extra={"path": path})
        raise HTTPException(status_code=500, detail="Internal server error") from exc
