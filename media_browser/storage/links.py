"""Navigation link builders for directories, listing entries and single files.

Example:
    links = file_links(resolve(root, "shows/b.mp4"))
    # {"self": "/api/filesystem/shows/b.mp4", "previous": "/api/filesystem/shows/a.mp4", ...}
"""

from __future__ import annotations

import logging
from typing import Dict, List

from .errors import MediaNotFoundError
from .listing import Entry, Listing, file_entries, list_directory
from .media_types import is_image
from .paths import ResolvedPath, encode_relative_path, join_relative, require_directory, resolve


logger = logging.getLogger("media_browser.links")

FILESYSTEM_PREFIX = "/api/filesystem"
STREAM_PREFIX = "/api/media/stream"


def filesystem_url(relative: str) -> str:
    encoded = encode_relative_path(relative)
    return f"{FILESYSTEM_PREFIX}/{encoded}" if encoded else FILESYSTEM_PREFIX


def stream_url(relative: str) -> str:
    return f"{STREAM_PREFIX}/{encode_relative_path(relative)}"


def _parent_of(relative: str) -> str:
    return relative.rsplit("/", 1)[0] if "/" in relative else ""


def directory_links(listing: Listing) -> Dict[str, str]:
    links = {
        "self": filesystem_url(listing.relative_path),
        "root": FILESYSTEM_PREFIX,
    }
    if not listing.is_root:
        links["parent"] = filesystem_url(_parent_of(listing.relative_path))
    return links


def entry_links(entry: Entry) -> Dict[str, str]:
    if entry.is_directory:
        return {"view": filesystem_url(entry.relative_path)}
    links = {"view": stream_url(entry.relative_path)}
    if is_image(entry.name):
        links["thumbnail"] = links["view"]
    return links


def _locate(files: List[Entry], name: str) -> int:
    # exact match wins when two names differ only by case
    for i, entry in enumerate(files):
        if entry.name == name:
            return i
    wanted = name.casefold()
    return next((i for i, entry in enumerate(files) if entry.name.casefold() == wanted), -1)


def sibling_links(resolved: ResolvedPath) -> Dict[str, str]:
    """Previous/next links from the parent listing, empty when not computable."""

    parent = resolved.parent_relative
    if parent is None:
        return {}
    try:
        listing = list_directory(require_directory(resolve(resolved.root, encode_relative_path(parent))))
    except MediaNotFoundError:
        logger.warning("sibling_listing_unavailable", extra={"path": resolved.relative, "parent": parent})
        return {}

    files = file_entries(listing)
    index = _locate(files, resolved.name)
    logger.debug(
        "computed_siblings",
        extra={"path": resolved.relative, "index": index, "count": len(files)},
    )
    if index < 0:
        return {}

    links: Dict[str, str] = {}
    if index > 0:
        links["previous"] = filesystem_url(join_relative(parent, files[index - 1].name))
    if index < len(files) - 1:
        links["next"] = filesystem_url(join_relative(parent, files[index + 1].name))
    return links


def file_links(resolved: ResolvedPath) -> Dict[str, str]:
    """Full link set for a single file: self, root, parent, stream, thumbnail, previous, next."""

    links = {
        "self": filesystem_url(resolved.relative),
        "root": FILESYSTEM_PREFIX,
        "stream": stream_url(resolved.relative),
    }
    parent = resolved.parent_relative
    if parent is not None:
        links["parent"] = filesystem_url(parent)
    if is_image(resolved.name):
        links["thumbnail"] = links["stream"]
    links.update(sibling_links(resolved))
    return links
