"""Directory enumeration producing the canonical, sorted media listing.

Example:
    resolved = require_directory(resolve(root, "shows"))
    listing = list_directory(resolved)
    for entry in listing.entries:
        print(entry.relative_path, entry.media_type)
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from .errors import MediaNotFoundError
from .media_types import is_media, mime_type_for
from .paths import ResolvedPath, join_relative


logger = logging.getLogger("media_browser.listing")

# stat failures that mean the child is gone or cannot be resolved
SKIPPED_CHILD_ERRNOS = frozenset({errno.ENOENT, errno.ELOOP, errno.ENAMETOOLONG})


@dataclass(frozen=True)
class Entry:
    name: str
    relative_path: str
    is_directory: bool
    modified: datetime
    size: int | None = None
    media_type: str | None = None


@dataclass(frozen=True)
class Listing:
    name: str
    relative_path: str
    entries: Tuple[Entry, ...] = field(default_factory=tuple)

    @property
    def is_root(self) -> bool:
        return self.relative_path == ""


def name_sort_key(name: str) -> Tuple[str, str]:
    """Case-insensitive ordinal ordering, independent of the process locale."""

    return (name.upper(), name)


def _entry_sort_key(entry: Entry) -> Tuple[bool, str, str]:
    return (not entry.is_directory, *name_sort_key(entry.name))


def _build_entry(resolved: ResolvedPath, child: Path) -> Entry | None:
    target = child.resolve()
    if not resolved.root.contains(target):
        logger.debug("skipping_escaping_child", extra={"path": str(child)})
        return None

    stat = target.stat()
    modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
    relative_path = join_relative(resolved.relative, child.name)

    if target.is_dir():
        return Entry(name=child.name, relative_path=relative_path, is_directory=True, modified=modified)
    if target.is_file() and is_media(child.name):
        return Entry(
            name=child.name,
            relative_path=relative_path,
            is_directory=False,
            modified=modified,
            size=stat.st_size,
            media_type=mime_type_for(child.name),
        )
    return None


def list_directory(resolved: ResolvedPath) -> Listing:
    """List the immediate children of a resolved directory.

    Sub-directories are always included; regular files only when their
    extension is a recognized media type. Children that disappear or cannot
    be resolved (symlink loops) are skipped. Directories sort before files.
    """

    try:
        children = list(resolved.path.iterdir())
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise MediaNotFoundError(f"Directory not found: {resolved.relative or '/'}") from exc

    entries: List[Entry] = []
    for child in children:
        try:
            entry = _build_entry(resolved, child)
        except RuntimeError:
            # symlink loop raised by Path.resolve() before Python 3.13
            logger.debug("skipping_unresolvable_child", extra={"path": str(child)})
            continue
        except OSError as exc:
            if exc.errno not in SKIPPED_CHILD_ERRNOS:
                raise
            logger.debug("skipping_unreadable_child", extra={"path": str(child), "errno": exc.errno})
            continue
        if entry is not None:
            entries.append(entry)

    entries.sort(key=_entry_sort_key)
    return Listing(name=resolved.name, relative_path=resolved.relative, entries=tuple(entries))


def file_entries(listing: Listing) -> List[Entry]:
    """Files only, in listing order; the ordering navigation links rely on."""

    return [entry for entry in listing.entries if not entry.is_directory]
