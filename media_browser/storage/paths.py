"""Path helpers for resolving client paths safely under the media root.

Example:
    from media_browser.storage.paths import RootContext, resolve
    root = RootContext.from_path(Path("/data/media"))
    resolved = resolve(root, "shows%2Fpilot.mp4")
    print(resolved.path, resolved.relative)
"""

from __future__ import annotations

import errno
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote

from .errors import MediaNotFoundError, PathTraversalError


logger = logging.getLogger("media_browser.paths")

SEPARATOR_PATTERN = re.compile(r"[\\/]+")


def _detect_case_insensitive(path: Path) -> bool:
    if os.name == "nt":
        return True
    swapped = Path(str(path).swapcase())
    if swapped == path:
        return False
    try:
        return swapped.exists() and os.path.samefile(path, swapped)
    except OSError:
        return False


@dataclass(frozen=True)
class RootContext:
    """Canonical media root shared read-only by every request."""

    path: Path
    case_insensitive: bool = False

    @classmethod
    def from_path(cls, path: Path | str) -> "RootContext":
        """Build a context from an existing directory, resolving symlinks first."""

        candidate = Path(path).expanduser()
        if not candidate.is_dir():
            raise MediaNotFoundError(f"Root directory not found: {candidate}")
        canonical = candidate.resolve()
        return cls(path=canonical, case_insensitive=_detect_case_insensitive(canonical))

    def contains(self, target: Path) -> bool:
        """Return True when target is the root itself or lies beneath it."""

        root_text = str(self.path)
        target_text = str(target)
        if self.case_insensitive:
            root_text = root_text.casefold()
            target_text = target_text.casefold()
        if target_text == root_text:
            return True
        prefix = root_text if root_text.endswith(os.sep) else root_text + os.sep
        return target_text.startswith(prefix)


@dataclass(frozen=True)
class ResolvedPath:
    """A path proven to lie inside the root; only ``resolve`` builds these.

    ``path`` is canonical (symlinks resolved) and is what I/O uses. ``relative``
    is the root-relative, forward-slash path the client addressed, ``""`` for
    the root itself.
    """

    root: RootContext
    path: Path
    relative: str
    exists: bool
    is_directory: bool

    @property
    def is_root(self) -> bool:
        return self.relative == ""

    @property
    def name(self) -> str:
        if self.is_root:
            return self.root.path.name
        return self.relative.rsplit("/", 1)[-1]

    @property
    def parent_relative(self) -> str | None:
        """Root-relative path of the containing directory, None for the root."""

        if self.is_root:
            return None
        if "/" not in self.relative:
            return ""
        return self.relative.rsplit("/", 1)[0]


def relpath_posix(target: Path, base: Path) -> str:
    """Return POSIX-style relative path between two locations."""

    relative = target.relative_to(base).as_posix()
    return "" if relative == "." else relative


def normalize_relative_path(raw_path: str | None) -> str:
    """Decode a client path and collapse either separator style into single slashes."""

    decoded = unquote(raw_path or "")
    return SEPARATOR_PATTERN.sub("/", decoded).strip("/")


def join_relative(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def encode_relative_path(relative: str) -> str:
    """Percent-encode a root-relative path one segment at a time."""

    if not relative:
        return ""
    return "/".join(quote(segment, safe="") for segment in relative.split("/"))


def resolve(root: RootContext, raw_path: str | None) -> ResolvedPath:
    """Resolve an untrusted client path under ``root``.

    Both the lexical form and the symlink-resolved form must stay inside the
    root; otherwise ``PathTraversalError`` is raised. Existence is reported on
    the result and enforced by ``require_directory`` / ``require_file``.
    """

    relative = normalize_relative_path(raw_path)
    if "\x00" in relative:
        logger.warning("path_traversal_rejected", extra={"path": raw_path, "reason": "nul"})
        raise PathTraversalError(raw_path)

    joined = root.path / relative if relative else root.path
    lexical = Path(os.path.normpath(joined))
    try:
        canonical = joined.resolve()
    except RuntimeError as exc:
        logger.warning("path_traversal_rejected", extra={"path": raw_path, "reason": "symlink_loop"})
        raise PathTraversalError(raw_path) from exc

    if not root.contains(lexical) or not root.contains(canonical):
        logger.warning(
            "path_traversal_rejected",
            extra={"path": raw_path, "root": str(root.path), "resolved": str(canonical)},
        )
        raise PathTraversalError(raw_path)

    try:
        exists = canonical.exists()
        is_directory = exists and canonical.is_dir()
    except OSError as exc:
        # a segment longer than the filesystem allows names nothing on disk
        if exc.errno != errno.ENAMETOOLONG:
            raise
        logger.debug("path_name_too_long", extra={"path": raw_path})
        exists = is_directory = False

    return ResolvedPath(
        root=root,
        path=canonical,
        relative=relpath_posix(lexical, root.path),
        exists=exists,
        is_directory=is_directory,
    )


def require_directory(resolved: ResolvedPath) -> ResolvedPath:
    if not resolved.is_directory:
        raise MediaNotFoundError(f"Directory not found: {resolved.relative or '/'}")
    return resolved


def require_file(resolved: ResolvedPath) -> ResolvedPath:
    if not resolved.exists or resolved.is_directory or not resolved.path.is_file():
        raise MediaNotFoundError(f"File not found: {resolved.relative}")
    return resolved
