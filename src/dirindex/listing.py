"""Directory listing model and enumeration.

Builds the ordered list of ``FileEntry`` records that the index template
iterates over. All directory names (and their URLs) end with a slash; the
synthetic ``./`` entry is always present and ``../`` is added unless the
document root itself is listed.
"""

from __future__ import annotations

import logging
import os
import stat as stat_module
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from dirindex.mime import DEFAULT_MIME_TYPE, DIRECTORY_MIME_TYPE, detect_mime_type

logger = logging.getLogger(__name__)

PERMISSION_MASK = 0o7777


@dataclass
class FileEntry:
    """A single entry of a directory listing."""

    name: str  # basename, "/" appended for directories
    url: str  # escaped URL path, "/" appended for directories
    mime_type: str
    permission: int | None = None  # st_mode & 0o7777
    stat: os.stat_result | None = None

    @property
    def is_dir(self) -> bool:
        return self.name.endswith("/")


@dataclass
class ListingContext:
    """Template variables for one directory index page."""

    dir: str
    files: list[FileEntry] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {"dir": self.dir, "files": self.files}


def escape_url(url: str) -> str:
    """Percent-escape each ``/``-separated segment of ``url``."""
    return "/".join(quote(seg, safe="", errors="surrogateescape") for seg in url.split("/"))


def display_name(name: str) -> str:
    """Make a filesystem name safe to render, replacing undecodable bytes."""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def build_entry(
    directory: str,
    dir_url: str,
    name: str,
    mime_type: Callable[[str], str | None] = detect_mime_type,
) -> FileEntry:
    """Build the ``FileEntry`` for ``name`` inside ``directory``."""
    path = os.path.join(directory, name)
    url = escape_url(dir_url + name)
    label = display_name(name)

    try:
        st = os.stat(path)
    except OSError as exc:
        logger.debug("stat failed for %s: %s", path, exc)
        st = None

    if st is not None and stat_module.S_ISDIR(st.st_mode):
        return FileEntry(
            name=label + "/",
            url=url + "/",
            mime_type=DIRECTORY_MIME_TYPE,
            permission=st.st_mode & PERMISSION_MASK,
            stat=st,
        )

    return FileEntry(
        name=label,
        url=url,
        mime_type=mime_type(path) or DEFAULT_MIME_TYPE,
        permission=st.st_mode & PERMISSION_MASK if st is not None else None,
        stat=st,
    )


def list_directory(
    directory: str,
    dir_url: str,
    *,
    is_root: bool,
    mime_type: Callable[[str], str | None] = detect_mime_type,
) -> list[FileEntry]:
    """Enumerate ``directory`` into an ordered list of entries.

    Args:
        directory: Physical directory to read.
        dir_url: URL path of the directory, ending with ``/``.
        is_root: Whether this is the document root (no ``..`` entry).
        mime_type: MIME detector for non-directory entries.

    Raises:
        OSError: If the directory cannot be read.
    """
    with os.scandir(directory) as it:
        children = sorted(e.name for e in it if e.name not in (".", ".."))

    special = ["."] if is_root else [".", ".."]
    entries = [build_entry(directory, dir_url, name, mime_type) for name in special + children]
    logger.debug("Listed %s (%d entries)", directory, len(entries))
    return entries


def apply_filter(
    entries: Iterable[FileEntry],
    entry_filter: Callable[[FileEntry], FileEntry | None] | None,
) -> list[FileEntry]:
    """Run ``entry_filter`` over ``entries`` in order, dropping ``None`` results."""
    if entry_filter is None:
        return list(entries)
    filtered = (entry_filter(entry) for entry in entries)
    return [entry for entry in filtered if entry is not None]
