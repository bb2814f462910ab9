# Built-in entry filters.
# Created: 2026-10-15

from __future__ import annotations

import re

from dirindex.listing import FileEntry
from dirindex.protocol import EntryFilter

# Keep names not starting with "." plus the "./" and "../" navigation entries
_VISIBLE = re.compile(r"^[^.]|^\.+/$")


def hide_dotfiles(entry: FileEntry) -> FileEntry | None:
    """Drop hidden files and directories, keeping ``./`` and ``../``."""
    return entry if _VISIBLE.match(entry.name) else None


def chain(*filters: EntryFilter) -> EntryFilter:
    """Compose filters left to right; the first ``None`` drops the entry."""

    def _chained(entry: FileEntry) -> FileEntry | None:
        for entry_filter in filters:
            result = entry_filter(entry)
            if result is None:
                return None
            entry = result
        return entry

    return _chained
