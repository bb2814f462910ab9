# MIME type detection for listing entries.
# Created: 2026-10-14

from __future__ import annotations

import mimetypes

DEFAULT_MIME_TYPE = "text/plain"
DIRECTORY_MIME_TYPE = "directory"


def detect_mime_type(path: str) -> str | None:
    """Guess a MIME type from the file name, like ``FileResponse`` does."""
    media_type, _ = mimetypes.guess_type(path)
    return media_type
