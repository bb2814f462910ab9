"""
Collaborator protocols for the directory index.
Created: 2026-10-14
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import Scope

    from dirindex.listing import FileEntry


class FileTransfer(Protocol):
    """Serves a regular file. ``StaticFiles`` satisfies this."""

    def get_path(self, scope: Scope) -> str: ...

    async def get_response(self, path: str, scope: Scope) -> Response: ...


class MimeDetector(Protocol):
    """Maps a filesystem path to a MIME type, or ``None`` if unknown."""

    def __call__(self, path: str) -> str | None: ...


class TemplateRenderer(Protocol):
    """Renders the index page from listing variables."""

    def render(self, request: Request, variables: dict[str, Any]) -> Response:
        """Render ``variables`` plus request-derived fields into a response."""
        ...


class EntryFilter(Protocol):
    """Transforms or drops a single listing entry.

    Called once per entry, in listing order. Return the entry (possibly a
    modified copy) to keep it, or ``None`` to drop it.
    """

    def __call__(self, entry: FileEntry) -> FileEntry | None: ...
