"""ASGI app that serves a document root with templated directory indexes.

Regular files are handed to Starlette's ``StaticFiles`` unchanged; directories
are enumerated by ``dirindex.listing`` and rendered with ``DirectoryTemplates``.

Usage::

    app = DirectoryIndex(
        root="/path/to/htdocs",
        templates="/path/to/templates",  # or template_string="..."
        entry_filter=hide_dotfiles,
    )
"""

from __future__ import annotations

import logging
import os
from typing import Any

from starlette.datastructures import URL
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Receive, Scope, Send

from dirindex.listing import (
    FileEntry,
    ListingContext,
    apply_filter,
    display_name,
    list_directory,
)
from dirindex.mime import detect_mime_type
from dirindex.protocol import EntryFilter, FileTransfer, MimeDetector, TemplateRenderer
from dirindex.templating import DirectoryTemplates

logger = logging.getLogger(__name__)


def get_route_path(scope: Scope) -> str:
    """Path below the mount point, whether or not the router stripped it.

    Mirrors ``starlette._utils.get_route_path``, which is private. Unlike
    ``StaticFiles.get_path`` it keeps the trailing slash the redirect and
    root-listing rules depend on. Keep the two in step when upgrading Starlette.
    """
    path: str = scope["path"]
    root_path: str = scope.get("root_path", "")
    if not root_path or not path.startswith(root_path):
        return path
    if path == root_path:
        return ""
    if path[len(root_path)] == "/":
        return path[len(root_path) :]
    return path


class DirectoryIndex:
    """Serve files from ``root`` and render directories through a template."""

    def __init__(
        self,
        root: str | os.PathLike[str] = ".",
        *,
        templates: str | os.PathLike[str] | None = None,
        template_string: str | None = None,
        entry_filter: EntryFilter | None = None,
        files: FileTransfer | None = None,
        renderer: TemplateRenderer | None = None,
        mime_type: MimeDetector = detect_mime_type,
        follow_symlink: bool = False,
    ) -> None:
        self.root = os.path.abspath(root)
        self.follow_symlink = follow_symlink
        self.entry_filter = entry_filter
        self.mime_type = mime_type
        self.files: FileTransfer = files or StaticFiles(
            directory=self.root, follow_symlink=follow_symlink
        )
        self.renderer: TemplateRenderer = renderer or DirectoryTemplates(
            templates, source=template_string
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        assert scope["type"] == "http"
        request = Request(scope, receive)
        try:
            response = await self.serve(request)
        except HTTPException as exc:
            response = PlainTextResponse(
                str(exc.detail), status_code=exc.status_code, headers=exc.headers
            )
        await response(scope, receive, send)

    async def serve(self, request: Request) -> Response:
        route_path = get_route_path(request.scope)

        if "\0" in route_path:
            raise HTTPException(status_code=400, detail="Bad Request")
        segments = route_path.split("/")
        if ".." in segments:
            raise HTTPException(status_code=403, detail="Forbidden")

        physical = os.path.join(self.root, *(s for s in segments if s))
        if os.path.isfile(physical):
            return await self.serve_file(request)
        if not os.path.isdir(physical):
            raise HTTPException(status_code=404, detail="Not Found")
        if not self.follow_symlink and not self.is_inside_root(physical):
            raise HTTPException(status_code=404, detail="Not Found")

        dir_url = request.scope.get("root_path", "") + route_path
        if not dir_url.endswith("/"):
            return self.redirect_to_dir(request)

        files = list_directory(
            physical,
            dir_url,
            is_root=route_path in ("", "/"),
            mime_type=self.mime_type,
        )
        return self.renderer.render(request, self.template_vars(physical, files))

    def is_inside_root(self, path: str) -> bool:
        """Whether ``path`` resolves to a location under the document root."""
        root = os.path.realpath(self.root)
        return os.path.commonpath([os.path.realpath(path), root]) == root

    async def serve_file(self, request: Request) -> Response:
        return await self.files.get_response(self.files.get_path(request.scope), request.scope)

    def redirect_to_dir(self, request: Request) -> Response:
        url = URL(scope=request.scope)
        return RedirectResponse(url=str(url.replace(path=url.path + "/")), status_code=301)

    def template_vars(self, directory: str, files: list[FileEntry]) -> dict[str, Any]:
        """Build the template variables for ``directory``.

        Override in a subclass to add variables; ``files`` is the unfiltered
        listing and the entry filter is applied here.
        """
        context = ListingContext(
            dir=display_name(os.path.realpath(directory)),
            files=apply_filter(files, self.entry_filter),
        )
        return context.as_dict()
