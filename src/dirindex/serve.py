"""HTTP server for ``dirindex``.

Wraps ``DirectoryIndex`` in a FastAPI app mounted at the configured prefix
and runs it under uvicorn.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from dirindex.app import DirectoryIndex
from dirindex.config import Settings, get_settings
from dirindex.filters import hide_dotfiles

logger = logging.getLogger(__name__)


def build_directory_index(settings: Settings) -> DirectoryIndex:
    """Create the ``DirectoryIndex`` described by ``settings``."""
    return DirectoryIndex(
        root=settings.root,
        templates=settings.templates_dir,
        template_string=settings.template_source(),
        entry_filter=hide_dotfiles if settings.hide_hidden else None,
        follow_symlink=settings.follow_symlink,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application serving ``settings.root``."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="dirindex",
        description="Static files with templated directory indexes.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Add security headers to all responses."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    app.mount(settings.mount_path, build_directory_index(settings), name="files")
    return app


def run_server(settings: Settings) -> None:
    """Start the server (blocks until interrupted)."""
    import uvicorn

    app = create_app(settings)
    root = settings.root.resolve()

    print("\n" + "=" * 50)
    print("DIRINDEX")
    print("=" * 50)
    print(f"\nServing {root}")
    print(f"   at http://{settings.host}:{settings.port}{settings.mount_path}\n")

    logger.info("Serving %s on %s:%d", root, settings.host, settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
