"""Jinja2 rendering of directory index pages.

The template receives ``dir`` and ``files`` (see ``dirindex.listing``) plus a
configurable set of request-derived variables::

    scheme       "http" / "https"
    base         base URL of the application
    parameters   query parameters (multi-dict)
    path         URL path of the listed directory
    user         authenticated user from the ASGI scope, or None

Permissions can be printed with ``{{ file.permission | octal }}`` and
modification times with ``{{ file.stat.st_mtime | timestamp }}``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import jinja2
from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"
INDEX_TEMPLATE = "index.html"

REQUEST_VARS: dict[str, Callable[[Request], Any]] = {
    "scheme": lambda request: request.url.scheme,
    "base": lambda request: str(request.base_url),
    "parameters": lambda request: request.query_params,
    "path": lambda request: request.url.path,
    "user": lambda request: request.scope.get("user"),
}


def format_timestamp(value: float | None, fmt: str = "%Y-%m-%d %H:%M") -> str:
    if value is None:
        return ""
    return datetime.fromtimestamp(value).strftime(fmt)


def format_octal(value: int | None) -> str:
    if value is None:
        return ""
    return f"{value:04o}"


class DirectoryTemplates:
    """Template renderer for the index page.

    Exactly one template source is used: a ``directory`` that contains
    ``index.html``, a literal template ``source`` string, or the packaged
    default template when neither is given.

    The underlying ``Jinja2Templates`` is built once here and never mutated
    afterwards, so a single instance can serve concurrent requests.
    """

    def __init__(
        self,
        directory: str | os.PathLike[str] | None = None,
        *,
        source: str | None = None,
        request_vars: Iterable[str] = tuple(REQUEST_VARS),
    ) -> None:
        if directory is not None and source is not None:
            raise ValueError("Pass either a template directory or a template source, not both")

        self.request_vars = tuple(request_vars)
        unknown = set(self.request_vars) - set(REQUEST_VARS)
        if unknown:
            raise ValueError(f"Unknown request variables: {', '.join(sorted(unknown))}")

        if source is not None:
            env = jinja2.Environment(
                loader=jinja2.DictLoader({INDEX_TEMPLATE: source}),
                autoescape=True,
            )
            self.templates = Jinja2Templates(env=env)
            logger.debug("Using inline index template")
        else:
            templates_dir = Path(directory) if directory is not None else DEFAULT_TEMPLATES_DIR
            self.templates = Jinja2Templates(directory=str(templates_dir))
            logger.debug("Using index template from %s", templates_dir)

        self.templates.env.filters["timestamp"] = format_timestamp
        self.templates.env.filters["octal"] = format_octal

    def request_context(self, request: Request) -> dict[str, Any]:
        return {name: REQUEST_VARS[name](request) for name in self.request_vars}

    def render(self, request: Request, variables: dict[str, Any]) -> Response:
        context = {**self.request_context(request), **variables}
        return self.templates.TemplateResponse(
            request=request, name=INDEX_TEMPLATE, context=context
        )
