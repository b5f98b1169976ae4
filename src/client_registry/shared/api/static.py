"""
Static File Serving
===================

Two static trees are served:
- an image directory at `/images`, with an HTML index for directories
- the web root at `/`, where directories resolve to `index.html`

The root mount matches every path, so it has to be registered after all
other routes.
"""

import html
import os
import stat
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Scope


class ListingStaticFiles(StaticFiles):
    """StaticFiles that renders an "Index of" page for directories."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            full_path, stat_result = await run_in_threadpool(self.lookup_path, path)
            if stat_result is None or not stat.S_ISDIR(stat_result.st_mode):
                raise
            url_path = Request(scope).url.path
            body = await run_in_threadpool(render_listing, url_path, full_path)
            return HTMLResponse(body)


def render_listing(url_path: str, directory: str) -> str:
    """Render an HTML index of `directory`, linking entries under `url_path`."""
    base = url_path if url_path.endswith("/") else url_path + "/"
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)
        names = [entry.name + ("/" if entry.is_dir() else "") for entry in entries]

    title = html.escape(f"Index of {base}")
    items = "".join(
        f'<li><a href="{html.escape(base + quote(name))}">{html.escape(name)}</a></li>'
        for name in names
    )
    return (
        f"<html><head><title>{title}</title></head>"
        f"<body><h1>{title}</h1><ul>{items}</ul></body></html>"
    )


def mount_static(app: FastAPI, static_root: Path, images_dir: Path) -> None:
    """
    Register the image listing and the web root on `app`.

    Call this last: the root mount shadows anything added after it.
    """

    @app.get("/images", include_in_schema=False)
    async def images_index() -> RedirectResponse:
        return RedirectResponse(url="/images/")

    app.mount(
        "/images",
        ListingStaticFiles(directory=str(images_dir), check_dir=False),
        name="images",
    )
    app.mount(
        "/",
        StaticFiles(directory=str(static_root), html=True, check_dir=False),
        name="root",
    )
