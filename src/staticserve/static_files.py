"""
Static file mounts for an aiohttp application.

Requests that no registered route matches fall through to the static roots,
which are tried in mount order; the first existing file wins.
"""

import logging
from pathlib import Path
from typing import List, Optional

from aiohttp import hdrs, web

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class StaticRoots:
    """Ordered list of directories served for otherwise unmatched GET/HEAD requests

    aiohttp's add_static would answer 404 itself for a missing file instead of
    trying the next root, so lookup and containment are done here.
    """

    def __init__(self):
        self.roots: List[Path] = []

    def add(self, directory) -> Path:
        root = Path(directory).resolve()
        if not root.is_dir():
            logger.warning(f"Static root {root} does not exist (yet); requests will fall through")
        self.roots.append(root)
        logger.debug(f"Mounted static root #{len(self.roots)}: {root}")
        return root

    def resolve(self, request_path: str) -> Optional[Path]:
        """First file, or directory holding an index, under any root"""
        relative = request_path.lstrip("/")
        for root in self.roots:
            try:
                candidate = (root / relative).resolve()
                # Never serve anything outside the root (.., absolute parts, symlinks)
                candidate.relative_to(root)
                if candidate.is_dir() and (candidate / INDEX_FILE).is_file():
                    return candidate
                if candidate.is_file():
                    return candidate
            except (ValueError, OSError):
                continue
        return None

    def find(self, request_path: str) -> Optional[Path]:
        """Map a decoded URL path to the file served for it"""
        target = self.resolve(request_path)
        if target is not None and target.is_dir():
            return target / INDEX_FILE
        return target

    def __len__(self):
        return len(self.roots)


STATIC_ROOTS_KEY = web.AppKey("static_roots", StaticRoots)


def directory_redirect(request: web.Request) -> str:
    """Location for a directory requested without its trailing slash"""
    location = f"{request.rel_url.raw_path}/"
    if request.query_string:
        location = f"{location}?{request.query_string}"
    return location


def static_middleware(static_roots: StaticRoots):
    """Build the pass-through middleware serving files from ``static_roots``"""

    @web.middleware
    async def serve_static(request: web.Request, handler):
        unmatched = request.match_info.http_exception is not None
        if unmatched and request.method in (hdrs.METH_GET, hdrs.METH_HEAD):
            target = static_roots.resolve(request.path)
            if target is not None:
                if target.is_dir():
                    # Relative links in the index resolve against the directory
                    if not request.path.endswith("/"):
                        raise web.HTTPMovedPermanently(directory_redirect(request))
                    target = target / INDEX_FILE
                return web.FileResponse(target)
        return await handler(request)

    return serve_static


def mount_static(app: web.Application, directory) -> Path:
    """Mount ``directory`` after any roots already mounted on ``app``"""
    static_roots = app.get(STATIC_ROOTS_KEY)
    if static_roots is None:
        static_roots = StaticRoots()
        app[STATIC_ROOTS_KEY] = static_roots
        app.middlewares.append(static_middleware(static_roots))
    return static_roots.add(directory)
