"""Generated files on disk and the HTTP routes that serve them.

Files land in ``<artifacts_dir>/<folder>/<kind>_<epoch-millis>.<ext>``. Writes
use exclusive create and are closed before the path is returned, so a caller
can hand the path to a route immediately.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Optional

logger = logging.getLogger("aikit.artifacts")

VOICES = "voices"
IMAGES = "images"
MUSIC = "music"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _candidate_names(kind: str, ext: str):
    stamp = _now_ms()
    yield f"{kind}_{stamp}.{ext}"
    n = 1
    while True:
        yield f"{kind}_{stamp}_{n}.{ext}"
        n += 1


def save_artifact(root: str, folder: str, kind: str, ext: str, data: bytes) -> str:
    """Write bytes to a fresh file and return its path.

    A name already on disk is never overwritten; a numeric suffix is added.
    """
    folder_path = os.path.join(root, folder)
    os.makedirs(folder_path, exist_ok=True)
    for name in _candidate_names(kind, ext):
        full_path = os.path.join(folder_path, name)
        try:
            with open(full_path, "xb") as f:
                f.write(data)
        except FileExistsError:
            continue
        logger.debug(f"Saved {kind} artifact: {full_path} ({len(data)} bytes)")
        return full_path
    raise RuntimeError("unreachable")  # pragma: no cover


def expose_local_url(base_folder: str, file_path: str, app: Optional[Any] = None) -> str:
    """Register ``GET /<base_folder>/<filename>`` on a FastAPI app or router.

    Returns the route, or "" when no app is given (no URL available).
    """
    if app is None:
        return ""

    from fastapi.responses import FileResponse, PlainTextResponse

    url_path = f"/{base_folder}/{os.path.basename(file_path)}"
    absolute_path = os.path.abspath(file_path)

    def serve_artifact():
        if not os.path.isfile(absolute_path):
            logger.error(f"Error serving {absolute_path}: file not found")
            return PlainTextResponse("Error serving file", status_code=500)
        return FileResponse(absolute_path)

    app.add_api_route(url_path, serve_artifact, methods=["GET"])
    logger.debug(f"Exposed {absolute_path} at {url_path}")
    return url_path
