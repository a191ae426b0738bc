"""
Single-page app host.

Serves files from the public directory and falls back to index.html for
any other GET path so client-side routes resolve.
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from chat_relay.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"

router = APIRouter(tags=["frontend"])


def resolve_public_file(public_dir: Path, requested: str) -> Path:
    """
    Map a request path to a file under public_dir.

    Returns the requested file when it exists inside public_dir, otherwise
    the app entry document. Paths escaping public_dir never resolve.
    """
    root = public_dir.resolve()
    if requested:
        try:
            candidate = (root / requested).resolve()
            if candidate.is_file() and candidate.is_relative_to(root):
                return candidate
        except (OSError, ValueError):
            # Over-long segments (ENAMETOOLONG) or embedded NUL bytes
            logger.debug(f"Unresolvable asset path: {requested!r}")
    return root / INDEX_FILE


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def serve_frontend(full_path: str, settings: Settings = Depends(get_settings)):
    """Serve a static asset or the app entry document."""
    target = resolve_public_file(Path(settings.public_dir), full_path)
    if not target.is_file():
        logger.warning(f"Entry document missing: {target}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return FileResponse(target)
