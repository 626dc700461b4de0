"""Serves the browser client: static files from PUBLIC_DIR, else index.html."""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from rental_service.config import settings

router = APIRouter(include_in_schema=False)

_RESERVED_PREFIXES = ("api/", "ws/", "uploads/")


@router.get("/{full_path:path}")
async def spa(full_path: str) -> FileResponse:
    if full_path.startswith(_RESERVED_PREFIXES):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    public_dir = Path(settings.PUBLIC_DIR).resolve()
    candidate = (public_dir / full_path).resolve()
    if full_path and candidate.is_relative_to(public_dir) and candidate.is_file():
        return FileResponse(candidate)

    index = public_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return FileResponse(index)
