"""Disk storage for listing images, served under /uploads."""
from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path

from rental_service.application.exceptions import ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class LocalImageStorage:
    """Stores files as ``<upload_dir>/<epoch-ms>-<name>``."""

    def __init__(self, upload_dir: str, max_bytes: int, public_prefix: str = "/uploads") -> None:
        self._upload_dir = Path(upload_dir)
        self._max_bytes = max_bytes
        self._public_prefix = public_prefix.rstrip("/")

    async def save(self, filename: str, content: bytes, content_type: str | None) -> str:
        if not (content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed!")
        if len(content) > self._max_bytes:
            raise ValidationError(f"Image exceeds {self._max_bytes} bytes")

        safe_name = _UNSAFE_CHARS.sub("_", Path(filename or "image").name) or "image"
        stored = f"{int(time.time() * 1000)}-{safe_name}"
        path = self._upload_dir / stored
        await asyncio.to_thread(self._write, path, content)
        logger.info("Stored upload %s (%d bytes)", stored, len(content))
        return f"{self._public_prefix}/{stored}"

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
