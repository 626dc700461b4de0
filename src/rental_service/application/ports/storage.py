from __future__ import annotations

from typing import Protocol


class ImageStorage(Protocol):
    async def save(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Persist an uploaded image and return its public URL."""
        ...
