"""Root conftest: test settings must be in os.environ before rental_service.config is imported."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip().strip('"'))


_load_env_file(Path(__file__).resolve().parent / ".env.test")

# API tests write uploads; keep them out of the working tree.
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="rental-uploads-"))
os.environ.setdefault("PUBLIC_DIR", tempfile.mkdtemp(prefix="rental-public-"))
