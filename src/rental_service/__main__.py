"""Entrypoint: python -m rental_service"""
from __future__ import annotations

import logging

import uvicorn

from rental_service.api.middleware.correlation_id import RequestIdLogFilter
from rental_service.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestIdLogFilter())

    uvicorn.run(
        "rental_service.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL,
    )


if __name__ == "__main__":
    main()
