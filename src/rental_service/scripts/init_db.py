"""Create all tables: python -m rental_service.scripts.init_db"""
from __future__ import annotations

import asyncio
import logging

from rental_service.infrastructure.db import models  # noqa: F401
from rental_service.infrastructure.db.base import Base
from rental_service.infrastructure.db.session import engine

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_tables())


if __name__ == "__main__":
    main()
