"""
storefront_admin.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create identity and account tables for local development and tests.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from storefront_admin.db import models  # noqa: F401  # register tables on Base.metadata
from storefront_admin.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Not used for prod; production workflows run Alembic migrations on deploy.
