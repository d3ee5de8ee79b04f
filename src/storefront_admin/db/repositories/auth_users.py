from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_admin.db.models import AuthUser


class AuthUserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        user_metadata: dict[str, Any] | None = None,
    ) -> AuthUser:
        user = AuthUser(
            email=email,
            password_hash=password_hash,
            user_metadata=user_metadata or {},
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: str) -> AuthUser | None:
        return await self._session.get(AuthUser, user_id)

    async def get_by_email(self, email: str) -> AuthUser | None:
        # Emails are stored as given; match case-insensitively.
        stmt = select(AuthUser).where(func.lower(AuthUser.email) == email.lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()
