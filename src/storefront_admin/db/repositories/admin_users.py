from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from storefront_admin.auth.models import AdminRole
from storefront_admin.db.models import AdminUser


class AdminUserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        user_id: str,
        email: str,
        role: AdminRole,
        permissions: dict[str, Any] | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AdminUser:
        admin = AdminUser(
            id=user_id,
            email=email,
            role=role,
            permissions=permissions or {},
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        self._session.add(admin)
        await self._session.flush()
        return admin

    async def get(self, admin_id: str) -> AdminUser | None:
        # Returns inactive records too; filtering on is_active is the lookup's job.
        return await self._session.get(AdminUser, admin_id)

    async def set_last_login(self, admin_id: str, at: datetime) -> bool:
        admin = await self._session.get(AdminUser, admin_id, with_for_update=True)
        if admin is None:
            return False
        admin.last_login = at
        return True

    async def set_active(self, admin_id: str, is_active: bool) -> AdminUser | None:
        admin = await self._session.get(AdminUser, admin_id, with_for_update=True)
        if admin is None:
            return None
        admin.is_active = is_active
        admin.updated_at = datetime.utcnow()
        return admin
