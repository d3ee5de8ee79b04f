"""
storefront_admin.services.provisioning

Admin account provisioning (transaction + persistence owner).

Responsibilities:
- Create the sign-in identity and admin record for a staff member.
- Soft-deactivate / reactivate admin accounts (`is_active`); admin records are never deleted.
"""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront_admin.auth.identity import normalize_email
from storefront_admin.auth.models import AdministrativeAccount, AdminRole
from storefront_admin.auth.passwords import hash_password
from storefront_admin.db.directory import admin_account_from_row
from storefront_admin.db.repositories.admin_users import AdminUserRepo
from storefront_admin.db.repositories.auth_users import AuthUserRepo
from storefront_admin.db.session import session_scope
from storefront_admin.observability.logging import get_logger
from storefront_admin.settings import Settings

log = get_logger(__name__)


class ProvisioningError(Exception):
    pass


class ProvisioningService:
    def __init__(
        self,
        *,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._settings = settings
        self._session_factory = session_factory

    async def provision_admin(
        self,
        *,
        email: str,
        password: str,
        role: AdminRole,
        permissions: Mapping[str, bool] | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AdministrativeAccount:
        email = normalize_email(email)
        password_hash = await hash_password(password, rounds=self._settings.password_hash_rounds)
        async with session_scope(self._session_factory) as db:
            users = AuthUserRepo(db)
            admins = AdminUserRepo(db)

            # Existing identities (e.g. a customer being promoted) keep their password.
            user = await users.get_by_email(email)
            if user is None:
                user = await users.create(email=email, password_hash=password_hash)
            elif await admins.get(user.id) is not None:
                raise ProvisioningError(f"admin account already exists for {email}")

            row = await admins.create(
                user_id=user.id,
                email=email,
                role=role,
                permissions=dict(permissions or {}),
                first_name=first_name,
                last_name=last_name,
            )
            log.info("provisioning.admin_created", admin_id=row.id, role=role.value)
            return admin_account_from_row(row)

    async def set_admin_active(self, admin_id: str, *, is_active: bool) -> AdministrativeAccount:
        async with session_scope(self._session_factory) as db:
            row = await AdminUserRepo(db).set_active(admin_id, is_active)
            if row is None:
                raise ProvisioningError(f"admin account {admin_id} not found")
            log.info("provisioning.admin_active_changed", admin_id=admin_id, is_active=is_active)
            return admin_account_from_row(row)


# --- Module Notes -----------------------------------------------------------
# Used by the dev router and tests; production provisioning runs out of band.
