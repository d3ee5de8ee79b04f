"""
storefront_admin.db.directory

SQL-backed account directory.

Responsibilities:
- Implement `auth.accounts.AccountDirectory` over the `admin_users` and
  `customers` tables.
- Map ORM rows onto the frozen domain records the gate works with.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront_admin.auth.models import AdministrativeAccount, CustomerAccount, CustomerProfile
from storefront_admin.db.models import AdminUser, Customer
from storefront_admin.db.repositories.admin_users import AdminUserRepo
from storefront_admin.db.repositories.customers import CustomerRepo
from storefront_admin.db.session import session_scope


def admin_account_from_row(row: AdminUser) -> AdministrativeAccount:
    return AdministrativeAccount(
        id=row.id,
        email=row.email,
        role=row.role,
        permissions=dict(row.permissions or {}),
        is_active=row.is_active,
        first_name=row.first_name,
        last_name=row.last_name,
        avatar_url=row.avatar_url,
        last_login=row.last_login,
    )


def customer_account_from_row(row: Customer) -> CustomerAccount:
    return CustomerAccount(
        id=row.id,
        auth_user_id=row.auth_user_id or "",
        email=row.email,
        is_active=row.is_active,
        subscription_status=row.subscription_status,
        first_name=row.first_name,
        last_name=row.last_name,
        phone=row.phone,
        avatar_url=row.avatar_url,
    )


class SqlAccountDirectory:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_admin_account_by_id(self, admin_id: str) -> AdministrativeAccount | None:
        async with session_scope(self._session_factory) as db:
            row = await AdminUserRepo(db).get(admin_id)
            return admin_account_from_row(row) if row is not None else None

    async def get_customer_account_by_id(self, principal_id: str) -> CustomerAccount | None:
        # Customers are keyed by the identity they sign in with, not their own id.
        async with session_scope(self._session_factory) as db:
            row = await CustomerRepo(db).get_by_auth_user_id(principal_id)
            return customer_account_from_row(row) if row is not None else None

    async def update_last_login(self, admin_id: str, at: datetime) -> None:
        async with session_scope(self._session_factory) as db:
            await AdminUserRepo(db).set_last_login(admin_id, at)

    async def create_customer_account(
        self,
        principal_id: str,
        *,
        email: str,
        profile: CustomerProfile | None = None,
    ) -> CustomerAccount:
        profile = profile or CustomerProfile()
        async with session_scope(self._session_factory) as db:
            row = await CustomerRepo(db).create(
                auth_user_id=principal_id,
                email=email,
                first_name=profile.first_name,
                last_name=profile.last_name,
                phone=profile.phone,
            )
            return customer_account_from_row(row)


# --- Module Notes -----------------------------------------------------------
# The active flag is filtered by `auth.accounts.AccountLookup`, not here, so every
# directory implementation is held to the same rule.
