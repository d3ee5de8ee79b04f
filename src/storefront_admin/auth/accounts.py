"""
storefront_admin.auth.accounts

Account lookup: principal id -> active admin/customer account.

Responsibilities:
- Define the `AccountDirectory` protocol over the external account store.
- Filter out inactive accounts; deactivation is the only revocation path and
  must apply on the very next lookup, so nothing here is cached.
- Fail closed: directory errors surface as "no account".
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from storefront_admin.auth.models import AdministrativeAccount, CustomerAccount, CustomerProfile
from storefront_admin.observability.logging import get_logger

log = get_logger(__name__)


class AccountDirectory(Protocol):
    async def get_admin_account_by_id(self, admin_id: str) -> AdministrativeAccount | None: ...

    async def get_customer_account_by_id(self, principal_id: str) -> CustomerAccount | None: ...

    async def update_last_login(self, admin_id: str, at: datetime) -> None: ...

    async def create_customer_account(
        self,
        principal_id: str,
        *,
        email: str,
        profile: CustomerProfile | None = None,
    ) -> CustomerAccount: ...


class AccountLookup:
    def __init__(self, directory: AccountDirectory) -> None:
        self._directory = directory

    async def lookup_admin(self, principal_id: str) -> AdministrativeAccount | None:
        try:
            account = await self._directory.get_admin_account_by_id(principal_id)
        except Exception as e:
            log.warning("accounts.directory_unavailable", kind="admin", error=str(e))
            return None
        if account is None or not account.is_active:
            return None
        return account

    async def lookup_customer(self, principal_id: str) -> CustomerAccount | None:
        try:
            account = await self._directory.get_customer_account_by_id(principal_id)
        except Exception as e:
            log.warning("accounts.directory_unavailable", kind="customer", error=str(e))
            return None
        if account is None or not account.is_active:
            return None
        return account


# --- Module Notes -----------------------------------------------------------
# Writes (last_login, customer provisioning) go straight to the directory from
# `auth.service`; only reads are normalized here.
