"""
storefront_admin.auth.service

Sign-in / sign-up / sign-out flows.

Responsibilities:
- Admin sign-in: authenticate, require an active admin account, stamp last_login.
- Customer sign-in and sign-up (with a free-tier customer record).
- Sign-out: revoke the session behind the given credentials.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront_admin.auth.accounts import AccountDirectory, AccountLookup
from storefront_admin.auth.errors import AdminAccessRequiredError
from storefront_admin.auth.identity import IdentityService
from storefront_admin.auth.models import (
    AdministrativeAccount,
    CustomerAccount,
    CustomerProfile,
    Principal,
    SessionCredentials,
)
from storefront_admin.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AdminSignIn:
    principal: Principal
    account: AdministrativeAccount
    credentials: SessionCredentials


@dataclass(frozen=True, slots=True)
class CustomerSignIn:
    principal: Principal
    credentials: SessionCredentials
    customer: CustomerAccount | None = None


class AuthService:
    def __init__(self, *, identity: IdentityService, directory: AccountDirectory) -> None:
        self._identity = identity
        self._directory = directory
        self._accounts = AccountLookup(directory)

    async def sign_in_admin(self, email: str, password: str) -> AdminSignIn:
        # InvalidCredentialsError propagates to the caller for inline feedback.
        principal, credentials = await self._identity.sign_in(email, password)

        account = await self._accounts.lookup_admin(principal.id)
        if account is None:
            # Leave no usable session behind for a non-admin. The credentials
            # never reach the client either way.
            try:
                await self._identity.sign_out(credentials)
            except Exception as e:
                log.warning("auth.sign_out_failed", principal_id=principal.id, error=str(e))
            log.info("auth.admin_sign_in_rejected", principal_id=principal.id)
            raise AdminAccessRequiredError()

        try:
            await self._directory.update_last_login(account.id, datetime.utcnow())
        except Exception as e:
            # Bookkeeping only; the sign-in itself succeeded.
            log.warning("auth.last_login_update_failed", admin_id=account.id, error=str(e))

        log.info("auth.admin_signed_in", admin_id=account.id, role=account.role.value)
        return AdminSignIn(principal=principal, account=account, credentials=credentials)

    async def sign_in_customer(self, email: str, password: str) -> CustomerSignIn:
        principal, credentials = await self._identity.sign_in(email, password)
        customer = await self._accounts.lookup_customer(principal.id)
        log.info("auth.customer_signed_in", principal_id=principal.id)
        return CustomerSignIn(principal=principal, credentials=credentials, customer=customer)

    async def sign_up_customer(
        self,
        email: str,
        password: str,
        profile: CustomerProfile | None = None,
    ) -> CustomerSignIn:
        principal, credentials = await self._identity.sign_up(email, password, profile)
        customer = await self._directory.create_customer_account(
            principal.id, email=principal.email, profile=profile
        )
        log.info("auth.customer_signed_up", principal_id=principal.id, customer_id=customer.id)
        return CustomerSignIn(principal=principal, credentials=credentials, customer=customer)

    async def sign_out(self, credentials: SessionCredentials) -> None:
        if credentials.is_empty:
            return
        await self._identity.sign_out(credentials)


# --- Module Notes -----------------------------------------------------------
# Routers translate AuthError subclasses into 400/401/403 responses; see
# `api.routers.auth`.
