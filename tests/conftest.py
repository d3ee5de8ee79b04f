"""
tests.conftest

Shared fixtures.

Responsibilities:
- In-memory fakes of the identity service and account directory so the
  resolver, lookup, gate and auth service can be tested without a database.
- A fully wired app over a throwaway SQLite database for HTTP-level tests.
"""

from __future__ import annotations

import itertools
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from storefront_admin.api.app import create_app
from storefront_admin.auth.accounts import AccountLookup
from storefront_admin.auth.errors import IdentityServiceError, InvalidCredentialsError, SignUpError
from storefront_admin.auth.gate import RouteGuard
from storefront_admin.auth.models import (
    AdministrativeAccount,
    CustomerAccount,
    CustomerProfile,
    Principal,
    SessionCredentials,
)
from storefront_admin.auth.session import IdentitySessionResolver
from storefront_admin.settings import Settings


class FakeIdentityService:
    def __init__(self) -> None:
        self.by_access: dict[str, Principal] = {}
        self.by_refresh: dict[str, Principal] = {}
        self.users: dict[str, tuple[str, Principal]] = {}
        # Access tokens that report themselves as close to expiry.
        self.stale: set[str] = set()
        self.fail_lookups = False
        self.fail_refresh = False
        self.signed_out: list[SessionCredentials] = []
        self._ids = itertools.count(1)

    def issue(self, principal: Principal) -> SessionCredentials:
        n = next(self._ids)
        creds = SessionCredentials(
            access_token=f"access-{n}",
            refresh_token=f"refresh-{n}",
            access_expires_in=3600,
            refresh_expires_in=86400,
        )
        self.by_access[creds.access_token] = principal
        self.by_refresh[creds.refresh_token] = principal
        return creds

    def register(self, email: str, password: str, principal: Principal) -> None:
        self.users[email] = (password, principal)

    async def get_current_user(self, credentials: SessionCredentials) -> Principal | None:
        if self.fail_lookups:
            raise ConnectionError("identity service unreachable")
        return self.by_access.get(credentials.access_token or "")

    def needs_refresh(self, credentials: SessionCredentials) -> bool:
        return credentials.access_token in self.stale

    async def refresh(self, credentials: SessionCredentials) -> tuple[Principal, SessionCredentials]:
        if self.fail_refresh:
            raise IdentityServiceError("refresh endpoint down")
        principal = self.by_refresh.pop(credentials.refresh_token or "", None)
        if principal is None:
            raise IdentityServiceError("unknown refresh token")
        return principal, self.issue(principal)

    async def sign_in(self, email: str, password: str) -> tuple[Principal, SessionCredentials]:
        stored = self.users.get(email)
        if stored is None or stored[0] != password:
            raise InvalidCredentialsError()
        return stored[1], self.issue(stored[1])

    async def sign_out(self, credentials: SessionCredentials) -> None:
        self.signed_out.append(credentials)
        self.by_access.pop(credentials.access_token or "", None)
        self.by_refresh.pop(credentials.refresh_token or "", None)

    async def sign_up(
        self,
        email: str,
        password: str,
        profile: CustomerProfile | None = None,
    ) -> tuple[Principal, SessionCredentials]:
        if email in self.users:
            raise SignUpError("User already registered")
        principal = Principal(id=f"user-{next(self._ids)}", email=email)
        self.register(email, password, principal)
        return principal, self.issue(principal)


class FakeAccountDirectory:
    def __init__(self) -> None:
        self.admins: dict[str, AdministrativeAccount] = {}
        self.customers: dict[str, CustomerAccount] = {}
        self.fail_reads = False
        self.fail_last_login = False
        self.last_logins: dict[str, datetime] = {}
        self.admin_reads = 0

    async def get_admin_account_by_id(self, admin_id: str) -> AdministrativeAccount | None:
        self.admin_reads += 1
        if self.fail_reads:
            raise ConnectionError("directory unreachable")
        return self.admins.get(admin_id)

    async def get_customer_account_by_id(self, principal_id: str) -> CustomerAccount | None:
        if self.fail_reads:
            raise ConnectionError("directory unreachable")
        return self.customers.get(principal_id)

    async def update_last_login(self, admin_id: str, at: datetime) -> None:
        if self.fail_last_login:
            raise ConnectionError("directory unreachable")
        self.last_logins[admin_id] = at

    async def create_customer_account(
        self,
        principal_id: str,
        *,
        email: str,
        profile: CustomerProfile | None = None,
    ) -> CustomerAccount:
        profile = profile or CustomerProfile()
        account = CustomerAccount(
            id=f"cust-{principal_id}",
            auth_user_id=principal_id,
            email=email,
            first_name=profile.first_name,
        )
        self.customers[principal_id] = account
        return account


@pytest.fixture
def identity() -> FakeIdentityService:
    return FakeIdentityService()


@pytest.fixture
def directory() -> FakeAccountDirectory:
    return FakeAccountDirectory()


@pytest.fixture
def guard(identity: FakeIdentityService, directory: FakeAccountDirectory) -> RouteGuard:
    return RouteGuard(
        resolver=IdentitySessionResolver(identity),
        accounts=AccountLookup(directory),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        # Keep bcrypt cheap in tests.
        password_hash_rounds=4,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings=settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
            yield c


# --- Module Notes -----------------------------------------------------------
# The HTTP client does not follow redirects, so tests can assert on the gate's
# exact Location header.
