"""
storefront_admin.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and app-scoped services.
- Encapsulate app.state access patterns (sessionmaker, auth service, directory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront_admin.auth.accounts import AccountLookup
from storefront_admin.auth.service import AuthService
from storefront_admin.services.provisioning import ProvisioningService
from storefront_admin.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app is built with an explicit Settings; prefer it over env re-parsing.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in `storefront_admin.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def auth_service_dep(request: Request) -> AuthService:
    return request.app.state.auth_service  # type: ignore[attr-defined]


def account_lookup_dep(request: Request) -> AccountLookup:
    # A fresh lookup per request; nothing about accounts is cached.
    return AccountLookup(request.app.state.directory)  # type: ignore[attr-defined]


def provisioning_dep(request: Request) -> ProvisioningService:
    return request.app.state.provisioning  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# Auth-specific dependencies (principal, admin account, permission checks)
# live in `storefront_admin.auth.deps`.
