"""
tests.test_deps

Route-level authorization dependencies, mounted on a bare FastAPI app with the
admin account injected the way RouteGuardMiddleware leaves it.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import Depends, FastAPI, HTTPException

from storefront_admin.auth.deps import require_permissions
from storefront_admin.auth.models import AdministrativeAccount, AdminRole


def _app(account: AdministrativeAccount | None) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def _as_guard(request, call_next):
        request.state.admin_account = account
        return await call_next(request)

    @app.get("/reports", dependencies=[Depends(require_permissions("view_analytics"))])
    async def reports() -> dict[str, str]:
        return {"ok": "reports"}

    @app.post("/refunds")
    async def refunds(
        admin: AdministrativeAccount = Depends(
            require_permissions("manage_payments", "manage_subscriptions")
        ),
    ) -> dict[str, str]:
        return {"issued_by": admin.id}

    return app


async def _call(account: AdministrativeAccount | None, method: str, path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=_app(account))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path)


@pytest.mark.asyncio
async def test_granted_permission_passes() -> None:
    account = AdministrativeAccount(id="a1", role=AdminRole.analyst, permissions={"view_analytics": True})
    r = await _call(account, "GET", "/reports")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_missing_grant_is_forbidden() -> None:
    account = AdministrativeAccount(id="a2", role=AdminRole.admin, permissions={"view_analytics": False})
    r = await _call(account, "GET", "/reports")
    assert r.status_code == 403
    assert r.json()["detail"] == "Insufficient permissions"


@pytest.mark.asyncio
async def test_super_admin_passes_without_grants() -> None:
    account = AdministrativeAccount(id="root", role=AdminRole.super_admin)
    r = await _call(account, "POST", "/refunds")
    assert r.status_code == 200
    assert r.json() == {"issued_by": "root"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "permissions, status",
    [
        ({"manage_payments": True, "manage_subscriptions": True}, 200),
        ({"manage_payments": True}, 403),
        ({"manage_subscriptions": True}, 403),
        ({"manage_payments": True, "manage_subscriptions": "true"}, 403),
    ],
)
async def test_every_named_permission_is_required(permissions: dict, status: int) -> None:
    account = AdministrativeAccount(id="m1", role=AdminRole.manager, permissions=permissions)
    r = await _call(account, "POST", "/refunds")
    assert r.status_code == status


@pytest.mark.asyncio
async def test_no_admin_account_is_forbidden() -> None:
    r = await _call(None, "GET", "/reports")
    assert r.status_code == 403
    assert r.json()["detail"] == "Admin access required"


def test_dependency_returns_the_account() -> None:
    account = AdministrativeAccount(id="a3", role=AdminRole.manager, permissions={"manage_users": True})
    check = require_permissions("manage_users")
    assert check(account=account) is account
    with pytest.raises(HTTPException) as exc:
        require_permissions("manage_users", "manage_settings")(account=account)
    assert exc.value.status_code == 403
