"""
storefront_admin.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Expose the principal/admin account the route guard already resolved.
- Enforce per-permission and per-route checks via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from storefront_admin.auth.models import AdministrativeAccount, Principal
from storefront_admin.auth.permissions import RoutePermissionMap, can_access_route, has_permission


def get_optional_principal(request: Request) -> Principal | None:
    # Set by RouteGuardMiddleware for every request it lets through.
    return getattr(request.state, "principal", None)


def get_principal(principal: Principal | None = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return principal


def get_admin_account(request: Request) -> AdministrativeAccount:
    account: AdministrativeAccount | None = getattr(request.state, "admin_account", None)
    if account is None:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Admin access required")
    return account


def get_route_permissions(request: Request) -> RoutePermissionMap:
    # Built once at startup in `api.app.create_app`.
    return request.app.state.route_permissions  # type: ignore[attr-defined]


def require_permissions(*required: str):
    def _dep(account: AdministrativeAccount = Depends(get_admin_account)) -> AdministrativeAccount:
        # Authz: super_admin passes every check inside has_permission.
        if not all(has_permission(account, p) for p in required):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return account

    return _dep


def require_route_access(route: str | None = None):
    def _dep(
        request: Request,
        account: AdministrativeAccount = Depends(get_admin_account),
        route_permissions: RoutePermissionMap = Depends(get_route_permissions),
    ) -> AdministrativeAccount:
        target = route or request.url.path
        if not can_access_route(account, target, route_permissions):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return account

    return _dep


# --- Module Notes -----------------------------------------------------------
# The route guard runs for every request; these dependencies are the opt-in
# stricter layer for handlers that need specific permissions.
