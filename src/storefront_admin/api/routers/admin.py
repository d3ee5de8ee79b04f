"""
storefront_admin.api.routers.admin

Admin area endpoints.

Responsibilities:
- Dashboard shell: the signed-in admin account plus the sidebar navigation.
- Section stubs for the CRUD screens, each behind the opt-in route permission check.

Every path here is under the admin prefix, so the route guard has already
required an active admin account before these handlers run.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from starlette.status import HTTP_404_NOT_FOUND

from storefront_admin.api.schemas import AdminAccountOut
from storefront_admin.auth.deps import get_admin_account, get_route_permissions, require_route_access
from storefront_admin.auth.models import AdministrativeAccount
from storefront_admin.auth.permissions import RoutePermissionMap, can_access_route

router = APIRouter(prefix="/admin", tags=["admin"])

# (section, sidebar title) in sidebar order; "" is the dashboard itself.
SIDEBAR_SECTIONS: tuple[tuple[str, str], ...] = (
    ("", "Dashboard"),
    ("products", "Products"),
    ("orders", "Orders"),
    ("customers", "Customers"),
    ("subscriptions", "Subscriptions"),
    ("payments", "Payments"),
    ("categories", "Categories"),
    ("shipping", "Shipping"),
    ("analytics", "Analytics"),
    ("settings", "Settings"),
    ("users", "Users"),
)


class NavigationItem(BaseModel):
    title: str
    href: str
    allowed: bool


class DashboardResponse(BaseModel):
    account: AdminAccountOut
    greeting: str
    navigation: list[NavigationItem]


def _href(section: str) -> str:
    return f"/admin/{section}" if section else "/admin"


def build_navigation(
    account: AdministrativeAccount, route_permissions: RoutePermissionMap
) -> list[NavigationItem]:
    return [
        NavigationItem(
            title=title,
            href=_href(section),
            allowed=can_access_route(account, _href(section), route_permissions),
        )
        for section, title in SIDEBAR_SECTIONS
    ]


@router.get("", response_model=DashboardResponse)
async def dashboard(
    account: AdministrativeAccount = Depends(get_admin_account),
    route_permissions: RoutePermissionMap = Depends(get_route_permissions),
) -> DashboardResponse:
    return DashboardResponse(
        account=AdminAccountOut.from_account(account),
        greeting=f"Welcome back, {account.first_name or 'Admin'}!",
        navigation=build_navigation(account, route_permissions),
    )


@router.get("/{section}", dependencies=[Depends(require_route_access())])
async def section(
    request: Request,
    section: str,
    account: AdministrativeAccount = Depends(get_admin_account),
) -> dict[str, Any]:
    # CRUD screens are rendered elsewhere; this only confirms access for the section.
    known = {s for s, _ in SIDEBAR_SECTIONS if s}
    if section not in known:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Section not found")
    return {
        "section": section,
        "path": request.url.path,
        "account_id": account.id,
        "role": account.role.value,
    }


# --- Module Notes -----------------------------------------------------------
# Sections missing from the route permission map (products, orders, ...) are
# open to every active admin; only mapped sections are narrowed.
