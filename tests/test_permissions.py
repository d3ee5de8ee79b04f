"""
tests.test_permissions

Authorization engine: role override, per-account grants and the route map.

Unlisted routes are default-allow for any active admin. The tests below pin
that behavior so it is not flipped to default-deny by accident.
"""

from __future__ import annotations

import pytest

from storefront_admin.auth.models import AdministrativeAccount, AdminRole
from storefront_admin.auth.permissions import (
    DEFAULT_ROUTE_PERMISSIONS,
    RoutePermissionMap,
    can_access_route,
    has_permission,
)
from storefront_admin.settings import Settings

NON_SUPER_ROLES = [AdminRole.admin, AdminRole.manager, AdminRole.analyst]


def _account(role: AdminRole, **permissions: object) -> AdministrativeAccount:
    return AdministrativeAccount(id="a1", role=role, permissions=permissions)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "permission",
    ["manage_users", "manage_payments", "view_analytics", "not_in_any_map", ""],
)
def test_super_admin_holds_every_permission(permission: str) -> None:
    account = _account(AdminRole.super_admin)
    assert has_permission(account, permission) is True


@pytest.mark.parametrize("role", list(AdminRole))
def test_super_admin_flag_follows_role(role: AdminRole) -> None:
    assert _account(role).is_super_admin is (role == AdminRole.super_admin)


def test_super_admin_overrides_explicit_false_grant() -> None:
    account = _account(AdminRole.super_admin, manage_users=False)
    assert has_permission(account, "manage_users") is True
    assert can_access_route(account, "/admin/users") is True


@pytest.mark.parametrize("role", NON_SUPER_ROLES)
def test_missing_permission_is_false_not_error(role: AdminRole) -> None:
    assert has_permission(_account(role), "manage_users") is False


@pytest.mark.parametrize("role", NON_SUPER_ROLES)
def test_users_route_requires_manage_users(role: AdminRole) -> None:
    assert can_access_route(_account(role), "/admin/users") is False
    assert can_access_route(_account(role, manage_users=True), "/admin/users") is True


@pytest.mark.parametrize("value", [False, "true", 1, "yes", None])
def test_only_exact_true_counts_as_grant(value: object) -> None:
    account = _account(AdminRole.manager, view_analytics=value)
    assert has_permission(account, "view_analytics") is False


@pytest.mark.parametrize("role", list(AdminRole))
@pytest.mark.parametrize("permissions", [{}, {"manage_users": False}, {"anything": True}])
def test_unlisted_route_is_default_allow(role: AdminRole, permissions: dict[str, bool]) -> None:
    account = _account(role, **permissions)
    assert can_access_route(account, "/admin/unlisted-route") is True
    assert can_access_route(account, "/admin/orders") is True


def test_route_lookup_is_exact_path() -> None:
    # Subpaths of a mapped route are separate, unlisted routes.
    account = _account(AdminRole.analyst)
    assert can_access_route(account, "/admin/users") is False
    assert can_access_route(account, "/admin/users/42") is True


def test_required_permissions_are_all_required() -> None:
    routes = RoutePermissionMap({"/admin/refunds": ["manage_payments", "manage_orders"]})

    one = _account(AdminRole.admin, manage_payments=True)
    both = _account(AdminRole.admin, manage_payments=True, manage_orders=True)

    assert can_access_route(one, "/admin/refunds", routes) is False
    assert can_access_route(both, "/admin/refunds", routes) is True


def test_default_map_matches_dashboard_sections() -> None:
    assert dict(DEFAULT_ROUTE_PERMISSIONS) == {
        "/admin/users": frozenset({"manage_users"}),
        "/admin/subscriptions": frozenset({"manage_subscriptions"}),
        "/admin/payments": frozenset({"manage_payments"}),
        "/admin/analytics": frozenset({"view_analytics"}),
        "/admin/settings": frozenset({"manage_settings"}),
    }


def test_route_map_from_settings() -> None:
    settings = Settings(route_permissions={"/admin/reports": ["view_reports", "view_analytics"]})
    routes = RoutePermissionMap(settings.route_permissions)

    assert routes.required_for("/admin/reports") == frozenset({"view_reports", "view_analytics"})
    assert routes.required_for("/admin/users") == frozenset()
    assert "/admin/reports" in routes
    assert len(routes) == 1


def test_route_map_is_read_only() -> None:
    source = {"/admin/users": ["manage_users"]}
    routes = RoutePermissionMap(source)
    source["/admin/users"].append("something_else")

    assert routes["/admin/users"] == frozenset({"manage_users"})
    with pytest.raises(TypeError):
        routes["/admin/new"] = frozenset()  # type: ignore[index]


def test_account_permissions_are_read_only() -> None:
    account = _account(AdminRole.admin, manage_users=True)
    with pytest.raises(TypeError):
        account.permissions["manage_payments"] = True  # type: ignore[index]
