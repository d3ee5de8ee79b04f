"""
storefront_admin.auth.permissions

Authorization engine: pure role/permission decisions.

Responsibilities:
- Hold the static route -> required-permissions map (`RoutePermissionMap`).
- Decide whether an admin account holds a permission (`has_permission`).
- Decide whether an admin account may open an admin route (`can_access_route`).

Routes missing from the map are open to every active admin account. This is
the intended behavior for unlisted admin subroutes, not a gap.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from storefront_admin.auth.models import AdministrativeAccount
from storefront_admin.settings import default_route_permissions


class RoutePermissionMap(Mapping[str, frozenset[str]]):
    """
    Immutable mapping of route path -> permission names required to open it.
    Lookup is by exact path.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Mapping[str, Iterable[str]] | None = None) -> None:
        self._routes: dict[str, frozenset[str]] = {
            route: frozenset(perms) for route, perms in (routes or {}).items()
        }

    def __getitem__(self, route: str) -> frozenset[str]:
        return self._routes[route]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RoutePermissionMap({self._routes!r})"

    def required_for(self, route: str) -> frozenset[str]:
        # Unlisted routes require nothing.
        return self._routes.get(route, frozenset())


DEFAULT_ROUTE_PERMISSIONS = RoutePermissionMap(default_route_permissions())


def has_permission(account: AdministrativeAccount, permission: str) -> bool:
    if account.is_super_admin:
        return True
    return account.permissions.get(permission) is True


def can_access_route(
    account: AdministrativeAccount,
    route: str,
    route_permissions: RoutePermissionMap = DEFAULT_ROUTE_PERMISSIONS,
) -> bool:
    # AND semantics: every required permission must be held.
    return all(has_permission(account, p) for p in route_permissions.required_for(route))


# --- Module Notes -----------------------------------------------------------
# No I/O here. The gate and route dependencies pass in accounts that were
# already looked up for the current request.
