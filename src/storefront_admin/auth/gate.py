"""
storefront_admin.auth.gate

Route guard: the per-request allow/redirect decision.

Responsibilities:
- Compose session resolution and admin account lookup for every request.
- Decide, in order: admin area (sign-in / unauthorized redirects), customer
  area (sign-in redirect), otherwise pass through.
- Carry refreshed credential material along with the decision.

Notes:
- The gate only enforces "is an active admin" for the admin area. Finer
  per-permission checks are opt-in per route (`auth.deps.require_route_access`).
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from storefront_admin.auth.accounts import AccountLookup
from storefront_admin.auth.models import AdministrativeAccount, Principal, SessionCredentials
from storefront_admin.auth.session import SessionResolver
from storefront_admin.observability.logging import get_logger
from storefront_admin.settings import Settings

log = get_logger(__name__)


class GateOutcome(enum.StrEnum):
    allow = "allow"
    redirect = "redirect"


class DenyReason(enum.StrEnum):
    unauthenticated = "unauthenticated"
    unauthorized = "unauthorized"


@dataclass(frozen=True, slots=True)
class GatePaths:
    admin_prefix: str = "/admin"
    customer_prefixes: tuple[str, ...] = ("/dashboard", "/profile")
    admin_sign_in: str = "/auth/admin-login"
    unauthorized: str = "/auth/unauthorized"
    customer_sign_in: str = "/auth/login"

    @classmethod
    def from_settings(cls, settings: Settings) -> GatePaths:
        return cls(
            admin_prefix=settings.admin_path_prefix,
            customer_prefixes=tuple(settings.customer_protected_prefixes),
            admin_sign_in=settings.admin_sign_in_path,
            unauthorized=settings.unauthorized_path,
            customer_sign_in=settings.customer_sign_in_path,
        )


@dataclass(frozen=True, slots=True)
class GateDecision:
    outcome: GateOutcome
    redirect_to: str | None = None
    reason: DenyReason | None = None
    principal: Principal | None = None
    admin_account: AdministrativeAccount | None = None
    refreshed: SessionCredentials | None = None
    # The presented cookies were rejected and should be cleared on the response.
    stale_credentials: bool = False

    @property
    def allowed(self) -> bool:
        return self.outcome == GateOutcome.allow


def path_is_under(path: str, prefix: str) -> bool:
    # Segment-aware: "/admin" covers "/admin" and "/admin/..." but not "/administrator".
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def path_is_under_any(path: str, prefixes: Sequence[str]) -> bool:
    return any(path_is_under(path, p) for p in prefixes)


class RouteGuard:
    def __init__(
        self,
        *,
        resolver: SessionResolver,
        accounts: AccountLookup,
        paths: GatePaths | None = None,
    ) -> None:
        self._resolver = resolver
        self._accounts = accounts
        self._paths = paths or GatePaths()

    @property
    def paths(self) -> GatePaths:
        return self._paths

    async def evaluate(self, path: str, credentials: SessionCredentials) -> GateDecision:
        resolution = await self._resolver.resolve(credentials)
        principal = resolution.principal
        refreshed = resolution.refreshed
        stale = resolution.stale

        if path_is_under(path, self._paths.admin_prefix):
            if principal is None:
                return self._redirect(
                    path,
                    self._paths.admin_sign_in,
                    DenyReason.unauthenticated,
                    refreshed=refreshed,
                    stale=stale,
                )
            account = await self._accounts.lookup_admin(principal.id)
            if account is None:
                return self._redirect(
                    path,
                    self._paths.unauthorized,
                    DenyReason.unauthorized,
                    principal=principal,
                    refreshed=refreshed,
                )
            return GateDecision(
                outcome=GateOutcome.allow,
                principal=principal,
                admin_account=account,
                refreshed=refreshed,
            )

        if principal is None and path_is_under_any(path, self._paths.customer_prefixes):
            return self._redirect(
                path,
                self._paths.customer_sign_in,
                DenyReason.unauthenticated,
                refreshed=refreshed,
                stale=stale,
            )

        return GateDecision(
            outcome=GateOutcome.allow,
            principal=principal,
            refreshed=refreshed,
            stale_credentials=stale,
        )

    def _redirect(
        self,
        path: str,
        target: str,
        reason: DenyReason,
        *,
        principal: Principal | None = None,
        refreshed: SessionCredentials | None = None,
        stale: bool = False,
    ) -> GateDecision:
        # Denials are expected traffic, not errors.
        log.info(
            "gate.redirect",
            requested=path,
            redirect_to=target,
            reason=reason.value,
            principal_id=principal.id if principal else None,
        )
        return GateDecision(
            outcome=GateOutcome.redirect,
            redirect_to=target,
            reason=reason,
            principal=principal,
            refreshed=refreshed,
            stale_credentials=stale,
        )


# --- Module Notes -----------------------------------------------------------
# `auth.middleware.RouteGuardMiddleware` turns a GateDecision into an HTTP response.
