"""
storefront_admin.auth.session

Session resolver: request credentials -> current Principal.

Responsibilities:
- Resolve the caller through the identity service, never raising.
- Refresh the session when the access token is missing/expired or about to
  expire, handing the new credential material back to the caller.
- Keep the pre-refresh identity when a proactive refresh fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from storefront_admin.auth.errors import IdentityServiceError, RefreshTokenReusedError
from storefront_admin.auth.identity import IdentityService
from storefront_admin.auth.models import Principal, SessionCredentials
from storefront_admin.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SessionResolution:
    principal: Principal | None = None
    # Set only when the identity service issued new credentials during resolution.
    refreshed: SessionCredentials | None = None
    # The identity service rejected the presented credentials outright, so the
    # client should drop them. Backend outages never set this.
    stale: bool = False


class SessionResolver(Protocol):
    async def resolve(self, credentials: SessionCredentials) -> SessionResolution: ...


class IdentitySessionResolver:
    def __init__(self, identity: IdentityService) -> None:
        self._identity = identity

    async def resolve(self, credentials: SessionCredentials) -> SessionResolution:
        if credentials.is_empty:
            return SessionResolution()

        principal, lookup_failed = await self._current_user(credentials)

        wants_refresh = principal is None and bool(credentials.refresh_token)
        if principal is not None:
            try:
                wants_refresh = self._identity.needs_refresh(credentials)
            except Exception as e:
                log.warning("session.refresh_check_failed", error=str(e))
                wants_refresh = False
        if not wants_refresh:
            return SessionResolution(
                principal=principal,
                stale=principal is None and not lookup_failed,
            )

        try:
            refreshed_principal, refreshed = await self._identity.refresh(credentials)
        except Exception as e:
            # Refresh failure leaves the original outcome untouched.
            log.info(
                "session.refresh_failed",
                error=str(e),
                kept_principal=principal is not None,
            )
            return SessionResolution(
                principal=principal,
                stale=principal is None and not lookup_failed and _rejects_session(e),
            )

        log.debug("session.refreshed", principal_id=refreshed_principal.id)
        return SessionResolution(principal=refreshed_principal, refreshed=refreshed)

    async def _current_user(self, credentials: SessionCredentials) -> tuple[Principal | None, bool]:
        # Returns (principal, lookup_failed).
        if not credentials.access_token:
            return None, False
        try:
            return await self._identity.get_current_user(credentials), False
        except Exception as e:
            # Identity backend unreachable/erroring: fail closed.
            log.warning("session.identity_unavailable", error=str(e))
            return None, True


def _rejects_session(error: Exception) -> bool:
    # A spent token may just mean a parallel request won the rotation; keep the cookies.
    return isinstance(error, IdentityServiceError) and not isinstance(error, RefreshTokenReusedError)

# --- Module Notes -----------------------------------------------------------
# No state is kept between calls; every request resolves from scratch.
