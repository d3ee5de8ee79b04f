"""
storefront_admin.auth.middleware

HTTP middleware running the route guard on every request.

Responsibilities:
- Evaluate the gate for the request path and cookies.
- Redirect on denial; otherwise pass through with the principal and admin
  account stored on `request.state`.
- Attach refreshed credential material to whichever response goes out, or
  clear cookies the identity service rejected.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.status import HTTP_307_TEMPORARY_REDIRECT

from storefront_admin.auth.cookies import clear_credentials, read_credentials, write_credentials
from storefront_admin.auth.gate import RouteGuard
from storefront_admin.settings import Settings


class RouteGuardMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, guard: RouteGuard, settings: Settings) -> None:
        super().__init__(app)
        self._guard = guard
        self._settings = settings

    async def dispatch(self, request: Request, call_next) -> Response:
        credentials = read_credentials(request, self._settings)
        decision = await self._guard.evaluate(request.url.path, credentials)

        if not decision.allowed:
            response: Response = RedirectResponse(
                url=decision.redirect_to,
                status_code=HTTP_307_TEMPORARY_REDIRECT,
            )
        else:
            # Downstream handlers read these instead of re-deriving authorization.
            request.state.principal = decision.principal
            request.state.admin_account = decision.admin_account
            response = await call_next(request)

        # A rotated refresh token must reach the client even on a redirect,
        # otherwise the old (now spent) one is all it has left.
        if not _sets_session_cookie(response, self._settings):
            if decision.refreshed is not None:
                write_credentials(response, decision.refreshed, self._settings)
            elif decision.stale_credentials:
                # Rejected cookies would otherwise be re-checked on every request.
                clear_credentials(response, self._settings)
        return response


def _sets_session_cookie(response: Response, settings: Settings) -> bool:
    # Sign-in/sign-out handlers write their own cookies; those win over a refresh.
    names = (settings.access_cookie_name + "=", settings.refresh_cookie_name + "=")
    return any(c.startswith(names) for c in response.headers.getlist("set-cookie"))


# --- Module Notes -----------------------------------------------------------
# Registered in `api.app.create_app` inside RequestContextMiddleware so gate
# log lines carry the request id.
