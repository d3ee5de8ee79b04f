"""
storefront_admin.auth.cookies

Credential material <-> HTTP cookies.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from storefront_admin.auth.models import SessionCredentials
from storefront_admin.settings import Settings


def read_credentials(request: Request, settings: Settings) -> SessionCredentials:
    access = request.cookies.get(settings.access_cookie_name)
    if not access:
        # API clients may send the access token as a bearer header instead.
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() == "bearer" and token:
            access = token.strip()
    return SessionCredentials(
        access_token=access or None,
        refresh_token=request.cookies.get(settings.refresh_cookie_name) or None,
    )


def write_credentials(response: Response, credentials: SessionCredentials, settings: Settings) -> None:
    if credentials.access_token:
        response.set_cookie(
            settings.access_cookie_name,
            credentials.access_token,
            max_age=credentials.access_expires_in,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )
    if credentials.refresh_token:
        response.set_cookie(
            settings.refresh_cookie_name,
            credentials.refresh_token,
            max_age=credentials.refresh_expires_in,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )


def clear_credentials(response: Response, settings: Settings) -> None:
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(name, httponly=True, secure=settings.cookie_secure, samesite="lax")
