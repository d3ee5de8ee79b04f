"""
storefront_admin.auth.errors

Auth error taxonomy.

Responsibilities:
- Distinguish user-initiated sign-in/sign-up failures (inline feedback) from
  identity backend failures (normalized to "no principal" by the resolver).
"""

from __future__ import annotations


class AuthError(Exception):
    pass


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid login credentials") -> None:
        super().__init__(message)


class AdminAccessRequiredError(AuthError):
    def __init__(self, message: str = "Unauthorized: Admin access required") -> None:
        super().__init__(message)


class SignUpError(AuthError):
    pass


class IdentityServiceError(AuthError):
    pass


class RefreshTokenReusedError(IdentityServiceError):
    """
    The refresh token was already spent. Usually a parallel request rotated it
    first, so the client may already hold the replacement.
    """


# --- Module Notes -----------------------------------------------------------
# Navigation-time denials are redirects, not exceptions; see `auth.gate`.
