"""
storefront_admin.auth.identity

Identity service boundary.

Responsibilities:
- Define the `IdentityService` protocol the session resolver and auth service depend on.
- Provide `LocalIdentityService`: email/password identities (bcrypt) with
  server-side sessions and PyJWT access/refresh tokens bound to them.

Notes:
- Access tokens are checked against the session table on every call so a
  sign-out takes effect on the very next request.
- Refresh tokens are single-use: each refresh rotates the session's token id.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront_admin.auth.errors import (
    IdentityServiceError,
    InvalidCredentialsError,
    RefreshTokenReusedError,
    SignUpError,
)
from storefront_admin.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    decode_and_validate,
    issue_token,
    seconds_until_expiry,
)
from storefront_admin.auth.models import CustomerProfile, Principal, SessionCredentials
from storefront_admin.auth.passwords import hash_password, password_too_long, verify_password
from storefront_admin.db.models import AuthUser
from storefront_admin.db.repositories.auth_sessions import AuthSessionRepo
from storefront_admin.db.repositories.auth_users import AuthUserRepo
from storefront_admin.db.session import session_scope
from storefront_admin.settings import Settings

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class IdentityService(Protocol):
    async def get_current_user(self, credentials: SessionCredentials) -> Principal | None: ...

    def needs_refresh(self, credentials: SessionCredentials) -> bool: ...

    async def refresh(self, credentials: SessionCredentials) -> tuple[Principal, SessionCredentials]: ...

    async def sign_in(self, email: str, password: str) -> tuple[Principal, SessionCredentials]: ...

    async def sign_out(self, credentials: SessionCredentials) -> None: ...

    async def sign_up(
        self,
        email: str,
        password: str,
        profile: CustomerProfile | None = None,
    ) -> tuple[Principal, SessionCredentials]: ...


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


class LocalIdentityService:
    def __init__(
        self,
        *,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._settings = settings
        self._session_factory = session_factory
        self._cfg = jwt_config(settings)

    @property
    def _access_ttl(self) -> timedelta:
        return timedelta(seconds=self._settings.access_token_ttl_seconds)

    @property
    def _refresh_ttl(self) -> timedelta:
        return timedelta(seconds=self._settings.refresh_token_ttl_seconds)

    def _issue(self, *, user: AuthUser, session_id: str, refresh_token_id: str) -> SessionCredentials:
        access = issue_token(
            cfg=self._cfg,
            subject=user.id,
            session_id=session_id,
            token_type="access",
            ttl=self._access_ttl,
            email=user.email,
        )
        refresh = issue_token(
            cfg=self._cfg,
            subject=user.id,
            session_id=session_id,
            token_type="refresh",
            ttl=self._refresh_ttl,
            token_id=refresh_token_id,
        )
        return SessionCredentials(
            access_token=access,
            refresh_token=refresh,
            access_expires_in=self._settings.access_token_ttl_seconds,
            refresh_expires_in=self._settings.refresh_token_ttl_seconds,
        )

    async def _open_session(self, db: AsyncSession, user: AuthUser) -> SessionCredentials:
        auth_session = await AuthSessionRepo(db).create(
            user_id=user.id,
            expires_at=datetime.utcnow() + self._refresh_ttl,
        )
        return self._issue(
            user=user,
            session_id=auth_session.id,
            refresh_token_id=auth_session.refresh_token_id,
        )

    async def get_current_user(self, credentials: SessionCredentials) -> Principal | None:
        if not credentials.access_token:
            return None
        try:
            claims = decode_and_validate(
                cfg=self._cfg, token=credentials.access_token, token_type="access"
            )
        except JwtValidationError:
            return None

        async with session_scope(self._session_factory) as db:
            live = await AuthSessionRepo(db).get_live(claims["sid"], now=datetime.utcnow())
            if live is None or live.user_id != claims["sub"]:
                return None
            user = await AuthUserRepo(db).get(live.user_id)
            if user is None:
                return None
            return Principal(id=user.id, email=user.email)

    def needs_refresh(self, credentials: SessionCredentials) -> bool:
        if not credentials.refresh_token:
            return False
        if not credentials.access_token:
            return True
        try:
            claims = decode_and_validate(
                cfg=self._cfg,
                token=credentials.access_token,
                token_type="access",
                verify_exp=False,
            )
        except JwtValidationError:
            return True
        return seconds_until_expiry(claims) <= self._settings.session_refresh_leeway_seconds

    async def refresh(self, credentials: SessionCredentials) -> tuple[Principal, SessionCredentials]:
        if not credentials.refresh_token:
            raise IdentityServiceError("missing refresh token")
        try:
            claims = decode_and_validate(
                cfg=self._cfg, token=credentials.refresh_token, token_type="refresh"
            )
        except JwtValidationError as e:
            raise IdentityServiceError(f"invalid refresh token: {e}") from e

        now = datetime.utcnow()
        async with session_scope(self._session_factory) as db:
            sessions = AuthSessionRepo(db)
            live = await sessions.get_live(claims["sid"], now=now)
            if live is None or live.user_id != claims["sub"]:
                raise IdentityServiceError("session is no longer active")
            if live.refresh_token_id != claims.get("jti"):
                raise RefreshTokenReusedError("refresh token already used")
            user = await AuthUserRepo(db).get(live.user_id)
            if user is None:
                raise IdentityServiceError("user no longer exists")
            refresh_token_id = await sessions.rotate_refresh_token(
                live.id,
                expected_token_id=claims["jti"],
                expires_at=now + self._refresh_ttl,
                now=now,
            )
            if refresh_token_id is None:
                # Lost the race to a concurrent refresh, or revoked meanwhile.
                raise RefreshTokenReusedError("refresh token already used")
            issued = self._issue(user=user, session_id=live.id, refresh_token_id=refresh_token_id)
            return Principal(id=user.id, email=user.email), issued

    async def sign_in(self, email: str, password: str) -> tuple[Principal, SessionCredentials]:
        email = normalize_email(email)
        async with session_scope(self._session_factory) as db:
            user = await AuthUserRepo(db).get_by_email(email)
            # Same error for unknown email and wrong password.
            if user is None or not await verify_password(password, user.password_hash):
                raise InvalidCredentialsError()
            issued = await self._open_session(db, user)
            return Principal(id=user.id, email=user.email), issued

    async def sign_out(self, credentials: SessionCredentials) -> None:
        session_id = self._session_id_of(credentials)
        if session_id is None:
            return
        async with session_scope(self._session_factory) as db:
            await AuthSessionRepo(db).revoke(session_id, now=datetime.utcnow())

    async def sign_up(
        self,
        email: str,
        password: str,
        profile: CustomerProfile | None = None,
    ) -> tuple[Principal, SessionCredentials]:
        email = normalize_email(email)
        if not _EMAIL_RE.match(email):
            raise SignUpError("Unable to validate email address: invalid format")
        if len(password) < self._settings.password_min_length:
            raise SignUpError(
                f"Password should be at least {self._settings.password_min_length} characters"
            )
        if password_too_long(password):
            raise SignUpError("Password is too long")

        metadata: dict[str, str] = {}
        if profile is not None:
            metadata = {
                k: v
                for k, v in (
                    ("first_name", profile.first_name),
                    ("last_name", profile.last_name),
                    ("phone", profile.phone),
                )
                if v
            }

        password_hash = await hash_password(password, rounds=self._settings.password_hash_rounds)
        async with session_scope(self._session_factory) as db:
            users = AuthUserRepo(db)
            if await users.get_by_email(email) is not None:
                raise SignUpError("User already registered")
            try:
                user = await users.create(
                    email=email, password_hash=password_hash, user_metadata=metadata
                )
            except IntegrityError as e:
                # A concurrent sign-up took the address between the check and the insert.
                raise SignUpError("User already registered") from e
            issued = await self._open_session(db, user)
            return Principal(id=user.id, email=user.email), issued

    def _session_id_of(self, credentials: SessionCredentials) -> str | None:
        # Expired tokens still identify the session to revoke.
        candidates = (
            (credentials.access_token, "access"),
            (credentials.refresh_token, "refresh"),
        )
        for token, token_type in candidates:
            if not token:
                continue
            try:
                claims = decode_and_validate(
                    cfg=self._cfg, token=token, token_type=token_type, verify_exp=False
                )
            except JwtValidationError:
                continue
            return str(claims["sid"])
        return None


# --- Module Notes -----------------------------------------------------------
# Swapping in a hosted identity provider means another `IdentityService`
# implementation; the resolver, gate and auth service only see the protocol.
