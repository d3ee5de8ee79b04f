"""
storefront_admin.db.repositories.auth_sessions

Repository for `AuthSession` entities.

Responsibilities:
- Open sessions at sign-in, rotate refresh token ids, revoke at sign-out.
- Answer "is this session still live?" for every authenticated request.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_admin.db.models import AuthSession


class AuthSessionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, user_id: str, expires_at: datetime) -> AuthSession:
        auth_session = AuthSession(
            user_id=user_id,
            refresh_token_id=str(uuid.uuid4()),
            expires_at=expires_at,
        )
        self._session.add(auth_session)
        await self._session.flush()
        return auth_session

    async def get(self, session_id: str) -> AuthSession | None:
        return await self._session.get(AuthSession, session_id)

    async def get_live(self, session_id: str, *, now: datetime) -> AuthSession | None:
        auth_session = await self._session.get(AuthSession, session_id)
        if auth_session is None or auth_session.revoked_at is not None:
            return None
        if auth_session.expires_at <= now:
            return None
        return auth_session

    async def rotate_refresh_token(
        self,
        session_id: str,
        *,
        expected_token_id: str,
        expires_at: datetime,
        now: datetime,
    ) -> str | None:
        """
        Swap the refresh token id in one conditional UPDATE.

        Returns the new id, or None when the session is gone, revoked, expired,
        or no longer holds `expected_token_id` (the token was already spent).
        """
        new_token_id = str(uuid.uuid4())
        stmt = (
            update(AuthSession)
            .where(
                AuthSession.id == session_id,
                AuthSession.refresh_token_id == expected_token_id,
                AuthSession.revoked_at.is_(None),
                AuthSession.expires_at > now,
            )
            .values(refresh_token_id=new_token_id, expires_at=expires_at, refreshed_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            return None
        return new_token_id

    async def revoke(self, session_id: str, *, now: datetime) -> None:
        auth_session = await self._session.get(AuthSession, session_id, with_for_update=True)
        if auth_session is None or auth_session.revoked_at is not None:
            return
        auth_session.revoked_at = now


# --- Module Notes -----------------------------------------------------------
# Sessions are never deleted here; revocation is a timestamp so sign-outs stay auditable.
