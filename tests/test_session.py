"""
tests.test_session

Session resolver: resolution, transparent refresh, and never raising.
"""

from __future__ import annotations

import pytest

from storefront_admin.auth.errors import RefreshTokenReusedError
from storefront_admin.auth.models import Principal, SessionCredentials
from storefront_admin.auth.session import IdentitySessionResolver

ALICE = Principal(id="u-alice", email="alice@example.com")


@pytest.mark.asyncio
async def test_no_credentials_resolves_to_nobody(identity) -> None:
    identity.fail_lookups = True  # must not even be called
    resolution = await IdentitySessionResolver(identity).resolve(SessionCredentials())
    assert resolution.principal is None
    assert resolution.refreshed is None


@pytest.mark.asyncio
async def test_valid_session_resolves_without_refresh(identity) -> None:
    creds = identity.issue(ALICE)
    resolution = await IdentitySessionResolver(identity).resolve(creds)
    assert resolution.principal == ALICE
    assert resolution.refreshed is None


@pytest.mark.asyncio
async def test_unknown_access_token_without_refresh_token(identity) -> None:
    resolution = await IdentitySessionResolver(identity).resolve(
        SessionCredentials(access_token="garbage")
    )
    assert resolution.principal is None


@pytest.mark.asyncio
async def test_expired_access_token_is_refreshed(identity) -> None:
    creds = identity.issue(ALICE)
    identity.by_access.clear()  # access token no longer accepted

    resolution = await IdentitySessionResolver(identity).resolve(creds)

    assert resolution.principal == ALICE
    assert resolution.refreshed is not None
    assert resolution.refreshed.access_token != creds.access_token
    assert resolution.refreshed.refresh_token != creds.refresh_token


@pytest.mark.asyncio
async def test_refresh_only_credentials_are_refreshed(identity) -> None:
    creds = identity.issue(ALICE)
    resolution = await IdentitySessionResolver(identity).resolve(
        SessionCredentials(refresh_token=creds.refresh_token)
    )
    assert resolution.principal == ALICE
    assert resolution.refreshed is not None


@pytest.mark.asyncio
async def test_near_expiry_session_is_refreshed_proactively(identity) -> None:
    creds = identity.issue(ALICE)
    identity.stale.add(creds.access_token)

    resolution = await IdentitySessionResolver(identity).resolve(creds)

    assert resolution.principal == ALICE
    assert resolution.refreshed is not None


@pytest.mark.asyncio
async def test_failed_proactive_refresh_keeps_original_identity(identity) -> None:
    creds = identity.issue(ALICE)
    identity.stale.add(creds.access_token)
    identity.fail_refresh = True

    resolution = await IdentitySessionResolver(identity).resolve(creds)

    assert resolution.principal == ALICE
    assert resolution.refreshed is None
    assert resolution.stale is False


@pytest.mark.asyncio
async def test_failed_refresh_of_expired_session_is_unauthenticated(identity) -> None:
    creds = identity.issue(ALICE)
    identity.by_access.clear()
    identity.fail_refresh = True

    resolution = await IdentitySessionResolver(identity).resolve(creds)

    assert resolution.principal is None
    assert resolution.refreshed is None
    # The identity service rejected these outright; the client should drop them.
    assert resolution.stale is True


@pytest.mark.asyncio
async def test_identity_backend_error_is_normalized(identity) -> None:
    creds = identity.issue(ALICE)
    identity.fail_lookups = True
    identity.fail_refresh = True

    resolution = await IdentitySessionResolver(identity).resolve(creds)

    assert resolution.principal is None
    # An outage is not a verdict on the cookies.
    assert resolution.stale is False


@pytest.mark.asyncio
async def test_dead_access_token_without_refresh_token_is_stale(identity) -> None:
    resolution = await IdentitySessionResolver(identity).resolve(
        SessionCredentials(access_token="revoked")
    )

    assert resolution.principal is None
    assert resolution.stale is True


@pytest.mark.asyncio
async def test_spent_refresh_token_keeps_cookies(identity) -> None:
    creds = identity.issue(ALICE)
    identity.by_access.clear()

    async def _lost_race(credentials: SessionCredentials):
        raise RefreshTokenReusedError("refresh token already used")

    identity.refresh = _lost_race

    resolution = await IdentitySessionResolver(identity).resolve(creds)

    assert resolution.principal is None
    # A parallel request may have rotated the token and set the replacement.
    assert resolution.stale is False
