"""
storefront_admin.auth.jwt

Session token issuing and validation helpers.

Responsibilities:
- Issue access/refresh JWTs bound to a server-side session id (`sid`).
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub/sid/typ).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import jwt
from jwt import InvalidTokenError

TokenType = Literal["access", "refresh"]


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    session_id: str,
    token_type: TokenType,
    ttl: timedelta,
    token_id: str | None = None,
    email: str | None = None,
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "sid": session_id,
        "typ": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if token_id is not None:
        payload["jti"] = token_id
    if email:
        payload["email"] = email
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(
    *,
    cfg: JwtConfig,
    token: str,
    token_type: TokenType,
    verify_exp: bool = True,
) -> dict[str, Any]:
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub", "sid", "typ"],
                "verify_exp": verify_exp,
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e

    # An access token must never be accepted where a refresh token is expected, and vice versa.
    if payload.get("typ") != token_type:
        raise JwtValidationError(f"expected {token_type} token")
    return payload


def seconds_until_expiry(payload: dict[str, Any]) -> float:
    return float(payload["exp"]) - datetime.now(tz=UTC).timestamp()


# --- Module Notes -----------------------------------------------------------
# Tokens are issued and checked only by `auth.identity.LocalIdentityService`;
# everything else treats them as opaque strings.
