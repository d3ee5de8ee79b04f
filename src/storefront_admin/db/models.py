"""
storefront_admin.db.models

Persistence schema for identity and account records.

Responsibilities:
- Define ORM models backing the identity service and the account directory:
  - AuthUser: sign-in identity (email + bcrypt hash)
  - AuthSession: server-side session that access/refresh tokens are bound to
  - AdminUser: staff account with role and per-account permission grants
  - Customer: storefront customer account linked to an AuthUser
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront_admin.auth.models import AdminRole, SubscriptionStatus
from storefront_admin.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


def _new_id() -> str:
    return str(uuid.uuid4())


class AuthUser(Base):
    __tablename__ = "auth_users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    # Free-form profile fields captured at sign-up.
    user_metadata: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("auth_users.id"), nullable=False, index=True
    )
    # Id of the only refresh token currently valid for this session (rotated on refresh).
    refresh_token_id: Mapped[str] = mapped_column(String(36), nullable=False, default=_new_id)

    expires_at: Mapped[datetime] = mapped_column(nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    refreshed_at: Mapped[datetime | None] = mapped_column(nullable=True)


class AdminUser(Base):
    __tablename__ = "admin_users"

    # Same id as the AuthUser the staff member signs in with.
    id: Mapped[str] = mapped_column(String(36), ForeignKey("auth_users.id"), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    role: Mapped[AdminRole] = mapped_column(Enum(AdminRole), nullable=False)
    permissions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    last_login: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    auth_user_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("auth_users.id"), nullable=True, unique=True
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    subscription_status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus), nullable=False, default=SubscriptionStatus.free
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("ix_customers_auth_user_active", "auth_user_id", "is_active"),)


# --- Module Notes -----------------------------------------------------------
# Enum values are stored in DB; treat AdminRole/SubscriptionStatus as a stable contract.
