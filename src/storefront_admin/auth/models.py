"""
storefront_admin.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`).
- Define the admin and customer account records the gate works with.
- Define the opaque session credential material carried in cookies.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType


class AdminRole(enum.StrEnum):
    super_admin = "super_admin"
    admin = "admin"
    manager = "manager"
    analyst = "analyst"


class SubscriptionStatus(enum.StrEnum):
    free = "free"
    basic = "basic"
    premium = "premium"
    enterprise = "enterprise"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, independent of any role.
    """

    id: str
    email: str = ""


@dataclass(frozen=True, slots=True)
class AdministrativeAccount:
    """
    Staff-side account record.

    `permissions` holds explicit per-account grants; only a value of exactly
    `True` counts as granted.
    """

    id: str
    role: AdminRole
    permissions: Mapping[str, bool] = field(default_factory=dict)
    is_active: bool = True
    email: str = ""
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    last_login: datetime | None = None

    def __post_init__(self) -> None:
        # Frozen record: expose a read-only view of the grants.
        object.__setattr__(self, "permissions", MappingProxyType(dict(self.permissions)))

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.super_admin


@dataclass(frozen=True, slots=True)
class CustomerAccount:
    id: str
    auth_user_id: str
    is_active: bool = True
    subscription_status: SubscriptionStatus = SubscriptionStatus.free
    email: str = ""
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class SessionCredentials:
    """
    Opaque session credential material.

    Inbound credentials may have either token missing. Credentials issued by
    the identity service carry both tokens and their lifetimes so callers can
    set cookie max-age.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    access_expires_in: int | None = None
    refresh_expires_in: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token


@dataclass(frozen=True, slots=True)
class CustomerProfile:
    # Optional fields captured at customer sign-up.
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


# --- Module Notes -----------------------------------------------------------
# Keep these models free of persistence concerns; `storefront_admin.db.directory`
# maps ORM rows onto them.
