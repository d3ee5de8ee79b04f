"""
storefront_admin.api.schemas

Response models shared across routers.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from storefront_admin.auth.models import AdministrativeAccount, CustomerAccount


class AdminAccountOut(BaseModel):
    id: str
    email: str
    role: str
    permissions: dict[str, bool] = Field(default_factory=dict)
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    is_active: bool
    last_login: datetime | None = None

    @classmethod
    def from_account(cls, account: AdministrativeAccount) -> AdminAccountOut:
        return cls(
            id=account.id,
            email=account.email,
            role=account.role.value,
            permissions=dict(account.permissions),
            first_name=account.first_name,
            last_name=account.last_name,
            avatar_url=account.avatar_url,
            is_active=account.is_active,
            last_login=account.last_login,
        )


class CustomerAccountOut(BaseModel):
    id: str
    email: str
    subscription_status: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_account(cls, account: CustomerAccount) -> CustomerAccountOut:
        return cls(
            id=account.id,
            email=account.email,
            subscription_status=account.subscription_status.value,
            first_name=account.first_name,
            last_name=account.last_name,
            phone=account.phone,
            avatar_url=account.avatar_url,
        )
