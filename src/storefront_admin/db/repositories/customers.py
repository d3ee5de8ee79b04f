from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_admin.auth.models import SubscriptionStatus
from storefront_admin.db.models import Customer


class CustomerRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        auth_user_id: str,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> Customer:
        customer = Customer(
            auth_user_id=auth_user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            is_active=True,
            subscription_status=SubscriptionStatus.free,
        )
        self._session.add(customer)
        await self._session.flush()
        return customer

    async def get_by_auth_user_id(self, auth_user_id: str) -> Customer | None:
        stmt = select(Customer).where(Customer.auth_user_id == auth_user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()
