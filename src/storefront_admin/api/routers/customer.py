"""
storefront_admin.api.routers.customer

Customer area (`/dashboard`, `/profile`).

The route guard only requires a signed-in principal here. Admin staff may open
these pages too; they simply have no customer record.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront_admin.api.deps import account_lookup_dep
from storefront_admin.api.schemas import CustomerAccountOut
from storefront_admin.auth.accounts import AccountLookup
from storefront_admin.auth.deps import get_principal
from storefront_admin.auth.models import Principal

router = APIRouter(tags=["customer"])


class CustomerAreaResponse(BaseModel):
    user_id: str
    email: str
    customer: CustomerAccountOut | None = None


async def _customer_area(principal: Principal, accounts: AccountLookup) -> CustomerAreaResponse:
    customer = await accounts.lookup_customer(principal.id)
    return CustomerAreaResponse(
        user_id=principal.id,
        email=principal.email,
        customer=CustomerAccountOut.from_account(customer) if customer else None,
    )


@router.get("/dashboard", response_model=CustomerAreaResponse)
async def customer_dashboard(
    principal: Principal = Depends(get_principal),
    accounts: AccountLookup = Depends(account_lookup_dep),
) -> CustomerAreaResponse:
    return await _customer_area(principal, accounts)


@router.get("/profile", response_model=CustomerAreaResponse)
async def customer_profile(
    principal: Principal = Depends(get_principal),
    accounts: AccountLookup = Depends(account_lookup_dep),
) -> CustomerAreaResponse:
    return await _customer_area(principal, accounts)
