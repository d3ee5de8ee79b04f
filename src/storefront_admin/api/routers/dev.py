from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from storefront_admin.api.deps import provisioning_dep, settings_dep
from storefront_admin.api.schemas import AdminAccountOut
from storefront_admin.auth.models import AdminRole
from storefront_admin.services.provisioning import ProvisioningError, ProvisioningService
from storefront_admin.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class AdminProvisionRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=8, max_length=72)
    role: AdminRole = AdminRole.admin
    permissions: dict[str, bool] = Field(default_factory=dict)
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)


def _dev_only(settings: Settings = Depends(settings_dep)) -> None:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")


@router.post(
    "/admin-accounts",
    response_model=AdminAccountOut,
    status_code=HTTP_201_CREATED,
    dependencies=[Depends(_dev_only)],
)
async def provision_admin(
    body: AdminProvisionRequest,
    provisioning: ProvisioningService = Depends(provisioning_dep),
) -> AdminAccountOut:
    try:
        account = await provisioning.provision_admin(
            email=body.email,
            password=body.password,
            role=body.role,
            permissions=body.permissions,
            first_name=body.first_name,
            last_name=body.last_name,
        )
    except ProvisioningError as e:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e
    return AdminAccountOut.from_account(account)


@router.post(
    "/admin-accounts/{admin_id}/deactivate",
    response_model=AdminAccountOut,
    dependencies=[Depends(_dev_only)],
)
async def deactivate_admin(
    admin_id: str,
    provisioning: ProvisioningService = Depends(provisioning_dep),
) -> AdminAccountOut:
    try:
        account = await provisioning.set_admin_active(admin_id, is_active=False)
    except ProvisioningError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e
    return AdminAccountOut.from_account(account)
