"""
storefront_admin.api.routers.auth

Sign-in, sign-up and sign-out endpoints plus the auth page descriptors.

Responsibilities:
- Translate AuthService results into session cookies.
- Translate AuthError subclasses into inline 400/401/403 responses.
- Describe the three gate destinations (admin sign-in, customer sign-in, unauthorized).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
)

from storefront_admin.api.deps import auth_service_dep, settings_dep
from storefront_admin.api.schemas import AdminAccountOut, CustomerAccountOut
from storefront_admin.auth.cookies import clear_credentials, read_credentials, write_credentials
from storefront_admin.auth.errors import (
    AdminAccessRequiredError,
    InvalidCredentialsError,
    SignUpError,
)
from storefront_admin.auth.models import CustomerProfile
from storefront_admin.auth.service import AuthService, CustomerSignIn
from storefront_admin.settings import Settings

router = APIRouter(prefix="/auth", tags=["auth"])


class SignInRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=1024)


class SignUpRequest(SignInRequest):
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(default=None, max_length=64)


class AdminSignInResponse(BaseModel):
    user_id: str
    account: AdminAccountOut
    redirect_to: str


class CustomerSignInResponse(BaseModel):
    user_id: str
    email: str
    customer: CustomerAccountOut | None = None
    redirect_to: str


def _customer_response(result: CustomerSignIn) -> CustomerSignInResponse:
    return CustomerSignInResponse(
        user_id=result.principal.id,
        email=result.principal.email,
        customer=CustomerAccountOut.from_account(result.customer) if result.customer else None,
        redirect_to="/dashboard",
    )


@router.get("/admin-login")
async def admin_login_page() -> dict[str, Any]:
    return {
        "title": "Admin Login",
        "message": "Sign in with an administrator account to access the dashboard.",
        "submit_to": "/auth/admin-login",
    }


@router.get("/login")
async def customer_login_page() -> dict[str, Any]:
    return {
        "title": "Sign In",
        "message": "Sign in to your account.",
        "submit_to": "/auth/login",
        "links": {"sign_up": "/auth/signup"},
    }


@router.get("/unauthorized")
async def unauthorized_page() -> dict[str, Any]:
    # Signed in, but not as an active admin: no "log in again" prompt here.
    return {
        "title": "Access Denied",
        "message": "You don't have permission to access this area",
        "detail": "This area is restricted to authorized administrators only.",
        "links": {"home": "/", "customer_login": "/auth/login"},
    }


@router.post("/admin-login", response_model=AdminSignInResponse)
async def admin_sign_in(
    body: SignInRequest,
    response: Response,
    auth: AuthService = Depends(auth_service_dep),
    settings: Settings = Depends(settings_dep),
) -> AdminSignInResponse | JSONResponse:
    try:
        result = await auth.sign_in_admin(body.email, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=str(e)) from e
    except AdminAccessRequiredError as e:
        denied = JSONResponse(status_code=HTTP_403_FORBIDDEN, content={"detail": str(e)})
        # Drop whatever session cookies the browser still holds.
        clear_credentials(denied, settings)
        return denied

    write_credentials(response, result.credentials, settings)
    return AdminSignInResponse(
        user_id=result.principal.id,
        account=AdminAccountOut.from_account(result.account),
        redirect_to=settings.admin_path_prefix,
    )


@router.post("/login", response_model=CustomerSignInResponse)
async def customer_sign_in(
    body: SignInRequest,
    response: Response,
    auth: AuthService = Depends(auth_service_dep),
    settings: Settings = Depends(settings_dep),
) -> CustomerSignInResponse:
    try:
        result = await auth.sign_in_customer(body.email, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=str(e)) from e

    write_credentials(response, result.credentials, settings)
    return _customer_response(result)


@router.post("/signup", response_model=CustomerSignInResponse, status_code=HTTP_201_CREATED)
async def customer_sign_up(
    body: SignUpRequest,
    response: Response,
    auth: AuthService = Depends(auth_service_dep),
    settings: Settings = Depends(settings_dep),
) -> CustomerSignInResponse:
    profile = CustomerProfile(
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
    )
    try:
        result = await auth.sign_up_customer(body.email, body.password, profile)
    except SignUpError as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e)) from e

    write_credentials(response, result.credentials, settings)
    return _customer_response(result)


@router.post("/logout", status_code=HTTP_204_NO_CONTENT)
async def sign_out(
    request: Request,
    auth: AuthService = Depends(auth_service_dep),
    settings: Settings = Depends(settings_dep),
) -> Response:
    await auth.sign_out(read_credentials(request, settings))
    response = Response(status_code=HTTP_204_NO_CONTENT)
    clear_credentials(response, settings)
    return response


# --- Module Notes -----------------------------------------------------------
# These endpoints sit outside the admin and customer areas, so the route guard
# lets them through without a session.
