"""
storefront_admin.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Hold the gate's fixed redirect destinations and the route permission map.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_route_permissions() -> dict[str, list[str]]:
    return {
        "/admin/users": ["manage_users"],
        "/admin/subscriptions": ["manage_subscriptions"],
        "/admin/payments": ["manage_payments"],
        "/admin/analytics": ["view_analytics"],
        "/admin/settings": ["manage_settings"],
    }


class Settings(BaseSettings):
    """
    Strict env-driven configuration with defaults safe for local dev.
    A single settings object is injected across layers.
    """

    model_config = SettingsConfigDict(env_prefix="SFA_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "storefront-admin"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Session tokens
    jwt_alg: str = "HS256"
    jwt_issuer: str = "storefront-admin"
    jwt_audience: str = "storefront-web"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    access_token_ttl_seconds: int = 60 * 60
    refresh_token_ttl_seconds: int = 30 * 24 * 60 * 60
    # Access tokens this close to expiry are refreshed on the way through the gate.
    session_refresh_leeway_seconds: int = 5 * 60

    # Cookies carrying the session
    access_cookie_name: str = "sfa-access-token"
    refresh_cookie_name: str = "sfa-refresh-token"
    cookie_secure: bool = False

    # Passwords
    password_hash_rounds: int = 12
    password_min_length: int = 8

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./storefront_admin.db"

    # Gate
    admin_path_prefix: str = "/admin"
    customer_protected_prefixes: list[str] = Field(default_factory=lambda: ["/dashboard", "/profile"])
    admin_sign_in_path: str = "/auth/admin-login"
    unauthorized_path: str = "/auth/unauthorized"
    customer_sign_in_path: str = "/auth/login"

    # Route -> permissions required; routes not listed are open to any active admin.
    route_permissions: dict[str, list[str]] = Field(default_factory=default_route_permissions)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `route_permissions` can be overridden with JSON, e.g.
# SFA_ROUTE_PERMISSIONS='{"/admin/users": ["manage_users"]}'.
