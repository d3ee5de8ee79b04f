"""
storefront_admin.api.app

FastAPI app factory for the storefront admin service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Wire the auth core: identity service, account directory, session
  resolver, route guard and permission map.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront_admin.api.routers.admin import router as admin_router
from storefront_admin.api.routers.auth import router as auth_router
from storefront_admin.api.routers.customer import router as customer_router
from storefront_admin.api.routers.dev import router as dev_router
from storefront_admin.api.routers.health import router as health_router
from storefront_admin.auth.accounts import AccountDirectory, AccountLookup
from storefront_admin.auth.gate import GatePaths, RouteGuard
from storefront_admin.auth.identity import IdentityService, LocalIdentityService
from storefront_admin.auth.middleware import RouteGuardMiddleware
from storefront_admin.auth.permissions import RoutePermissionMap
from storefront_admin.auth.service import AuthService
from storefront_admin.auth.session import IdentitySessionResolver
from storefront_admin.db.directory import SqlAccountDirectory
from storefront_admin.db.init_db import init_db
from storefront_admin.db.session import create_engine, create_sessionmaker
from storefront_admin.observability.logging import configure_logging, get_logger
from storefront_admin.observability.middleware import RequestContextMiddleware
from storefront_admin.services.provisioning import ProvisioningService
from storefront_admin.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    identity: IdentityService | None = None,
    directory: AccountDirectory | None = None,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    # The engine connects lazily, so it can exist before the app starts serving.
    engine = create_engine(settings)
    sessionmaker = create_sessionmaker(engine)

    identity = identity or LocalIdentityService(settings=settings, session_factory=sessionmaker)
    directory = directory or SqlAccountDirectory(sessionmaker)
    route_permissions = RoutePermissionMap(settings.route_permissions)
    guard = RouteGuard(
        resolver=IdentitySessionResolver(identity),
        accounts=AccountLookup(directory),
        paths=GatePaths.from_settings(settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, protected_routes=len(route_permissions))
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        yield
        # Dispose the engine to close pools/FDs gracefully.
        await engine.dispose()
        log.info("shutdown")

    app = FastAPI(
        title="Storefront Admin",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = sessionmaker
    app.state.directory = directory
    app.state.route_permissions = route_permissions
    app.state.auth_service = AuthService(identity=identity, directory=directory)
    app.state.provisioning = ProvisioningService(settings=settings, session_factory=sessionmaker)

    # Last added runs first: request context wraps the guard so its logs carry the request id.
    app.add_middleware(RouteGuardMiddleware, guard=guard, settings=settings)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(customer_router)
    app.include_router(dev_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; auth decisions
# stay in `storefront_admin.auth`.
