"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and DB readiness probe works in test mode.
"""

from __future__ import annotations

import httpx
import pytest

from storefront_admin.api.app import create_app
from storefront_admin.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(settings: Settings) -> None:
    app = create_app(settings=settings)

    # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/healthz")
            assert r.status_code == 200
            assert r.json()["status"] == "ok"

            r = await client.get("/readyz")
            assert r.status_code == 200
            assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_unknown_public_path_is_not_gated(client) -> None:
    r = await client.get("/nowhere")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_dev_router_is_hidden_in_prod(tmp_path) -> None:
    settings = Settings(
        env="prod",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'prod.db'}",
        jwt_secret="prod-secret-prod-secret-prod-secret",
    )
    app = create_app(settings=settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.post(
            "/v1/dev/admin-accounts",
            json={"email": "x@example.com", "password": "long-enough-pw"},
        )
    assert r.status_code == 404


# --- Module Notes -----------------------------------------------------------
# Endpoint-level behavior of the gate lives in tests/test_api.py.
