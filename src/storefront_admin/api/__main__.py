"""
storefront_admin.api.__main__

Entrypoint for running the service via `python -m storefront_admin.api`.
"""

from __future__ import annotations

import uvicorn

from storefront_admin.api.app import create_app
from storefront_admin.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        # Secure cookies depend on the scheme the ingress saw.
        proxy_headers=True,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
