"""
storefront_admin.auth

Authentication/authorization package.

Responsibilities:
- Session resolution against the identity service (with refresh).
- Active-account lookup against the account directory.
- Pure role/permission decisions and the route guard that composes them.
- FastAPI dependencies for per-route permission checks.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package depends on a concrete storage backend; the SQL
# implementations live under `storefront_admin.db`.
