"""
storefront_admin.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
- Provide the SQL-backed account directory used by the gate.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Identity tables are owned by `auth.identity.LocalIdentityService`; account
# tables are read through `db.directory.SqlAccountDirectory`.
