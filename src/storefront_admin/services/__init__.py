"""
storefront_admin.services

Service layer package.

Responsibilities:
- Account provisioning workflows that sit outside the request-time auth core.
"""

# Package marker.
