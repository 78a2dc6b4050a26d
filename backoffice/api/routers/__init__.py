"""API routers for the back office."""

from . import access
from . import admin_pages
from . import audit

__all__ = [
    "access",
    "admin_pages",
    "audit",
]
