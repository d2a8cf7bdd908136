"""Gigs domain"""

from .router import applications_router, router

__all__ = ["router", "applications_router"]
