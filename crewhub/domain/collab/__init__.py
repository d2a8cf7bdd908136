"""Collab posts domain"""

from .router import router

__all__ = ["router"]
