"""What's On events and RSVPs domain"""

from .router import router

__all__ = ["router"]
