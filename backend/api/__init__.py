"""
API Routers
"""
from .alerts import router as alerts_router, internal_router

__all__ = ["alerts_router", "internal_router"]
