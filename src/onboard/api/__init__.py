"""Device API routers."""

from .api_router import router as api_router

__all__ = ["api_router"]
