"""API routers for the add-on dev server."""

from .resources import router as resources_router

__all__ = ["resources_router"]
