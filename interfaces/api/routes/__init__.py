"""API route registrations."""

from interfaces.api.routes.blob_routes import router as blob_router
from interfaces.api.routes.object_routes import router as object_router

__all__ = ["blob_router", "object_router"]
