"""API routes package."""

from archiver.routes.archive_routes import router as archive_router

__all__ = ["archive_router"]
