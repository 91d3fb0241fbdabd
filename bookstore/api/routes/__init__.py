"""API routes."""

from bookstore.api.routes.books import router as books_router
from bookstore.api.routes.health import router as health_router

__all__ = ["health_router", "books_router"]
