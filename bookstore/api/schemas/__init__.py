"""API schemas."""

from bookstore.api.schemas.books import Book

__all__ = ["Book"]
