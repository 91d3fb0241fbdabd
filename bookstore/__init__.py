"""Bookstore: a small HTTP CRUD service for book records."""

__version__ = "1.0.0"
