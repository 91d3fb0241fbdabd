"""Book storage providers."""

from bookstore.core.store.base import BookStore
from bookstore.core.store.memory import MemoryBookStore

__all__ = ["BookStore", "MemoryBookStore", "register_builtin_providers"]


def register_builtin_providers(registry) -> None:
    """Register every storage provider that ships with the service."""
    registry.register("mem", MemoryBookStore())
