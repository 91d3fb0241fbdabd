"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from bookstore.api.schemas.books import Book
from bookstore.config import Settings
from bookstore.core.store import MemoryBookStore
from bookstore.main import create_app


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return MemoryBookStore()


@pytest.fixture
def app(store, settings):
    """Application wired to the in-memory store."""
    return create_app(store, settings, provider_name="mem")


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_book():
    """A complete book record."""
    return Book(id="978-1", name="X", authors=["A"], press="P")
