"""Registry mapping provider names to storage provider instances."""

import threading
from contextlib import contextmanager
from typing import Iterator

import structlog

from bookstore.core.errors import ProviderRegistrationError, UnknownProviderError
from bookstore.core.store.base import BookStore

logger = structlog.get_logger(__name__)


class ReadWriteLock:
    """
    Multiple-reader / single-writer lock.

    Any number of readers may hold the lock at once; a writer holds it alone.
    Waiting writers block new readers so registration cannot starve.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ProviderRegistry:
    """
    Table of storage providers keyed by name.

    Build one at process start, register the available providers, then hand
    it to whatever constructs the service. Registration is append-only.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._providers: dict[str, BookStore] = {}

    def register(self, name: str, provider: BookStore | None) -> None:
        """
        Register a provider under a unique name.

        Raises:
            ProviderRegistrationError: if provider is None or name is taken
        """
        with self._lock.write():
            if provider is None:
                raise ProviderRegistrationError("store: Register provider is nil")
            if name in self._providers:
                raise ProviderRegistrationError(
                    f"store: Register called twice for provider {name}"
                )
            self._providers[name] = provider
        logger.debug("Store provider registered", provider=name)

    def resolve(self, name: str) -> BookStore:
        """Return the provider registered under name."""
        with self._lock.read():
            provider = self._providers.get(name)
        if provider is None:
            raise UnknownProviderError(name)
        return provider

    def names(self) -> list[str]:
        """Sorted names of all registered providers."""
        with self._lock.read():
            return sorted(self._providers)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._providers

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._providers)
