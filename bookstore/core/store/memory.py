"""In-memory book storage."""

import threading

from bookstore.api.schemas.books import Book
from bookstore.core.errors import AlreadyExistsError, NotFoundError
from bookstore.core.store.base import BookStore


class MemoryBookStore(BookStore):
    """Simple in-memory store. Books are copied on the way in and out."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._books: dict[str, Book] = {}

    def create(self, book: Book) -> None:
        with self._lock:
            if book.id in self._books:
                raise AlreadyExistsError()
            self._books[book.id] = book.model_copy(deep=True)

    def update(self, book: Book) -> None:
        with self._lock:
            if book.id not in self._books:
                raise NotFoundError()
            self._books[book.id] = book.model_copy(deep=True)

    def get(self, book_id: str) -> Book:
        with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise NotFoundError()
            return book.model_copy(deep=True)

    def get_all(self) -> list[Book]:
        with self._lock:
            return [b.model_copy(deep=True) for b in self._books.values()]

    def delete(self, book_id: str) -> None:
        with self._lock:
            if book_id not in self._books:
                raise NotFoundError()
            del self._books[book_id]
