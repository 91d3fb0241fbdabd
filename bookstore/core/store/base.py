"""Base storage provider interface."""

from abc import ABC, abstractmethod

from bookstore.api.schemas.books import Book


class BookStore(ABC):
    """Abstract base class for book storage providers."""

    @abstractmethod
    def create(self, book: Book) -> None:
        """
        Store a new book.

        Raises:
            AlreadyExistsError: if a book with the same id is stored
        """
        pass

    @abstractmethod
    def update(self, book: Book) -> None:
        """
        Replace the stored book that has the same id.

        Raises:
            NotFoundError: if no book with that id is stored
        """
        pass

    @abstractmethod
    def get(self, book_id: str) -> Book:
        """
        Return the book stored under book_id.

        Raises:
            NotFoundError: if no book with that id is stored
        """
        pass

    @abstractmethod
    def get_all(self) -> list[Book]:
        """Return every stored book, in no particular order."""
        pass

    @abstractmethod
    def delete(self, book_id: str) -> None:
        """
        Remove the book stored under book_id.

        Raises:
            NotFoundError: if no book with that id is stored
        """
        pass
