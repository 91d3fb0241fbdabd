"""Exception hierarchy shared by the store, registry, server and API layers."""


class BookstoreError(Exception):
    """Base class for all bookstore errors."""


# --- Storage ---


class StoreError(BookstoreError):
    """A storage provider rejected an operation."""


class NotFoundError(StoreError):
    """No book is stored under the requested id."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class AlreadyExistsError(StoreError):
    """A book with the same id is already stored."""

    def __init__(self, message: str = "exist") -> None:
        super().__init__(message)


# --- Registry ---


class UnknownProviderError(BookstoreError):
    """No storage provider is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"store: unknown provider {name}")


class ProviderRegistrationError(BookstoreError):
    """
    A provider was registered incorrectly.

    This is a programming error raised while the process is being wired
    together; nothing in the service catches it.
    """


# --- Server lifecycle ---


class ServerError(BookstoreError):
    """The HTTP listener could not be started, run or stopped."""


class BindError(ServerError):
    """The listener failed before it reached the running state."""


class ServerRuntimeError(ServerError):
    """The listener stopped on its own after it was running."""


class ShutdownTimeoutError(ServerError):
    """Graceful shutdown did not finish before the deadline."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


# --- Request pipeline ---


class DecodeError(BookstoreError):
    """A request body could not be decoded into a book."""


class EncodeError(BookstoreError):
    """A response payload could not be encoded."""


class InvalidContentTypeError(BookstoreError):
    """A write request did not declare an acceptable Content-Type."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.status_code = status_code
        super().__init__(message)
