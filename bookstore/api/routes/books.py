"""Book CRUD endpoints."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from starlette.concurrency import run_in_threadpool

from bookstore.api.schemas.books import Book
from bookstore.core.errors import DecodeError, EncodeError, StoreError
from bookstore.core.store.base import BookStore

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/book", tags=["Books"])

_BOOK = TypeAdapter(Book)
_BOOK_LIST = TypeAdapter(list[Book])


def get_store(request: Request) -> BookStore:
    """Storage provider the app was built with."""
    return request.app.state.store


StoreDep = Annotated[BookStore, Depends(get_store)]


async def decode_book(request: Request) -> Book:
    """Decode the request body into a Book."""
    body = await request.body()
    try:
        return _BOOK.validate_json(body)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" if err["loc"] else err["msg"]
            for err in e.errors()
        )
        raise DecodeError(details) from e


def encode(adapter: TypeAdapter, value: Any) -> bytes:
    """Serialize a response payload to JSON."""
    try:
        return adapter.dump_json(value)
    except PydanticSerializationError as e:
        raise EncodeError(str(e)) from e


def bad_request(error: Exception) -> PlainTextResponse:
    logger.info("Request failed", error=str(error), error_type=type(error).__name__)
    return PlainTextResponse(str(error), status_code=400)


def json_response(adapter: TypeAdapter, value: Any) -> Response:
    try:
        content = encode(adapter, value)
    except EncodeError as e:
        logger.error("Response encoding failed", error=str(e))
        return PlainTextResponse(str(e), status_code=500)
    return Response(content=content, media_type="application/json")


@router.post("", response_class=PlainTextResponse)
async def create_book(request: Request, store: StoreDep) -> Response:
    """Store a new book. The caller supplies the id."""
    try:
        book = await decode_book(request)
        await run_in_threadpool(store.create, book)
    except (DecodeError, StoreError) as e:
        return bad_request(e)
    return PlainTextResponse("create ok")


@router.post("/{book_id}", response_class=PlainTextResponse)
async def update_book(book_id: str, request: Request, store: StoreDep) -> Response:
    """Replace an existing book; the id in the path wins over the body."""
    try:
        book = await decode_book(request)
        book.id = book_id
        await run_in_threadpool(store.update, book)
    except (DecodeError, StoreError) as e:
        return bad_request(e)
    return PlainTextResponse("update ok")


@router.get("/{book_id}", response_model=Book)
async def get_book(book_id: str, store: StoreDep) -> Response:
    """Get a single book."""
    try:
        book = await run_in_threadpool(store.get, book_id)
    except StoreError as e:
        return bad_request(e)
    return json_response(_BOOK, book)


@router.get("", response_model=list[Book])
async def get_all_books(store: StoreDep) -> Response:
    """List every stored book."""
    try:
        books = await run_in_threadpool(store.get_all)
    except StoreError as e:
        return bad_request(e)
    return json_response(_BOOK_LIST, books)


@router.delete("/{book_id}", response_class=PlainTextResponse)
async def delete_book(book_id: str, store: StoreDep) -> Response:
    """Delete a book."""
    try:
        await run_in_threadpool(store.delete, book_id)
    except StoreError as e:
        return bad_request(e)
    return PlainTextResponse("delete ok")
