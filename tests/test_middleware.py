"""Tests for request logging and Content-Type validation."""

import pytest

from bookstore.api.middleware import DEFAULT_CHAIN, log_requests, parse_media_type, validate_content_type
from bookstore.core.errors import InvalidContentTypeError

BOOK_JSON = '{"id":"978-1","name":"X","authors":["A"],"press":"P"}'


def test_chain_order():
    """Logging wraps validation, which wraps the router."""
    assert DEFAULT_CHAIN == (log_requests, validate_content_type)


@pytest.mark.parametrize(
    "header,expected",
    [
        ("application/json", ("application/json", {})),
        ("Application/JSON; charset=UTF-8", ("application/json", {"charset": "UTF-8"})),
        ('text/plain; charset="utf-8"', ("text/plain", {"charset": "utf-8"})),
        ("application/json;", ("application/json", {})),
    ],
)
def test_parse_media_type(header, expected):
    assert parse_media_type(header) == expected


@pytest.mark.parametrize(
    "header,message",
    [
        ("", "mime: no media type"),
        ("   ", "mime: no media type"),
        ("json", "mime: expected slash after first token"),
        ("application/", "mime: expected token after slash"),
        ("application/json extra", "mime: unexpected content after media subtype"),
        ("application/json; charset", "mime: invalid media parameter"),
    ],
)
def test_parse_media_type_errors(header, message):
    with pytest.raises(InvalidContentTypeError) as exc_info:
        parse_media_type(header)
    assert str(exc_info.value) == message
    assert exc_info.value.status_code == 400


def test_text_plain_rejected_with_415(client, store):
    """Wrong media type never reaches the handler."""
    response = client.post("/book", content=BOOK_JSON, headers={"Content-Type": "text/plain"})
    assert response.status_code == 415
    assert response.text == "invalid Content-Type"
    assert store.get_all() == []


def test_application_json_proceeds(client, store):
    response = client.post(
        "/book", content=BOOK_JSON, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 200
    assert len(store.get_all()) == 1


def test_json_with_charset_proceeds(client):
    response = client.post(
        "/book",
        content=BOOK_JSON,
        headers={"Content-Type": "application/json; charset=utf-8"},
    )
    assert response.status_code == 200


def test_missing_content_type_rejected_with_400(client, store):
    response = client.post("/book", content=BOOK_JSON)
    assert response.status_code == 400
    assert response.text == "mime: no media type"
    assert store.get_all() == []


def test_unparseable_content_type_rejected_with_400(client):
    response = client.post("/book/978-1", content=BOOK_JSON, headers={"Content-Type": "json"})
    assert response.status_code == 400
    assert "expected slash" in response.text


def test_unknown_write_method_is_validated_first(client):
    """Validation runs before routing, so even unrouted write methods get checked."""
    response = client.put("/book/978-1", content=BOOK_JSON, headers={"Content-Type": "text/plain"})
    assert response.status_code == 415


def test_read_only_methods_skip_validation(client, store, sample_book):
    store.create(sample_book)
    headers = {"Content-Type": "text/plain"}
    assert client.get("/book/978-1", headers=headers).status_code == 200
    assert client.delete("/book/978-1", headers=headers).status_code == 200
