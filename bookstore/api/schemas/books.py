"""Book schemas."""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class Book(BaseModel):
    """A book record keyed by its caller-assigned id (usually an ISBN)."""

    id: str = Field(default="", description="Book identifier, assigned by the caller")
    name: str = Field(default="", description="Book title")
    authors: list[str] = Field(default_factory=list, description="Authors in credit order")
    press: str = Field(default="", description="Publisher")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept a null body and match keys to fields case-insensitively."""
        if data is None:
            return {}
        if not isinstance(data, dict):
            return data

        normalized: dict[str, Any] = {}
        for key, value in data.items():
            field = key.lower() if isinstance(key, str) else key
            if field in cls.model_fields:
                normalized[field] = value
            else:
                normalized[key] = value
        return normalized

    @field_validator("id", "name", "press", mode="before")
    @classmethod
    def null_to_empty_string(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("authors", mode="before")
    @classmethod
    def null_to_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value
