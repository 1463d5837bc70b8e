"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from services.utils import extract_domain


def validate_and_normalize_tags(tags: list[str]) -> list[str]:
    """
    Normalize tags: strip whitespace, drop empty entries, collapse duplicates.

    Tags are free-form and case is preserved. The first occurrence of a
    duplicate keeps its position.
    """
    normalized: list[str] = []
    for tag in tags:
        normalized_tag = tag.strip()
        if normalized_tag and normalized_tag not in normalized:
            normalized.append(normalized_tag)
    return normalized


def validate_http_url(url: str) -> str:
    """Require an absolute http(s) URL with a hostname. Returns the stripped URL."""
    url = url.strip()
    if extract_domain(url) is None:
        raise ValueError("Invalid URL: must be an absolute http or https URL")
    return url


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class CamelModel(BaseModel):
    """Base schema serialized with camelCase field names (imageUrl, savedAt)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BookmarkCreate(CamelModel):
    """
    Schema for creating a new bookmark.

    A missing title or description is filled from the page metadata before
    the bookmark is stored.
    """

    # Stored exactly as given (after trimming); no trailing-slash normalization
    url: str
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    tags: list[str] = []

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        """Validate the URL scheme and hostname."""
        return validate_http_url(v)

    @field_validator("title", "description", "image_url")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank strings as missing."""
        return _blank_to_none(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        """Normalize tags."""
        return validate_and_normalize_tags(v)


class BookmarkUpdate(CamelModel):
    """
    Schema for a partial bookmark update.

    Only fields present in the request body are applied. `id`, `domain` and
    `savedAt` are not settable.
    """

    model_config = ConfigDict(extra="forbid")

    url: str | None = None
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    tags: list[str] | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str | None) -> str:
        """Validate the URL if provided; it cannot be cleared."""
        if v is None:
            raise ValueError("URL cannot be null")
        return validate_http_url(v)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str:
        """Title may be changed but not emptied."""
        v = _blank_to_none(v)
        if v is None:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("description", "image_url")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank strings as cleared."""
        return _blank_to_none(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str]:
        """Normalize tags; null clears them."""
        return validate_and_normalize_tags(v or [])


class BookmarkResponse(CamelModel):
    """Schema for bookmark responses."""

    id: str
    url: str
    title: str
    description: str | None
    image_url: str | None
    domain: str
    tags: list[str]
    saved_at: datetime


class UrlMetadataResponse(CamelModel):
    """Schema for URL metadata preview (before saving a bookmark)."""

    title: str
    description: str
    image_url: str
