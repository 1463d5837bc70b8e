"""Bookmark record held by the in-memory store."""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Bookmark:
    """A saved URL plus display metadata and tags."""

    id: str
    url: str
    title: str
    domain: str
    saved_at: datetime
    description: str | None = None
    image_url: str | None = None
    tags: list[str] = field(default_factory=list)
    # Creation order; breaks ties between records saved in the same clock tick
    sequence: int = field(default=0, repr=False, compare=False)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against title, description, url and tags."""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in (self.description or "").lower()
            or needle in self.url.lower()
            or any(needle in tag.lower() for tag in self.tags)
        )
