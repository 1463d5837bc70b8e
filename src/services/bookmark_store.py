"""
In-memory bookmark store.

The store is an explicitly constructed object owned by the application (see
api.main.lifespan) and handed to request handlers through a dependency. Every
operation takes the instance lock, so it is safe to share across threads.
"""
import itertools
import logging
import threading
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, validate_and_normalize_tags
from services.exceptions import BookmarkNotFoundError, InvalidBookmarkError
from services.utils import extract_domain

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"url", "title", "description", "image_url", "tags"})


def _newest_first(bookmarks: Iterable[Bookmark]) -> list[Bookmark]:
    return sorted(bookmarks, key=lambda b: (b.saved_at, b.sequence), reverse=True)


class BookmarkStore:
    """Addressable collection of bookmarks keyed by id."""

    def __init__(self) -> None:
        self._bookmarks: dict[str, Bookmark] = {}
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)

    def create(self, data: BookmarkCreate) -> Bookmark:
        """
        Store a new bookmark and return it.

        Raises:
            InvalidBookmarkError: If the URL has no parseable http(s) hostname
                or the title is empty.
        """
        domain = extract_domain(data.url)
        if domain is None:
            raise InvalidBookmarkError(f"Invalid URL: {data.url}")
        if not data.title:
            raise InvalidBookmarkError("Title is required")

        with self._lock:
            bookmark_id = str(uuid.uuid4())
            while bookmark_id in self._bookmarks:
                bookmark_id = str(uuid.uuid4())
            bookmark = Bookmark(
                id=bookmark_id,
                url=data.url,
                title=data.title,
                description=data.description,
                image_url=data.image_url,
                domain=domain,
                tags=validate_and_normalize_tags(data.tags),
                saved_at=datetime.now(UTC),
                sequence=next(self._sequence),
            )
            self._bookmarks[bookmark_id] = bookmark

        logger.info("Bookmark created", extra={"bookmark_id": bookmark_id, "domain": domain})
        return bookmark

    def get(self, bookmark_id: str) -> Bookmark | None:
        """Return the bookmark or None if it does not exist."""
        with self._lock:
            return self._bookmarks.get(bookmark_id)

    def list_all(self) -> list[Bookmark]:
        """Return all bookmarks, most recently saved first."""
        with self._lock:
            return _newest_first(self._bookmarks.values())

    def search(self, query: str) -> list[Bookmark]:
        """
        Case-insensitive substring search over title, description, url and tags.

        An empty query matches everything, so the result equals list_all().
        """
        with self._lock:
            return _newest_first(b for b in self._bookmarks.values() if b.matches(query))

    def filter_by_tags(self, tags: list[str]) -> list[Bookmark]:
        """Return bookmarks carrying at least one of the given tags (OR match)."""
        if not tags:
            return self.list_all()
        wanted = set(tags)
        with self._lock:
            return _newest_first(
                b for b in self._bookmarks.values() if wanted.intersection(b.tags)
            )

    def update(self, bookmark_id: str, changes: dict[str, Any]) -> Bookmark:
        """
        Merge the given fields into an existing bookmark.

        `domain` is re-derived when `url` changes so it always matches the stored URL.

        Raises:
            BookmarkNotFoundError: If the id is unknown.
            InvalidBookmarkError: If a new URL is unparseable, the title is emptied,
                or an unknown field is given.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidBookmarkError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        new_domain = None
        if "url" in changes:
            new_domain = extract_domain(changes["url"])
            if new_domain is None:
                raise InvalidBookmarkError(f"Invalid URL: {changes['url']}")
        if "title" in changes and not changes["title"]:
            raise InvalidBookmarkError("Title is required")

        with self._lock:
            bookmark = self._bookmarks.get(bookmark_id)
            if bookmark is None:
                raise BookmarkNotFoundError(bookmark_id)
            for name, value in changes.items():
                if name == "tags":
                    value = validate_and_normalize_tags(value or [])
                setattr(bookmark, name, value)
            if new_domain is not None:
                bookmark.domain = new_domain
            return bookmark

    def delete(self, bookmark_id: str) -> bool:
        """
        Remove a bookmark.

        Raises:
            BookmarkNotFoundError: If the id is unknown.
        """
        with self._lock:
            if self._bookmarks.pop(bookmark_id, None) is None:
                raise BookmarkNotFoundError(bookmark_id)
        logger.info("Bookmark deleted", extra={"bookmark_id": bookmark_id})
        return True

    def all_tags(self) -> list[str]:
        """Return the distinct tags across all bookmarks, sorted."""
        with self._lock:
            return sorted({tag for b in self._bookmarks.values() for tag in b.tags})

    def count(self) -> int:
        """Return the number of stored bookmarks."""
        with self._lock:
            return len(self._bookmarks)

    def clear(self) -> None:
        """Drop every bookmark. Called when the application shuts down."""
        with self._lock:
            self._bookmarks.clear()
