"""Service layer exceptions."""


class InvalidBookmarkError(ValueError):
    """Raised when bookmark input cannot be stored (e.g. unparseable URL)."""


class BookmarkNotFoundError(Exception):
    """Raised when an operation references a bookmark id that does not exist."""

    def __init__(self, bookmark_id: str) -> None:
        self.bookmark_id = bookmark_id
        super().__init__(f"Bookmark not found: {bookmark_id}")
