"""Service layer for bookmark operations that go beyond plain storage."""
import logging

from core.config import Settings
from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.bookmark_store import BookmarkStore
from services.url_scraper import UrlMetadata, fetch_url_metadata

logger = logging.getLogger(__name__)


async def get_url_metadata(url: str, settings: Settings) -> UrlMetadata:
    """Fetch page metadata using the configured timeout, user agent and SSRF guard."""
    return await fetch_url_metadata(
        url,
        timeout=settings.metadata_timeout,
        user_agent=settings.metadata_user_agent,
        block_private=settings.block_private_urls,
    )


async def create_bookmark(
    store: BookmarkStore,
    data: BookmarkCreate,
    settings: Settings,
) -> Bookmark:
    """
    Create a bookmark, filling a missing title or description from the page.

    Values supplied by the caller always win; fetched metadata only fills gaps
    (title, description, image). The fetch never fails, so a bookmark is
    always created for a valid URL.
    """
    if not data.title or not data.description:
        metadata = await get_url_metadata(data.url, settings)
        data = data.model_copy(
            update={
                "title": data.title or metadata.title,
                "description": data.description or metadata.description or None,
                "image_url": data.image_url or metadata.image_url or None,
            },
        )
    return store.create(data)


def update_bookmark(
    store: BookmarkStore,
    bookmark_id: str,
    data: BookmarkUpdate,
) -> Bookmark:
    """Apply only the fields present in the request to the stored bookmark."""
    return store.update(bookmark_id, data.model_dump(exclude_unset=True))
