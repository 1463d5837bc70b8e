"""Bookmark CRUD and search endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_app_settings, get_bookmark_store
from core.config import Settings
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from services import bookmark_service
from services.bookmark_store import BookmarkStore
from services.exceptions import BookmarkNotFoundError, InvalidBookmarkError

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


def _parse_tags(tags: str | None) -> list[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    store: BookmarkStore = Depends(get_bookmark_store),
) -> list[BookmarkResponse]:
    """List all bookmarks, newest first."""
    return [BookmarkResponse.model_validate(b) for b in store.list_all()]


@router.get("/search", response_model=list[BookmarkResponse])
async def search_bookmarks(
    q: str | None = Query(
        default=None, description="Substring search over title, description, url and tags",
    ),
    tags: str | None = Query(
        default=None, description="Comma-separated tags; matches bookmarks with any of them",
    ),
    store: BookmarkStore = Depends(get_bookmark_store),
) -> list[BookmarkResponse]:
    """
    Search or filter bookmarks.

    A non-empty `q` takes precedence over `tags`. With neither, all bookmarks
    are returned.
    """
    tag_list = _parse_tags(tags)
    if q:
        bookmarks = store.search(q)
    elif tag_list:
        bookmarks = store.filter_by_tags(tag_list)
    else:
        bookmarks = store.list_all()
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.post("", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    store: BookmarkStore = Depends(get_bookmark_store),
    settings: Settings = Depends(get_app_settings),
) -> BookmarkResponse:
    """Create a new bookmark, fetching page metadata if title or description is missing."""
    try:
        bookmark = await bookmark_service.create_bookmark(store, data, settings)
    except InvalidBookmarkError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return BookmarkResponse.model_validate(bookmark)


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: str,
    store: BookmarkStore = Depends(get_bookmark_store),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    bookmark = store.get(bookmark_id)
    if bookmark is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    return BookmarkResponse.model_validate(bookmark)


@router.patch("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: str,
    data: BookmarkUpdate,
    store: BookmarkStore = Depends(get_bookmark_store),
) -> BookmarkResponse:
    """Update a bookmark. Only fields present in the body are changed."""
    try:
        bookmark = bookmark_service.update_bookmark(store, bookmark_id, data)
    except BookmarkNotFoundError as e:
        raise HTTPException(status_code=404, detail="Bookmark not found") from e
    except InvalidBookmarkError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: str,
    store: BookmarkStore = Depends(get_bookmark_store),
) -> None:
    """Delete a bookmark."""
    try:
        store.delete(bookmark_id)
    except BookmarkNotFoundError as e:
        raise HTTPException(status_code=404, detail="Bookmark not found") from e
