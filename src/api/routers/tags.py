"""Tag listing endpoint."""
from fastapi import APIRouter, Depends

from api.dependencies import get_bookmark_store
from services.bookmark_store import BookmarkStore

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[str])
async def list_tags(
    store: BookmarkStore = Depends(get_bookmark_store),
) -> list[str]:
    """Get every distinct tag used across bookmarks, sorted alphabetically."""
    return store.all_tags()
