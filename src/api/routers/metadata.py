"""URL metadata preview endpoint."""
from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_app_settings
from core.config import Settings
from schemas.bookmark import UrlMetadataResponse
from services.bookmark_service import get_url_metadata

router = APIRouter(tags=["metadata"])


@router.get("/url-metadata", response_model=UrlMetadataResponse)
async def url_metadata(
    url: str | None = Query(default=None, description="Page URL to fetch metadata for"),
    settings: Settings = Depends(get_app_settings),
) -> UrlMetadataResponse:
    """
    Fetch title, description and preview image for a URL without saving it.

    Fetch failures are not errors: the response falls back to the hostname as
    title with empty description and image.
    """
    if not url or not url.strip():
        raise HTTPException(status_code=400, detail="URL is required")

    metadata = await get_url_metadata(url.strip(), settings)
    return UrlMetadataResponse.model_validate(metadata)
