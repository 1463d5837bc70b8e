"""FastAPI dependencies for injection."""
from fastapi import Request

from core.config import Settings
from services.bookmark_store import BookmarkStore


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_bookmark_store(request: Request) -> BookmarkStore:
    """The bookmark store owned by the running application."""
    return request.app.state.bookmark_store
