"""FastAPI application entry point."""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routers import bookmarks, health, metadata, tags
from core.config import Settings, get_settings
from services.bookmark_store import BookmarkStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the bookmark store on startup and empty it on shutdown."""
    settings: Settings = app.state.settings
    app.state.bookmark_store = BookmarkStore()

    logger.info("%s started", settings.app_name)
    try:
        yield
    finally:
        app.state.bookmark_store.clear()
        logger.info("%s stopped", settings.app_name)


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"message": ...}."""
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Render request validation errors as 400 with a readable message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return _error(400, "Invalid request data: " + "; ".join(parts))


async def unhandled_exception_handler(request: Request, _exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide details from the caller."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Each call gets its own store, so tests stay isolated."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="A personal bookmark service with metadata enrichment, tagging and search.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    api_router = APIRouter(prefix="/api")
    api_router.include_router(bookmarks.router)
    api_router.include_router(tags.router)
    api_router.include_router(metadata.router)

    app.include_router(api_router)
    app.include_router(health.router)

    return app
