"""
Pastebin Lite - Main FastAPI application.
"""
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from pastebin.config import settings
from pastebin.database import InMemoryStore, connect_storage
from pastebin.errors import PasteError
from pastebin.routes import health, pastes
from pastebin.store import PasteStore
from pastebin.templates import CREATE_PAGE

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def paste_error_handler(request: Request, exc: PasteError) -> JSONResponse:
    """Render store errors as {"error": ...}; server errors stay generic."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        message = "internal server error"
    else:
        message = str(exc)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or wrongly typed bodies are client errors (400), not 422."""
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"error": "invalid request"})

    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
    return JSONResponse(
        status_code=400,
        content={"error": f"invalid {field}: {first.get('msg', 'invalid value')}"},
    )


def create_app(store: Optional[PasteStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        store: Paste store to serve from. When omitted, one is built from
            settings at startup.
    """
    app = FastAPI(
        title="Pastebin Lite",
        description="A lightweight Pastebin-like application for sharing text",
        version="1.0.0",
    )
    app.state.store = store

    # Add CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PasteError, paste_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include route modules
    app.include_router(health.router)
    app.include_router(pastes.router)

    @app.on_event("startup")
    async def startup_event():
        """Startup event handler."""
        logger.info("Pastebin Lite application starting...")

        if app.state.store is None:
            app.state.store = PasteStore(connect_storage(settings))

        if isinstance(app.state.store.storage, InMemoryStore):
            logger.warning("DATABASE: Using IN-MEMORY storage")
            logger.warning("   Data will NOT persist across server restarts!")
        else:
            logger.info("DATABASE: Connected to Redis")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Shutdown event handler."""
        logger.info("Pastebin Lite application shutting down...")

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def root():
        """Serve the create paste HTML page."""
        return CREATE_PAGE

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pastebin.main:app",
        host=settings.HOST,
        port=settings.PORT,
    )
