"""
Paste routes.
Handles create, fetch (API), and view (HTML) operations.

Handlers are plain functions so FastAPI runs them in its threadpool and
blocking storage calls never stall the event loop.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from pastebin.config import settings
from pastebin.deps import get_store
from pastebin.errors import NotFound
from pastebin.models import ErrorResponse, PasteCreate, PasteResponse, PasteView
from pastebin.store import PasteStore
from pastebin.templates import render_paste

router = APIRouter()
logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _format_timestamp(ms: Optional[int]) -> Optional[str]:
    """ms since epoch -> ISO 8601 UTC, e.g. 2024-01-01T00:00:00.000Z"""
    if ms is None:
        return None
    dt = EPOCH + timedelta(milliseconds=ms)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _share_url(request: Request, paste_id: str) -> str:
    base_url = (settings.APP_DOMAIN or str(request.base_url)).rstrip("/")
    return f"{base_url}/p/{paste_id}"


@router.post(
    "/api/pastes",
    response_model=PasteResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_paste(
    paste: PasteCreate,
    request: Request,
    store: PasteStore = Depends(get_store),
) -> PasteResponse:
    """
    Create a new paste.

    Args:
        paste: Paste data (content, optional ttl_seconds, optional max_views)
        request: HTTP request context, used to build the share URL
        store: Paste store

    Returns:
        Paste ID and shareable URL
    """
    paste_id = store.create(
        content=paste.content,
        ttl_seconds=paste.ttl_seconds,
        max_views=paste.max_views,
    )
    return PasteResponse(id=paste_id, url=_share_url(request, paste_id))


@router.get(
    "/api/pastes/{paste_id}",
    response_model=PasteView,
    responses={404: {"model": ErrorResponse}},
)
def fetch_paste(
    paste_id: str,
    store: PasteStore = Depends(get_store),
) -> PasteView:
    """
    Fetch a paste (API endpoint).
    Each successful fetch counts as one view.
    """
    fetched = store.fetch(paste_id)
    return PasteView(
        content=fetched.content,
        remaining_views=fetched.remaining_views,
        expires_at=_format_timestamp(fetched.expires_at),
    )


@router.get("/p/{paste_id}", response_class=HTMLResponse)
def view_paste(
    paste_id: str,
    store: PasteStore = Depends(get_store),
):
    """
    View a paste as HTML.
    Same visibility rules as the API; each view is counted.
    """
    try:
        fetched = store.fetch(paste_id)
    except NotFound:
        return PlainTextResponse("Not found", status_code=404)

    return HTMLResponse(render_paste(fetched.content))
