"""
Health check route.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pastebin.deps import get_store
from pastebin.models import HealthCheck
from pastebin.store import PasteStore

router = APIRouter()


@router.get(
    "/api/healthz",
    response_model=HealthCheck,
    responses={500: {"model": HealthCheck}},
)
def health_check(store: PasteStore = Depends(get_store)):
    """
    Health check endpoint.
    Returns 200 with ok=true if storage is reachable, otherwise 500 with ok=false.
    """
    if store.is_healthy():
        return HealthCheck(ok=True)
    return JSONResponse(status_code=500, content={"ok": False})
