"""
FastAPI dependencies.
"""
from fastapi import Request

from pastebin.store import PasteStore


def get_store(request: Request) -> PasteStore:
    """Paste store attached to the running app."""
    return request.app.state.store
