"""
Pydantic models for stored pastes and request/response validation.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class Paste(BaseModel):
    """A stored paste row. Only ``views`` ever changes after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    created_at: int = Field(..., description="Creation time (ms since epoch)")
    ttl_seconds: Optional[int] = None
    max_views: Optional[int] = None
    views: int = 0


class FetchedPaste(BaseModel):
    """Result of a successful fetch."""

    content: str
    remaining_views: Optional[int] = None
    expires_at: Optional[int] = Field(None, description="Expiry time (ms since epoch)")


class PasteCreate(BaseModel):
    """Schema for creating a new paste.

    Only types are checked here; emptiness and ranges are enforced by the store.
    """
    content: StrictStr = Field(..., description="Text content (required, non-empty)")
    ttl_seconds: Optional[StrictInt] = Field(None, description="Optional TTL in seconds")
    max_views: Optional[StrictInt] = Field(None, description="Optional view limit")


class PasteResponse(BaseModel):
    """Schema for paste creation response."""
    id: str = Field(..., description="Unique paste ID")
    url: str = Field(..., description="Shareable URL to view the paste")


class PasteView(BaseModel):
    """Schema for viewing/fetching a paste."""
    content: str = Field(..., description="Paste text content")
    remaining_views: Optional[int] = Field(None, description="Views left (null if unlimited)")
    expires_at: Optional[str] = Field(None, description="Expiry timestamp (ISO 8601, null if no TTL)")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str
