"""System API routes - health."""

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime
    now_playing_source: str
    widget_mounted: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns 200 OK if the service is healthy.
    """
    widget = request.app.state.widget
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        now_playing_source=widget.source.name,
        widget_mounted=widget.mounted,
    )
