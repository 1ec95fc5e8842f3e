"""Page routes - portfolio page and now-playing widget."""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ... import profile

router = APIRouter()


class TrackResponse(BaseModel):
    """Display fields of the playing track."""
    title: str
    artists: str
    album_art_url: Optional[str] = None


class NowPlayingResponse(BaseModel):
    """Widget state as exposed to the page. Errors are never included."""
    state: str
    track: Optional[TrackResponse] = None


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Portfolio home page."""
    config = request.app.state.config
    widget = request.app.state.widget
    return request.app.state.templates.TemplateResponse(
        request,
        "index.html",
        {
            "profile": profile,
            "og_image": profile.og_image_url(config.site_url),
            "now_playing": widget.view(),
            "poll_ms": int(config.poll_interval * 1000),
        },
    )


@router.get("/now-playing", response_class=HTMLResponse)
async def now_playing_fragment(request: Request):
    """Widget fragment; empty when there is nothing to show."""
    widget = request.app.state.widget
    return request.app.state.templates.TemplateResponse(
        request,
        "now_playing.html",
        {"now_playing": widget.view()},
    )


@router.get("/api/now-playing", response_model=NowPlayingResponse)
async def now_playing(request: Request):
    """Current widget state as JSON."""
    widget = request.app.state.widget
    view = widget.view()
    return NowPlayingResponse(
        state=widget.status.state.value,
        track=TrackResponse(**view.to_dict()) if view else None,
    )
