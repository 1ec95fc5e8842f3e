"""Spotify token refresh route."""

from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from ...spotify_auth import refresh_access_token

router = APIRouter()


@router.post("/refresh")
async def refresh(request: Request):
    """
    Exchange the server-held refresh token for a new access token.

    Returns 404 unless expose_refresh_endpoint is set.
    """
    config = request.app.state.config
    if not config.expose_refresh_endpoint:
        raise HTTPException(status_code=404, detail="Not Found")

    client: Optional[httpx.AsyncClient] = getattr(request.app.state, "http_client", None)
    result = await refresh_access_token(config, client)
    if result.ok:
        return result.to_dict()

    status_code = 500 if not config.has_spotify_credentials() else 502
    return JSONResponse(status_code=status_code, content={"error": result.error})
