"""Spotify accounts service: token refresh and authorization code exchange.

Both calls authenticate with HTTP Basic built from the client id and secret
and return a ``TokenResult`` instead of raising, so callers can branch on
``result.ok`` without exception handling.
"""

import base64
import logging
import urllib.parse
from typing import Any, Dict, Optional

import httpx

from .config import Config
from .models import TokenResult

logger = logging.getLogger("folio.spotify_auth")

SPOTIFY_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
TOKEN_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/api/token"
AUTHORIZE_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/authorize"

SCOPES = [
    "user-read-currently-playing",
    "user-read-playback-state",
]


def basic_auth_header(client_id: str, client_secret: str) -> str:
    """Build the ``Authorization`` value for the token endpoint."""
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def _token_headers(config: Config) -> Dict[str, str]:
    return {
        "Content-Type": "application/x-www-form-urlencoded",
        "Authorization": basic_auth_header(
            config.spotify_client_id, config.spotify_client_secret
        ),
    }


def _error_message(exc: Exception) -> str:
    return str(exc) or "Unknown error"


def _parse_token_response(response: httpx.Response, failure_prefix: str) -> TokenResult:
    if not response.is_success:
        return TokenResult(error=f"{failure_prefix}: {response.text}")

    data: Dict[str, Any] = response.json()
    if not isinstance(data, dict) or not data.get("access_token"):
        return TokenResult(error=f"{failure_prefix}: no access token in response")
    return TokenResult(
        access_token=data.get("access_token"),
        expires_in=data.get("expires_in"),
        refresh_token=data.get("refresh_token"),
    )


async def refresh_access_token(
    config: Config,
    client: Optional[httpx.AsyncClient] = None,
) -> TokenResult:
    """
    Exchange the configured refresh token for a new access token.

    Stateless: every call is an independent request.

    Args:
        config: Configuration holding client id, secret and refresh token
        client: Optional HTTP client to send the request with

    Returns:
        TokenResult with access_token and expires_in, or error
    """
    if not config.has_spotify_credentials():
        logger.warning("Token refresh skipped: Spotify credentials are not configured")
        return TokenResult(error="Missing Spotify credentials")

    form = {
        "grant_type": "refresh_token",
        "refresh_token": config.spotify_refresh_token,
    }

    try:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                response = await own_client.post(TOKEN_URL, data=form, headers=_token_headers(config))
        else:
            response = await client.post(TOKEN_URL, data=form, headers=_token_headers(config))
        result = _parse_token_response(response, "Failed to refresh token")
    except Exception as e:
        result = TokenResult(error=_error_message(e))

    if result.error:
        logger.warning(f"Token refresh failed: {result.error}")
    else:
        logger.info(f"Access token refreshed, expires in {result.expires_in}s")

    # Refresh returns the short-lived token only
    result.refresh_token = None
    return result


def build_authorize_url(client_id: str, redirect_uri: str, show_dialog: bool = False) -> str:
    """Build the URL the operator opens to grant access."""
    params = {
        "response_type": "code",
        "client_id": client_id,
        "scope": " ".join(SCOPES),
        "redirect_uri": redirect_uri,
        "show_dialog": "true" if show_dialog else "false",
    }
    return f"{AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"


def exchange_authorization_code(
    config: Config,
    code: str,
    redirect_uri: str,
    client: Optional[httpx.Client] = None,
) -> TokenResult:
    """
    Exchange an authorization code for initial access and refresh tokens.

    Args:
        config: Configuration holding client id and secret
        code: Code received on the redirect
        redirect_uri: Redirect URI used when authorizing
        client: Optional HTTP client to send the request with

    Returns:
        TokenResult with access_token, refresh_token and expires_in, or error
    """
    if not config.spotify_client_id or not config.spotify_client_secret:
        return TokenResult(error="Missing Spotify client id or secret")

    form = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
    }

    try:
        if client is None:
            with httpx.Client(timeout=30.0) as own_client:
                response = own_client.post(TOKEN_URL, data=form, headers=_token_headers(config))
        else:
            response = client.post(TOKEN_URL, data=form, headers=_token_headers(config))
        return _parse_token_response(response, "Token exchange failed")
    except Exception as e:
        return TokenResult(error=_error_message(e))
