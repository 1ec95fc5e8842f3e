"""folio-token - mint an initial Spotify access and refresh token.

Starts a one-shot local listener, sends the operator's browser to Spotify's
authorization page and exchanges the redirected code for tokens, which are
printed for copying into configuration.
"""

import html
import sys
import urllib.parse
import webbrowser
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Dict, List, Optional

import click
import httpx

from .config import Config
from .models import TokenResult
from .spotify_auth import build_authorize_url, exchange_authorization_code


@dataclass
class CallbackOutcome:
    """What to answer the browser with and how the helper should exit."""
    status: int
    body: str
    exit_code: Optional[int] = None
    tokens: Optional[TokenResult] = None
    message: Optional[str] = None


def _page(title: str, text: str) -> str:
    return (
        "<html><body style=\"font-family: monospace; padding: 20px;\">"
        f"<h1>{html.escape(title)}</h1><p>{html.escape(text)}</p>"
        "</body></html>"
    )


def handle_callback(
    config: Config,
    path: str,
    redirect_uri: str,
    client: Optional[httpx.Client] = None,
) -> CallbackOutcome:
    """
    Handle one request to the local listener.

    Args:
        config: Configuration holding client id and secret
        path: Request path including query string
        redirect_uri: Redirect URI used when authorizing
        client: Optional HTTP client for the token exchange

    Returns:
        CallbackOutcome; exit_code stays None for requests that do not end the flow
    """
    parsed = urllib.parse.urlparse(path)
    if parsed.path != "/callback":
        return CallbackOutcome(status=404, body="Not found")

    params: Dict[str, List[str]] = urllib.parse.parse_qs(parsed.query)
    error = (params.get("error") or [None])[0]
    code = (params.get("code") or [None])[0]

    if error:
        return CallbackOutcome(
            status=400,
            body=_page("Authorization Error", f"Error: {error}. Please try again."),
            exit_code=1,
            message=f"Authorization error: {error}",
        )

    if not code:
        return CallbackOutcome(
            status=400,
            body=_page("Authorization Error", "No authorization code received."),
            exit_code=1,
            message="No authorization code received",
        )

    result = exchange_authorization_code(config, code, redirect_uri, client=client)
    if not result.ok:
        return CallbackOutcome(
            status=500,
            body=_page("Error", result.error or "Token exchange failed"),
            exit_code=1,
            message=result.error,
        )

    return CallbackOutcome(
        status=200,
        body=_page("Success!", "Your tokens have been generated. Check the terminal. You can close this window."),
        exit_code=0,
        tokens=result,
    )


def token_lines(tokens: TokenResult) -> List[str]:
    """Config lines to print for the operator."""
    lines = [f"FOLIO_SPOTIFY_ACCESS_TOKEN={tokens.access_token}"]
    if tokens.refresh_token:
        lines.append(f"FOLIO_SPOTIFY_REFRESH_TOKEN={tokens.refresh_token}")
    return lines


def wait_for_callback(config: Config, port: int, redirect_uri: str) -> CallbackOutcome:
    """Serve requests on localhost until one finishes the flow."""
    outcome: Optional[CallbackOutcome] = None

    class CallbackHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            nonlocal outcome
            answer = handle_callback(config, self.path, redirect_uri)
            body = answer.body.encode("utf-8")
            self.send_response(answer.status)
            self.send_header("Content-Type", "text/html")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            if answer.exit_code is not None:
                outcome = answer

        def log_message(self, format, *args):
            pass

    server = HTTPServer(("localhost", port), CallbackHandler)
    try:
        while outcome is None:
            server.handle_request()
    finally:
        server.server_close()
    return outcome


@click.command()
@click.option("--config", "-c", "config_file", help="Path to config file")
@click.option("--no-browser", is_flag=True, help="Print the authorization URL instead of opening it")
def main(config_file: Optional[str], no_browser: bool) -> None:
    """Obtain Spotify tokens through the authorization code flow."""
    config = Config.load(config_file)

    if not config.spotify_client_id or not config.spotify_client_secret:
        click.echo("ERROR: Spotify client id and client secret are required", err=True)
        click.echo("Set FOLIO_SPOTIFY_CLIENT_ID and FOLIO_SPOTIFY_CLIENT_SECRET, "
                   "or spotify_client_id and spotify_client_secret in a config file.", err=True)
        sys.exit(1)

    port = config.helper_port
    redirect_uri = f"http://localhost:{port}/callback"
    auth_url = build_authorize_url(config.spotify_client_id, redirect_uri)

    click.echo(f"Add this redirect URI to your Spotify app: {redirect_uri}")
    click.echo(f"Listening on http://localhost:{port}")

    opened = False
    if not no_browser:
        opened = webbrowser.open(auth_url)
    if not opened:
        click.echo("Visit this URL to authorize:")
        click.echo(auth_url)

    outcome = wait_for_callback(config, port, redirect_uri)
    if outcome.exit_code != 0 or outcome.tokens is None:
        click.echo(f"ERROR: {outcome.message}", err=True)
        sys.exit(1)

    click.echo("Tokens received. Add these to your configuration:")
    for line in token_lines(outcome.tokens):
        click.echo(line)
    click.echo("Access tokens expire after 1 hour; the refresh token mints new ones.")
    sys.exit(0)


if __name__ == "__main__":
    main()
