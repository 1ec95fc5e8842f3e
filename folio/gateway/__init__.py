"""Web gateway for folio."""

from .app import create_app

__all__ = ["create_app"]
