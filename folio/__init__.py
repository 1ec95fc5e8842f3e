"""folio - portfolio site with a now-playing widget."""

__version__ = "0.1.0"
