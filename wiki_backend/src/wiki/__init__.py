"""
BlogWiki backend package.

This module marks the 'src.wiki' directory as a Python package and exposes
the FastAPI app instance for convenience imports (src.wiki.app).
"""

from .main import app, create_app  # noqa: F401
