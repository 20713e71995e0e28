"""
Vercel entrypoint for the training API
"""

from api.main import app

__all__ = ["app"]
