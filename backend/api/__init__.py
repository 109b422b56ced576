"""HTTP surface for the website scanner.

Serve it with::

    uvicorn backend.api:app --port 8000
"""

from backend.api.app import app

__all__ = ["app"]
