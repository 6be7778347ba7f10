"""
HTTP layer for runit.

Provides a FastAPI application factory. The routers only decode requests
and hand them to ``runit.execution``; this package owns the HTTP boundary:
authentication, plain-text responses, and error mapping.

Quick start::

    from runit.api import create_app

    app = create_app()  # ready for uvicorn

Tags:
    runit, api, FastAPI, transport-layer
"""

from runit.api.app import create_app

__all__ = ["create_app"]
