"""Caro API HTTP server.

FastAPI-based HTTP interface. Consumes a fully loaded ``ServiceConfig``.
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]
