"""
Server package exposing the FastAPI application factory.
"""

from .app import create_app  # noqa: F401
