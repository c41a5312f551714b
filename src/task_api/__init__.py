"""
Task Manager API package.

A FastAPI service exposing task CRUD over a document store, plus the static
browser client served at '/'. Build an application with create_app().
"""

from .main import create_app  # noqa: F401

__all__ = ["create_app"]
