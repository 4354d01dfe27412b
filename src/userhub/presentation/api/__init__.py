"""REST API presentation layer for userhub.

This package provides a FastAPI-based REST API for the account service.

Structure:
    api/
    ├── app.py                  # FastAPI application factory
    ├── config.py               # API configuration
    ├── dependencies.py         # Dependency injection
    ├── exception_handlers.py   # Domain exception to HTTP mapping
    ├── routers/                # API route handlers
    └── schemas/                # Pydantic request/response schemas
"""

from userhub.presentation.api.app import create_app

__all__ = ["create_app"]
