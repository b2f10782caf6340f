"""
FastAPI dependencies for per-application shared objects.
"""

from __future__ import annotations

from fastapi import Request

from .cms import CmsClient
from .config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cms_client(request: Request) -> CmsClient:
    client = getattr(request.app.state, "cms_client", None)
    if client is None:
        raise RuntimeError("CMS client is not initialized. Start the app through its lifespan.")
    return client
