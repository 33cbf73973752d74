from __future__ import annotations

from fastapi import Request

from .repositories import Repository
from .settings import Settings


def get_repo(request: Request) -> Repository:
    """The repository built for this app at startup."""
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
