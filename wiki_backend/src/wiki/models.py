from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class PostEntity(TypedDict):
    """
    A lightweight domain record representing a wiki/blog post for non-ORM
    storage backends.

    Fields:
    - id: Opaque unique identifier assigned by the store
    - title: Display title (1..200 chars, trimmed on input via schemas)
    - content: Opaque markup produced by the editor, never parsed
    - category: Optional category; None means uncategorized
    - author: Free-form author name
    - created_at: Creation timestamp, never changes
    - updated_at: Last update timestamp, refreshed on every update
    """

    id: str
    title: str
    content: str
    category: Optional[str]
    author: str
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A user record. The password is an opaque credential that is stored as
    given and never returned by the API.
    """

    id: str
    username: str
    password: str
