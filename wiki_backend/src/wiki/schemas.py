from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 200
USERNAME_MAX_LENGTH = 64


def _clean_title(value: Optional[str]) -> Optional[str]:
    """
    Strip whitespace and enforce 1..200 length. None passes through so update
    payloads can omit the title.
    """
    if value is None:
        return None
    s = value.strip()
    if not (1 <= len(s) <= TITLE_MAX_LENGTH):
        raise ValueError(f"title length must be between 1 and {TITLE_MAX_LENGTH} characters")
    return s


def _clean_category(value: Optional[str]) -> Optional[str]:
    """Strip whitespace; a blank category is the same as no category."""
    if value is None:
        return None
    s = value.strip()
    return s or None


# PUBLIC_INTERFACE
class PostCreate(BaseModel):
    """
    Schema for creating a new post.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Setup Guide",
                "content": "<p>Install the tools, then run the server.</p>",
                "category": "Documentation",
                "author": "John Doe",
            }
        }
    )

    title: str = Field(..., description="Display title of the post", min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(default="", description="Rich-text markup of the post body")
    category: Optional[str] = Field(default=None, description="Optional category name")
    author: str = Field(default="", description="Author name")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if v is None:
            raise ValueError("title is required")
        return _clean_title(v)  # type: ignore[return-value]

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return _clean_category(v)


# PUBLIC_INTERFACE
class PostUpdate(BaseModel):
    """
    Schema for partially updating a post.
    All fields are optional; only fields present in the payload are merged.
    Sending "category": null clears the category.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Setup Guide (revised)",
                "category": "Documentation",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Display title of the post", min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = Field(default=None, description="Rich-text markup of the post body")
    category: Optional[str] = Field(default=None, description="Optional category name")
    author: Optional[str] = Field(default=None, description="Author name")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return _clean_category(v)


# PUBLIC_INTERFACE
class PostOut(BaseModel):
    """
    Schema returned by the API for a post.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f0c8a52-4a8e-4c4e-9a55-1f7f6a9b2d10",
                "title": "Setup Guide",
                "content": "<p>Install the tools, then run the server.</p>",
                "category": "Documentation",
                "author": "John Doe",
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the post")
    title: str = Field(..., description="Display title of the post")
    content: str = Field(..., description="Rich-text markup of the post body")
    category: Optional[str] = Field(default=None, description="Category name, null when uncategorized")
    author: str = Field(..., description="Author name")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class CategoryCount(BaseModel):
    """A category name and the number of posts filed under it."""

    category: str = Field(..., description="Category name")
    count: int = Field(..., description="Number of posts in the category")


# PUBLIC_INTERFACE
class UserCreate(BaseModel):
    """
    Schema for creating a user. The password is stored as an opaque value.
    """

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LENGTH, description="Unique username")
    password: str = Field(..., description="Opaque credential")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        s = v.strip()
        if not (1 <= len(s) <= USERNAME_MAX_LENGTH):
            raise ValueError(f"username length must be between 1 and {USERNAME_MAX_LENGTH} characters")
        return s


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """Public view of a user; the credential is never included."""

    id: str = Field(..., description="Unique identifier of the user")
    username: str = Field(..., description="Username")
