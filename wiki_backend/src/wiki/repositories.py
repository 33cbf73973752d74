from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import Callable, Dict, List, Optional

from .models import PostEntity, UserEntity
from .queries import count_by_category, in_category, matches_query, sort_by_recency
from .schemas import PostCreate, PostUpdate, UserCreate
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Fields an update may replace, and fields it never touches.
MERGEABLE_POST_FIELDS = ("title", "content", "category", "author")
IMMUTABLE_POST_FIELDS = ("id", "created_at")
# Mergeable fields that may be explicitly cleared with null.
NULLABLE_POST_FIELDS = frozenset({"category"})


class UsernameTakenError(ValueError):
    """Raised when creating a user whose username is already registered."""

    def __init__(self, username: str) -> None:
        super().__init__(f"username already exists: {username!r}")
        self.username = username


def new_id() -> str:
    return str(uuid.uuid4())


# PUBLIC_INTERFACE
def merge_post_fields(existing: PostEntity, data: PostUpdate) -> PostEntity:
    """
    Return a copy of ``existing`` with the mergeable fields present in ``data``
    applied. Fields absent from the payload are left alone, an explicit null
    is honoured only for nullable fields, and id/created_at are never written.
    updated_at is the caller's responsibility.
    """
    merged = existing.copy()
    provided = data.model_fields_set
    for field in MERGEABLE_POST_FIELDS:
        if field not in provided:
            continue
        value = getattr(data, field)
        if value is None and field not in NULLABLE_POST_FIELDS:
            continue
        merged[field] = value  # type: ignore[literal-required]
    return merged


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for post and user storage backends."""

    # Users

    @abstractmethod
    def create_user(self, data: UserCreate) -> UserEntity:
        """Create and return a new user. Raises UsernameTakenError on a duplicate username."""

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserEntity]:
        """Return a user by id, or None if not found."""

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        """Return the user with exactly this username, or None."""

    # Posts

    @abstractmethod
    def create_post(self, data: PostCreate) -> PostEntity:
        """Create a post with fresh id and created_at == updated_at == now."""

    @abstractmethod
    def get_post(self, post_id: str) -> Optional[PostEntity]:
        """Return a post by id, or None if not found."""

    @abstractmethod
    def update_post(self, post_id: str, data: PostUpdate) -> Optional[PostEntity]:
        """
        Merge provided fields onto an existing post and refresh updated_at.
        Return the updated post, or None if not found.
        """

    @abstractmethod
    def delete_post(self, post_id: str) -> bool:
        """Delete a post by id. Return True if deleted, False if not found."""

    # Queries

    @abstractmethod
    def list_all_posts(self) -> List[PostEntity]:
        """All posts, most recently updated first."""

    @abstractmethod
    def list_posts_by_category(self, category: str) -> List[PostEntity]:
        """Posts whose category equals ``category`` exactly, most recently updated first."""

    @abstractmethod
    def search_posts(self, query: str) -> List[PostEntity]:
        """
        Posts whose title or content contains ``query`` (case-insensitive),
        most recently updated first. Blank queries match nothing; there is no
        minimum length check.
        """

    def category_counts(self) -> Dict[str, int]:
        """Number of posts per non-empty category."""
        return count_by_category(self.list_all_posts())

    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    Every operation runs under a single lock, so no partial state is visible.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._lock = RLock()
        self._posts: dict[str, PostEntity] = {}
        self._users: dict[str, UserEntity] = {}
        self._issued_ids: set[str] = set()
        self._clock = clock or datetime.now

    def _now(self) -> datetime:
        return self._clock()

    def _allocate_id(self) -> str:
        # ids are never reissued, even after their entity is deleted
        with self._lock:
            i = new_id()
            while i in self._issued_ids:
                i = new_id()
            self._issued_ids.add(i)
            return i

    def create_user(self, data: UserCreate) -> UserEntity:
        with self._lock:
            if self._find_user_by_username(data.username) is not None:
                raise UsernameTakenError(data.username)
            user: UserEntity = {
                "id": self._allocate_id(),
                "username": data.username,
                "password": data.password,
            }
            self._users[user["id"]] = user
        logger.info("Created user %s", user["id"])
        return user.copy()

    def _find_user_by_username(self, username: str) -> Optional[UserEntity]:
        for user in self._users.values():
            if user["username"] == username:
                return user
        return None

    def get_user(self, user_id: str) -> Optional[UserEntity]:
        with self._lock:
            user = self._users.get(user_id)
            return None if user is None else user.copy()

    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        with self._lock:
            user = self._find_user_by_username(username)
            return None if user is None else user.copy()

    def create_post(self, data: PostCreate) -> PostEntity:
        with self._lock:
            now = self._now()
            post: PostEntity = {
                "id": self._allocate_id(),
                "title": data.title,
                "content": data.content,
                "category": data.category,
                "author": data.author,
                "created_at": now,
                "updated_at": now,
            }
            self._posts[post["id"]] = post
        logger.info("Created post %s", post["id"])
        return post.copy()

    def get_post(self, post_id: str) -> Optional[PostEntity]:
        with self._lock:
            post = self._posts.get(post_id)
            return None if post is None else post.copy()

    def update_post(self, post_id: str, data: PostUpdate) -> Optional[PostEntity]:
        with self._lock:
            existing = self._posts.get(post_id)
            if existing is None:
                logger.debug("Update skipped, post %s not found", post_id)
                return None

            updated = merge_post_fields(existing, data)
            # Never let a clock step backwards break updated_at >= created_at.
            updated["updated_at"] = max(self._now(), existing["updated_at"])

            self._posts[post_id] = updated
            logger.info("Updated post %s", post_id)
            return updated.copy()

    def delete_post(self, post_id: str) -> bool:
        with self._lock:
            removed = self._posts.pop(post_id, None) is not None
        if removed:
            logger.info("Deleted post %s", post_id)
        else:
            logger.debug("Delete skipped, post %s not found", post_id)
        return removed

    def list_all_posts(self) -> List[PostEntity]:
        with self._lock:
            return [p.copy() for p in sort_by_recency(self._posts.values())]

    def list_posts_by_category(self, category: str) -> List[PostEntity]:
        with self._lock:
            items = [p for p in self._posts.values() if in_category(p, category)]
            return [p.copy() for p in sort_by_recency(items)]

    def search_posts(self, query: str) -> List[PostEntity]:
        with self._lock:
            items = [p for p in self._posts.values() if matches_query(p, query)]
            return [p.copy() for p in sort_by_recency(items)]


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (standard library sqlite3)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        try:
            from .db import SQLiteRepository
            return SQLiteRepository(settings.sqlite_db_path)
        except Exception:
            logger.warning(
                "SQLite backend unavailable at %s, falling back to memory",
                settings.sqlite_db_path,
                exc_info=True,
            )
            return InMemoryRepository()
    return InMemoryRepository()
