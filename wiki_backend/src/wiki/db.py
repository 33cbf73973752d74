from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Generator, List, Optional

from .models import PostEntity, UserEntity
from .queries import matches_query
from .repositories import Clock, Repository, UsernameTakenError, merge_post_fields, new_id
from .schemas import PostCreate, PostUpdate, UserCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "posts"
    seq: str = "seq"
    id: str = "id"
    title: str = "title"
    content: str = "content"
    category: str = "category"
    author: str = "author"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()
_USERS = "users"
_ISSUED = "issued_ids"


def _ts(value: datetime) -> str:
    # Fixed width so ISO strings sort the same way the datetimes do.
    return value.isoformat(timespec="microseconds")


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    Rows are ordered for listing by updated_at, then by insertion sequence, so
    equal timestamps come back in creation order just like the in-memory store.
    """

    def __init__(self, db_path: str, clock: Optional[Clock] = None) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._lock = RLock()
        self._clock = clock or datetime.now
        self._init_db()
        logger.info("Using SQLite database at %s", db_path)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            conn = sqlite3.connect(self._db_path)
            conn.row_factory = sqlite3.Row
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.seq} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.id} TEXT NOT NULL UNIQUE,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.content} TEXT NOT NULL DEFAULT '',
                    {_COLS.category} TEXT NULL,
                    {_COLS.author} TEXT NOT NULL DEFAULT '',
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_category ON {_COLS.table}({_COLS.category})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_updated_at ON {_COLS.table}({_COLS.updated_at})"
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_USERS} (
                    id TEXT PRIMARY KEY,
                    username TEXT NOT NULL UNIQUE,
                    password TEXT NOT NULL
                )
                """
            )
            conn.execute(f"CREATE TABLE IF NOT EXISTS {_ISSUED} (id TEXT PRIMARY KEY)")

    def _allocate_id(self, conn: sqlite3.Connection) -> str:
        while True:
            i = new_id()
            cur = conn.execute(f"INSERT OR IGNORE INTO {_ISSUED} (id) VALUES (?)", (i,))
            if cur.rowcount:
                return i

    def _row_to_post(self, row: sqlite3.Row) -> PostEntity:
        return {
            "id": str(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "content": str(row[_COLS.content]),
            "category": row[_COLS.category] or None,
            "author": str(row[_COLS.author]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _row_to_user(self, row: sqlite3.Row) -> UserEntity:
        return {"id": row["id"], "username": row["username"], "password": row["password"]}

    def _select_post(self, conn: sqlite3.Connection, post_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (post_id,)).fetchone()

    def _select_posts(self, conn: sqlite3.Connection, where_sql: str = "", params: tuple = ()) -> List[PostEntity]:
        rows = conn.execute(
            f"""
            SELECT * FROM {_COLS.table}
            {where_sql}
            ORDER BY {_COLS.updated_at} DESC, {_COLS.seq} ASC
            """,
            params,
        ).fetchall()
        return [self._row_to_post(r) for r in rows]

    def create_user(self, data: UserCreate) -> UserEntity:
        with self._conn() as conn:
            taken = conn.execute(f"SELECT 1 FROM {_USERS} WHERE username = ?", (data.username,)).fetchone()
            if taken:
                raise UsernameTakenError(data.username)
            user: UserEntity = {
                "id": self._allocate_id(conn),
                "username": data.username,
                "password": data.password,
            }
            conn.execute(
                f"INSERT INTO {_USERS} (id, username, password) VALUES (?, ?, ?)",
                (user["id"], user["username"], user["password"]),
            )
        logger.info("Created user %s", user["id"])
        return user

    def get_user(self, user_id: str) -> Optional[UserEntity]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_USERS} WHERE id = ?", (user_id,)).fetchone()
            return self._row_to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_USERS} WHERE username = ?", (username,)).fetchone()
            return self._row_to_user(row) if row else None

    def create_post(self, data: PostCreate) -> PostEntity:
        now = _ts(self._clock())
        with self._conn() as conn:
            post_id = self._allocate_id(conn)
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.title}, {_COLS.content}, {_COLS.category},
                    {_COLS.author}, {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (post_id, data.title, data.content, data.category, data.author, now, now),
            )
            row = self._select_post(conn, post_id)
            assert row is not None
        logger.info("Created post %s", post_id)
        return self._row_to_post(row)

    def get_post(self, post_id: str) -> Optional[PostEntity]:
        with self._conn() as conn:
            row = self._select_post(conn, post_id)
            return self._row_to_post(row) if row else None

    def update_post(self, post_id: str, data: PostUpdate) -> Optional[PostEntity]:
        with self._conn() as conn:
            row = self._select_post(conn, post_id)
            if not row:
                logger.debug("Update skipped, post %s not found", post_id)
                return None
            current = self._row_to_post(row)
            merged = merge_post_fields(current, data)
            updated_at = max(self._clock(), current["updated_at"])
            conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.content} = ?, {_COLS.category} = ?,
                    {_COLS.author} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    merged["title"],
                    merged["content"],
                    merged["category"],
                    merged["author"],
                    _ts(updated_at),
                    post_id,
                ),
            )
            row2 = self._select_post(conn, post_id)
            assert row2 is not None
        logger.info("Updated post %s", post_id)
        return self._row_to_post(row2)

    def delete_post(self, post_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (post_id,))
            removed = cur.rowcount > 0
        if removed:
            logger.info("Deleted post %s", post_id)
        return removed

    def list_all_posts(self) -> List[PostEntity]:
        with self._conn() as conn:
            return self._select_posts(conn)

    def list_posts_by_category(self, category: str) -> List[PostEntity]:
        if not category:
            return []
        with self._conn() as conn:
            return self._select_posts(conn, f"WHERE {_COLS.category} = ?", (category,))

    def search_posts(self, query: str) -> List[PostEntity]:
        # LIKE folds ASCII only; filter in Python to match the in-memory rules.
        with self._conn() as conn:
            return [p for p in self._select_posts(conn) if matches_query(p, query)]
