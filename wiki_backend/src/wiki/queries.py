"""
Derived read views over posts: recency ordering, category filtering and
substring search. Every function here is pure and works on whatever snapshot
of posts the caller hands it; nothing is cached or indexed.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import PostEntity


# PUBLIC_INTERFACE
def sort_by_recency(posts: Iterable[PostEntity]) -> List[PostEntity]:
    """
    Return posts ordered by updated_at, most recent first.

    sorted() is stable and keeps equal keys in input order even with
    reverse=True, so posts sharing a timestamp stay in the order the store
    yields them (creation order).
    """
    return sorted(posts, key=lambda p: p["updated_at"], reverse=True)


# PUBLIC_INTERFACE
def in_category(post: PostEntity, category: Optional[str]) -> bool:
    """
    Exact, case-sensitive category match. Uncategorized posts (None or "")
    never match, not even a filter for the empty string.
    """
    if not category:
        return False
    return bool(post["category"]) and post["category"] == category


# PUBLIC_INTERFACE
def matches_query(post: PostEntity, query: Optional[str]) -> bool:
    """
    Case-insensitive substring match against title or content.

    An empty or whitespace-only query matches nothing. No minimum length is
    enforced here; callers that want one must apply it themselves.
    """
    if query is None or not query.strip():
        return False
    needle = query.casefold()
    return needle in (post["title"] or "").casefold() or needle in (post["content"] or "").casefold()


# PUBLIC_INTERFACE
def count_by_category(posts: Iterable[PostEntity]) -> Dict[str, int]:
    """Count posts per non-empty category, keyed and ordered by category name."""
    counts: Dict[str, int] = {}
    for post in posts:
        category = post["category"]
        if category:
            counts[category] = counts.get(category, 0) + 1
    return dict(sorted(counts.items()))
