from __future__ import annotations

from typing import Any, Dict, List, Sequence, TypeVar

T = TypeVar("T")


# PUBLIC_INTERFACE
def paginate(items: Sequence[T], limit: int, offset: int) -> List[T]:
    """Return the ``limit`` items starting at ``offset``; negative values count as 0."""
    start = max(offset, 0)
    return list(items[start:start + max(limit, 0)])


# PUBLIC_INTERFACE
def pagination_envelope(
    items: Sequence[Any],
    total: int,
    limit: int,
    offset: int,
) -> Dict[str, Any]:
    """
    Build a standard pagination envelope for list endpoints.

    Args:
        items: The items for the current page.
        total: Total number of items that match the query (ignoring pagination).
        limit: The limit used for pagination.
        offset: The offset used for pagination.

    Returns:
        Dict with keys: items, total, limit, offset.
    """
    return {
        "items": list(items),
        "total": int(total),
        "limit": int(max(limit, 0)),
        "offset": int(max(offset, 0)),
    }
