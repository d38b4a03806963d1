"""
Read-only views over the tool collection: free-text search, category
filtering, the category facet list and pagination for the listing.

None of these functions mutate their input or perform I/O. Filtering
keeps the collection order; it only ever drops entries.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .schemas import Item, Page


ALL_CATEGORIES = "All"


def _norm(s: Optional[str]) -> str:
    """Lowercase ``s`` for case-insensitive matching (``None`` -> ``""``)."""
    return (s or "").lower()


def categories(collection: Sequence[Item]) -> List[str]:
    """Return the category facet list.

    Parameters
    ----------
    collection : Sequence[Item]
        The items to inspect.

    Returns
    -------
    List[str]
        ``"All"`` followed by the distinct, trimmed, non-empty
        categories sorted lexicographically.
    """
    found = {item.category.strip() for item in collection if item.category and item.category.strip()}
    return [ALL_CATEGORIES] + sorted(found)


def matches_text(item: Item, term: Optional[str]) -> bool:
    """Case-insensitive substring match on name, url, description and category."""
    needle = _norm(term)
    if not needle:
        return True
    fields = [item.name, item.url, item.description]
    if item.category is not None:
        fields.append(item.category)
    return any(needle in _norm(f) for f in fields)


def filter_items(
    collection: Sequence[Item],
    term: Optional[str] = "",
    category: Optional[str] = ALL_CATEGORIES,
) -> Tuple[Item, ...]:
    """Return the items matching both the category and the search term.

    Parameters
    ----------
    collection : Sequence[Item]
        The items to filter.
    term : Optional[str]
        Free-text query. Empty or ``None`` matches everything.
    category : Optional[str]
        Exact category to keep, or ``"All"`` (or ``None``) for no
        category restriction. The comparison is case-sensitive since
        the value is picked from ``categories()``.

    Returns
    -------
    Tuple[Item, ...]
        The matching items in collection order.
    """
    want_all = category is None or category == ALL_CATEGORIES
    return tuple(
        item
        for item in collection
        if (want_all or item.category == category) and matches_text(item, term)
    )


def paginate(items: Sequence[Item], page: int = 1, page_size: int = 24) -> Page:
    """Slice ``items`` for one page of the listing.

    ``page`` is clamped into ``[1, total_pages]``; an empty input still
    reports one (empty) page.
    """
    page_size = max(1, int(page_size))
    total = len(items)
    total_pages = max(1, (total + page_size - 1) // page_size)
    page = min(max(1, int(page)), total_pages)
    start = (page - 1) * page_size
    return Page(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        items=list(items[start:start + page_size]),
    )
