"""
Pure transforms over the tool collection.

Each function takes the current collection (a tuple of ``Item``) and
returns a new tuple; nothing is modified in place. Persisting the
result is the caller's job (see ``store.CatalogStore``).

Ids are allocated by ``IdAllocator``: the current time in milliseconds,
bumped so that every id handed out is strictly greater than the last
one and than any id already present in the collection.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .schemas import Item, ItemDraft


Collection = Tuple[Item, ...]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdAllocator:
    """Hands out strictly increasing integer ids for the process lifetime."""

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or _now_ms
        self._last = 0

    @property
    def last(self) -> int:
        return self._last

    def allocate(self, count: int = 1, existing: Iterable[int] = ()) -> List[int]:
        if count <= 0:
            return []
        floor = max(existing, default=0)
        base = max(self._clock(), self._last + 1, floor + 1)
        ids = [base + offset for offset in range(count)]
        self._last = ids[-1]
        return ids


_default_allocator = IdAllocator()


def _ids(collection: Sequence[Item]) -> List[int]:
    return [item.id for item in collection]


def add_one(
    collection: Sequence[Item],
    draft: ItemDraft,
    allocator: Optional[IdAllocator] = None,
) -> Collection:
    """Append ``draft`` with a fresh id. No validation is done here."""
    allocator = allocator or _default_allocator
    (item_id,) = allocator.allocate(1, _ids(collection))
    return tuple(collection) + (Item.from_draft(draft, item_id),)


def add_many(
    collection: Sequence[Item],
    drafts: Sequence[ItemDraft],
    allocator: Optional[IdAllocator] = None,
) -> Collection:
    """Append every draft in input order, ids strictly increasing."""
    allocator = allocator or _default_allocator
    ids = allocator.allocate(len(drafts), _ids(collection))
    added = tuple(Item.from_draft(d, i) for d, i in zip(drafts, ids))
    return tuple(collection) + added


def update_one(collection: Sequence[Item], updated: Item) -> Collection:
    """Replace the item sharing ``updated.id``; unknown ids are a no-op."""
    return tuple(updated if item.id == updated.id else item for item in collection)


def delete_one(collection: Sequence[Item], item_id: int) -> Collection:
    return tuple(item for item in collection if item.id != item_id)


def find_one(collection: Sequence[Item], item_id: int) -> Optional[Item]:
    return next((item for item in collection if item.id == item_id), None)
