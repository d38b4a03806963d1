"""
The tool collection held by the running service.

``CatalogStore`` owns the in-memory snapshot and its durable slot. Its
lifecycle is simple: ``load()`` once at start-up, then every mutation
applies one of the pure transforms from ``mutations`` and immediately
saves the new snapshot. Readers get the current tuple and can keep it
as long as they like, since a mutation replaces the tuple rather than
editing it.

Bulk import goes codec -> mapper -> ``add_many`` in one step, so a
file either contributes all its valid rows or leaves the collection
untouched.
"""

from __future__ import annotations

import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .. import storage
from ..config import get_settings
from . import mutations
from .exchange import EXPORT_SHEET_TITLE, map_export_rows, map_import_rows
from .schemas import ImportReport, Item, ItemDraft
from .search import ALL_CATEGORIES, categories, filter_items
from .tabular import parse_table, rows_to_workbook


logger = logging.getLogger(__name__)


class CatalogStore:
    """Owner of the tool collection and its persistence."""

    def __init__(
        self,
        path: Union[str, Path],
        allocator: Optional[mutations.IdAllocator] = None,
    ):
        self.path = Path(path)
        # None selects the process-wide allocator in ``mutations``.
        self._allocator = allocator
        self._items: Tuple[Item, ...] = ()
        # FastAPI runs sync endpoints in a thread pool; keep a single writer.
        self._lock = threading.Lock()

    @property
    def items(self) -> Tuple[Item, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> Tuple[Item, ...]:
        with self._lock:
            self._items = storage.load(self.path)
        return self._items

    def _commit(self, items: Tuple[Item, ...]) -> None:
        self._items = items
        storage.save(self.path, items)

    # -- mutations -------------------------------------------------------

    def add(self, draft: ItemDraft) -> Item:
        with self._lock:
            self._commit(mutations.add_one(self._items, draft, self._allocator))
            item = self._items[-1]
        logger.info("Added tool %d (%s)", item.id, item.name)
        return item

    def add_many(self, drafts: Sequence[ItemDraft]) -> List[Item]:
        if not drafts:
            return []
        with self._lock:
            self._commit(mutations.add_many(self._items, drafts, self._allocator))
            added = list(self._items[-len(drafts):])
        logger.info("Added %d tool(s)", len(added))
        return added

    def update(self, item: Item) -> Tuple[Item, ...]:
        with self._lock:
            self._commit(mutations.update_one(self._items, item))
            items = self._items
        logger.info("Updated tool %d", item.id)
        return items

    def delete(self, item_id: int) -> Tuple[Item, ...]:
        with self._lock:
            self._commit(mutations.delete_one(self._items, item_id))
            items = self._items
        logger.info("Deleted tool %d", item_id)
        return items

    # -- reads -----------------------------------------------------------

    def get(self, item_id: int) -> Optional[Item]:
        return mutations.find_one(self._items, item_id)

    def search(self, term: Optional[str] = "", category: Optional[str] = ALL_CATEGORIES) -> Tuple[Item, ...]:
        return filter_items(self._items, term, category)

    def categories(self) -> List[str]:
        return categories(self._items)

    # -- bulk exchange ---------------------------------------------------

    def import_file(self, data: bytes, filename: str = "") -> ImportReport:
        """Import every valid row of an uploaded sheet.

        ``FileReadFailure`` and ``NoValidRecords`` propagate unchanged;
        in both cases the collection is left as it was.
        """
        rows = parse_table(data, filename)
        batch = map_import_rows(rows)
        added = self.add_many(batch.drafts)
        if batch.rejected:
            logger.warning(
                "Import of %s skipped %d incomplete row(s)", filename or "<upload>", batch.rejected
            )
        return ImportReport(
            imported=len(added),
            rejected=batch.rejected,
            message=f"Successfully imported {len(added)} tools!",
        )

    def export_rows(self) -> List[dict]:
        return map_export_rows(self._items)

    def export_file(self) -> bytes:
        return rows_to_workbook(self.export_rows(), EXPORT_SHEET_TITLE)


def open_store(path: Union[str, Path]) -> CatalogStore:
    """Build a store for ``path`` and hydrate it from disk."""
    store = CatalogStore(path)
    store.load()
    return store


@lru_cache
def get_store() -> CatalogStore:
    """Process-wide store built from the current settings."""
    return open_store(get_settings().data_file)
