"""
Route definitions for the public tool listing.

Endpoints under /api/catalog:
- GET  /items            : paginated listing with text search and category filter
- GET  /items/{item_id}  : one tool
- GET  /categories       : category facet list ("All" first)
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import get_settings
from .schemas import Item, Page
from .search import ALL_CATEGORIES, paginate
from .store import CatalogStore, get_store


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/items", response_model=Page)
def list_items(
    q: Optional[str] = Query(default=None, description="Search name, link, description or category"),
    category: str = Query(default=ALL_CATEGORIES, description="Exact category, or 'All'"),
    page: int = Query(default=1, ge=1, description="Current page (1-indexed)"),
    page_size: Optional[int] = Query(default=None, ge=1, le=200, description="Page size"),
    store: CatalogStore = Depends(get_store),
) -> Page:
    """
    Returns one page of tools matching ``q`` and ``category``.

    Filtering happens first, then pagination metadata is computed on the
    filtered result, so ``total`` is the number of matches.
    """
    size = page_size or get_settings().page_size
    return paginate(store.search(q, category), page, size)


@router.get("/items/{item_id}", response_model=Item)
def get_item(item_id: int, store: CatalogStore = Depends(get_store)) -> Item:
    item = store.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    return item


@router.get("/categories", response_model=List[str])
def list_categories(store: CatalogStore = Depends(get_store)) -> List[str]:
    return store.categories()
