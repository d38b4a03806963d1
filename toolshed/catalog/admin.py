"""
Route definitions for the admin surface.

Every endpoint except ``/login`` expects the shared admin secret in the
``X-Admin-Secret`` header. Drafts are checked for their required fields
here, before the store is touched; import failures are returned as 400
responses carrying the message shown to the operator.
"""

from __future__ import annotations

import logging
import secrets
from typing import List, Optional

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Header,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)

from ..config import get_settings
from .exchange import EXPORT_FILENAME, NoValidRecords
from .schemas import ImportReport, Item, ItemDraft, MissingRequiredField, require_fields
from .store import CatalogStore, get_store
from .tabular import FileReadFailure


logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _secret_matches(candidate: Optional[str]) -> bool:
    expected = get_settings().admin_secret
    return secrets.compare_digest((candidate or "").encode(), expected.encode())


def require_admin(x_admin_secret: Optional[str] = Header(default=None)) -> None:
    if not _secret_matches(x_admin_secret):
        raise HTTPException(status_code=401, detail="Incorrect password. Please try again.")


router = APIRouter(prefix="/api/admin", tags=["admin"])
protected = [Depends(require_admin)]


def _checked(draft: ItemDraft) -> ItemDraft:
    try:
        return require_fields(draft)
    except MissingRequiredField as exc:
        raise HTTPException(status_code=400, detail="Please fill out all fields.") from exc


@router.post("/login")
def login(secret: str = Body(..., embed=True)):
    if not _secret_matches(secret):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(status_code=401, detail="Incorrect password. Please try again.")
    return {"status": "ok"}


@router.get("/items", response_model=List[Item], dependencies=protected)
def list_items(
    q: Optional[str] = Query(default=None, description="Search existing tools"),
    store: CatalogStore = Depends(get_store),
) -> List[Item]:
    return list(store.search(q))


@router.post("/items", response_model=Item, status_code=201, dependencies=protected)
def add_item(draft: ItemDraft, store: CatalogStore = Depends(get_store)) -> Item:
    return store.add(_checked(draft))


@router.put("/items/{item_id}", response_model=Item, dependencies=protected)
def update_item(item_id: int, draft: ItemDraft, store: CatalogStore = Depends(get_store)) -> Item:
    if store.get(item_id) is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    updated = Item.from_draft(_checked(draft), item_id)
    store.update(updated)
    return updated


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=protected)
def delete_item(item_id: int, store: CatalogStore = Depends(get_store)) -> Response:
    if store.get(item_id) is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    store.delete(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/import", response_model=ImportReport, dependencies=protected)
def import_items(file: UploadFile = File(...), store: CatalogStore = Depends(get_store)) -> ImportReport:
    """Add every valid row of an uploaded ``.xlsx`` or ``.csv`` sheet."""
    try:
        data = file.file.read()
    except OSError as exc:
        logger.error("Failed to read upload %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail="Failed to read the file.") from exc
    try:
        return store.import_file(data, file.filename or "")
    except (FileReadFailure, NoValidRecords) as exc:
        logger.error("Failed to import file %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/export", dependencies=protected)
def export_items(store: CatalogStore = Depends(get_store)) -> Response:
    if not len(store):
        raise HTTPException(status_code=400, detail="No tools to export.")
    return Response(
        content=store.export_file(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
