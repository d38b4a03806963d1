"""
Pydantic schema definitions for the tool catalogue.

The ``Item`` model is the catalogue record: a generated integer id, a
name, a link, a description and an optional category. ``ItemDraft`` is
the same payload without an id; it is what the admin forms and the
bulk importer hand to the store. Items are frozen so that a snapshot
of the collection can be handed to readers without copying.

``is_valid_item()`` is the single validity predicate used when the
collection is hydrated from disk. ``require_fields()`` is the
precondition the admin endpoints check before a draft reaches the
store.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


REQUIRED_FIELDS = ("name", "url", "description")


class MissingRequiredField(ValueError):
    """Raised when a draft lacks one of ``name``, ``url`` or ``description``."""

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__("Missing required field(s): " + ", ".join(self.fields))


class ItemDraft(BaseModel):
    """An item payload before the store assigns it an id.

    Required fields default to empty text so that an omitted field is
    reported by ``require_fields()`` like a blank one.
    """

    name: str = ""
    url: str = ""
    description: str = ""
    category: Optional[str] = None


class Item(BaseModel):
    """A single catalogue entry.

    ``category`` is ``None`` when the entry was never categorised. An
    empty string is kept as-is; the listing treats both the same way
    when it displays the entry.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    url: str
    description: str
    category: Optional[str] = None

    @classmethod
    def from_draft(cls, draft: ItemDraft, item_id: int) -> "Item":
        return cls(id=item_id, **draft.model_dump())

    def to_storage(self) -> dict:
        """Return the persisted form; ``category`` is omitted when unset."""
        return self.model_dump(exclude_none=True)


class Page(BaseModel):
    """A wrapper for paginated results returned by the listing endpoint."""

    page: int
    page_size: int
    total: int
    total_pages: int
    items: List[Item]


class ImportReport(BaseModel):
    imported: int
    rejected: int
    message: str


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def is_valid_item(x: Any) -> bool:
    """Return ``True`` when ``x`` looks like a complete catalogue record.

    ``x`` may be an ``Item`` or a raw mapping decoded from JSON. The id
    must be an integer (booleans are rejected), ``name``, ``url`` and
    ``description`` non-empty text, and ``category`` either absent or
    text.
    """
    if isinstance(x, Item):
        x = x.model_dump(exclude_none=True)
    if not isinstance(x, dict):
        return False
    item_id = x.get("id")
    if not isinstance(item_id, int) or isinstance(item_id, bool):
        return False
    for field in REQUIRED_FIELDS:
        value = x.get(field)
        if not _is_text(value) or not value:
            return False
    if "category" in x and not _is_text(x["category"]):
        return False
    return True


def require_fields(draft: ItemDraft) -> ItemDraft:
    """Raise ``MissingRequiredField`` unless every required field is filled.

    Returns the draft with its category trimmed, so a stored category
    always equals the facet it is listed under.
    """
    missing = [f for f in REQUIRED_FIELDS if not getattr(draft, f)]
    if missing:
        raise MissingRequiredField(missing)
    if draft.category is not None and draft.category != draft.category.strip():
        return draft.model_copy(update={"category": draft.category.strip()})
    return draft
