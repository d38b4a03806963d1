"""
Mapping between spreadsheet rows and catalogue records.

Imported sheets are not always consistent about header case, so each
logical field has a short, fixed list of accepted column names. The
export side writes the canonical headers, which makes an exported file
importable as-is.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

from .schemas import Item, ItemDraft


FIELD_ALIASES: Dict[str, tuple] = {
    "name": ("Name", "name"),
    "url": ("URL", "Url", "url"),
    "description": ("Description", "description"),
    "category": ("Category", "category"),
}

REQUIRED_COLUMNS = ("Name", "URL", "Description")
EXPORT_COLUMNS = ("Name", "URL", "Description", "Category")
EXPORT_SHEET_TITLE = "AI Tools"
EXPORT_FILENAME = "robo-ai-toolshed-export.xlsx"


class NoValidRecords(ValueError):
    """Raised when an import yields no usable row."""

    def __init__(self, required: Sequence[str] = REQUIRED_COLUMNS):
        self.required = tuple(required)
        names = ", ".join(f"'{c}'" for c in self.required)
        super().__init__(f"No valid tools found. Ensure columns are named {names}.")


class ImportBatch(NamedTuple):
    drafts: List[ItemDraft]
    rejected: int


def _to_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _resolve(row: Mapping[str, Any], field: str) -> Optional[str]:
    for key in FIELD_ALIASES[field]:
        value = row.get(key)
        if value is None:
            continue
        text = _to_text(value)
        if text:
            return text
    return None


def map_import_rows(rows: Sequence[Mapping[str, Any]]) -> ImportBatch:
    """Turn parsed sheet rows into drafts.

    Rows missing a name, url or description are rejected and only
    counted. Raises ``NoValidRecords`` when nothing is left.
    """
    drafts: List[ItemDraft] = []
    rejected = 0
    for row in rows:
        name = _resolve(row, "name")
        url = _resolve(row, "url")
        description = _resolve(row, "description")
        if not (name and url and description):
            rejected += 1
            continue
        drafts.append(
            ItemDraft(
                name=name,
                url=url,
                description=description,
                category=_resolve(row, "category"),
            )
        )
    if not drafts:
        raise NoValidRecords()
    return ImportBatch(drafts, rejected)


def map_export_rows(collection: Sequence[Item]) -> List[Dict[str, str]]:
    return [
        {
            "Name": item.name,
            "URL": item.url,
            "Description": item.description,
            "Category": item.category or "",
        }
        for item in collection
    ]
