# toolshed/storage.py
"""
Durable slot for the tool collection.

The whole collection is stored as one JSON array in a single file.
Every save rewrites the full snapshot through a temporary file and an
atomic rename, so a reader only ever sees the previous or the new
payload. Neither ``load()`` nor ``save()`` raises: failures are logged
and the in-memory collection stays authoritative.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .catalog.schemas import Item, is_valid_item


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CorruptPersistedData(ValueError):
    """The slot does not hold a JSON array."""


class PersistFailure(OSError):
    """Writing the slot failed."""


def _read_payload(path: Path) -> list:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CorruptPersistedData(f"cannot parse {path}: {exc}") from exc
    if not isinstance(data, list):
        raise CorruptPersistedData(
            f"{path} holds {type(data).__name__}, expected a list"
        )
    return data


def load(path: PathLike) -> Tuple[Item, ...]:
    """Read the collection from ``path``.

    A missing file yields an empty collection. A payload that is not a
    JSON array is discarded. Elements that fail ``is_valid_item`` are
    dropped; the remaining ones keep their order.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No stored collection at %s; starting empty", path)
        return ()
    try:
        raw = _read_payload(path)
    except CorruptPersistedData as exc:
        logger.error("Discarding stored collection: %s", exc)
        return ()

    items: List[Item] = []
    for entry in raw:
        if not is_valid_item(entry):
            continue
        items.append(
            Item(
                id=entry["id"],
                name=entry["name"],
                url=entry["url"],
                description=entry["description"],
                category=entry.get("category"),
            )
        )
    dropped = len(raw) - len(items)
    if dropped:
        logger.warning("Dropped %d invalid record(s) from %s", dropped, path)
    logger.info("Loaded %d record(s) from %s", len(items), path)
    return tuple(items)


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def save(path: PathLike, items: Iterable[Item]) -> bool:
    """Overwrite the slot with the full collection.

    Returns ``False`` when the write failed; the failure is logged and
    not retried.
    """
    path = Path(path)
    try:
        text = json.dumps(
            [item.to_storage() for item in items], ensure_ascii=False, indent=2
        )
        try:
            _write_atomic(path, text)
        except OSError as exc:
            raise PersistFailure(f"cannot write {path}: {exc}") from exc
    except (PersistFailure, TypeError, ValueError) as exc:
        logger.error("Failed to save collection: %s", exc)
        return False
    return True
