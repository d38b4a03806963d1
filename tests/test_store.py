from __future__ import annotations

import json

import pytest
from conftest import make_draft

from toolshed.catalog.exchange import NoValidRecords
from toolshed.catalog.schemas import Item
from toolshed.catalog.store import CatalogStore, open_store
from toolshed.catalog.tabular import FileReadFailure, parse_table


CSV_OK = (
    "Name,URL,Description,Category\n"
    "Gemini Pro,https://gemini.google.com,Chat model,Chat\n"
    ",x,y,\n"
    "Whisper,https://openai.com/whisper,Speech to text,\n"
).encode("utf-8")


def _persisted(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_every_mutation_is_persisted(store, data_file):
    first = store.add(make_draft(name="a"))
    second = store.add(make_draft(name="b", category="Chat"))
    assert [e["name"] for e in _persisted(data_file)] == ["a", "b"]

    store.update(Item(id=first.id, name="a2", url="u", description="d"))
    assert _persisted(data_file)[0]["name"] == "a2"

    store.delete(second.id)
    assert [e["id"] for e in _persisted(data_file)] == [first.id]
    assert store.items == open_store(data_file).items


def test_snapshots_are_not_changed_by_later_mutations(store):
    store.add(make_draft(name="a"))
    before = store.items
    store.add(make_draft(name="b"))
    assert len(before) == 1
    assert len(store) == 2


def test_reloaded_store_keeps_allocating_above_existing_ids(store, data_file):
    item = store.add(make_draft())
    fresh = CatalogStore(data_file)
    fresh.load()
    assert fresh.add(make_draft()).id > item.id


def test_import_file_adds_valid_rows_only(store):
    report = store.import_file(CSV_OK, "tools.csv")
    assert report.imported == 2
    assert report.rejected == 1
    assert report.message == "Successfully imported 2 tools!"
    assert [i.name for i in store.items] == ["Gemini Pro", "Whisper"]
    assert store.items[0].category == "Chat"
    assert store.items[1].category is None
    assert store.categories() == ["All", "Chat"]


def test_import_without_description_column_changes_nothing(store, data_file):
    store.add(make_draft(name="keep"))
    before = data_file.read_bytes()
    with pytest.raises(NoValidRecords):
        store.import_file(b"Name,URL\nGemini,https://g\n", "tools.csv")
    assert [i.name for i in store.items] == ["keep"]
    assert data_file.read_bytes() == before


def test_unreadable_upload_changes_nothing(store):
    with pytest.raises(FileReadFailure):
        store.import_file(b"garbage", "tools.xlsx")
    assert store.items == ()


def test_export_file_matches_collection(store):
    store.add(make_draft(name="a", category="Chat"))
    store.add(make_draft(name="b"))
    rows = parse_table(store.export_file(), "export.xlsx")
    assert [r["Name"] for r in rows] == ["a", "b"]
    assert rows[0]["Category"] == "Chat"
    assert "Category" not in rows[1] or rows[1]["Category"] == ""


def test_search_delegates_to_filter(store):
    store.add(make_draft(name="Gemini", category="Chat"))
    store.add(make_draft(name="Whisper", url="https://w", description="audio", category="Audio"))
    assert [i.name for i in store.search("whisp")] == ["Whisper"]
    assert [i.name for i in store.search("", "Chat")] == ["Gemini"]


def test_export_then_import_keeps_formula_like_text(store, data_file):
    store.add(make_draft(name="=1+1", description="=SUM(A1:A3)", category="=Chat"))
    exported = store.export_file()

    fresh = CatalogStore(data_file.with_name("other.json"))
    report = fresh.import_file(exported, "export.xlsx")
    assert report.imported == 1
    item = fresh.items[0]
    assert (item.name, item.url, item.description, item.category) == (
        "=1+1", "https://gemini.google.com", "=SUM(A1:A3)", "=Chat",
    )


def test_export_survives_control_characters(store):
    store.add(make_draft(name="Tab\x0bVert", description="a\x01b"))
    rows = parse_table(store.export_file(), "export.xlsx")
    assert rows[0]["Name"] == "TabVert"
    assert rows[0]["Description"] == "ab"
