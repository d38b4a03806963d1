from __future__ import annotations

import json
import logging

from toolshed import storage
from toolshed.catalog.schemas import Item


def _items():
    return (
        Item(id=1, name="Gemini Pro", url="https://gemini.google.com", description="Chat model", category="Chat"),
        Item(id=2, name="Whisper", url="https://openai.com/whisper", description="Speech to text"),
        Item(id=3, name="Blank", url="https://example.com", description="Empty category", category=""),
    )


def test_missing_slot_loads_empty(data_file):
    assert storage.load(data_file) == ()


def test_save_then_load_round_trips_in_order(data_file):
    assert storage.save(data_file, _items()) is True
    assert storage.load(data_file) == _items()


def test_saved_payload_is_a_json_array_without_null_category(data_file):
    storage.save(data_file, _items())
    payload = json.loads(data_file.read_text(encoding="utf-8"))
    assert isinstance(payload, list)
    assert "category" not in payload[1]
    assert payload[0]["category"] == "Chat"


def test_corrupt_payload_loads_empty_and_logs(data_file, caplog):
    data_file.parent.mkdir(parents=True)
    data_file.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="toolshed.storage"):
        assert storage.load(data_file) == ()
    assert "Discarding stored collection" in caplog.text


def test_non_array_payload_loads_empty(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(json.dumps({"tools": []}), encoding="utf-8")
    assert storage.load(data_file) == ()


def test_invalid_elements_are_dropped_order_preserved(data_file, caplog):
    data_file.parent.mkdir(parents=True)
    raw = [
        {"id": 10, "name": "a", "url": "u", "description": "d"},
        {"id": "11", "name": "b", "url": "u", "description": "d"},
        {"id": 12, "name": "", "url": "u", "description": "d"},
        "garbage",
        {"id": 13, "name": "c", "url": "u", "description": "d", "category": None},
        {"id": 14, "name": "e", "url": "u", "description": "d", "category": "X", "extra": 1},
    ]
    data_file.write_text(json.dumps(raw), encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="toolshed.storage"):
        loaded = storage.load(data_file)
    assert [i.id for i in loaded] == [10, 14]
    assert loaded[1].category == "X"
    assert "Dropped 4 invalid record(s)" in caplog.text


def test_save_leaves_no_temporary_files(data_file):
    storage.save(data_file, _items())
    storage.save(data_file, _items()[:1])
    assert [p.name for p in data_file.parent.iterdir()] == ["tools.json"]
    assert storage.load(data_file) == _items()[:1]


def test_saving_twice_equals_saving_once(data_file):
    storage.save(data_file, _items())
    first = data_file.read_bytes()
    storage.save(data_file, _items())
    assert data_file.read_bytes() == first


def test_write_failure_is_logged_not_raised(tmp_path, caplog):
    slot = tmp_path / "slot"
    slot.mkdir()
    with caplog.at_level(logging.ERROR, logger="toolshed.storage"):
        assert storage.save(slot, _items()) is False
    assert "Failed to save collection" in caplog.text
    assert list(tmp_path.iterdir()) == [slot]
    assert list(slot.iterdir()) == []
