from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the toolshed package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toolshed import config as core_config
from toolshed.catalog import store as catalog_store
from toolshed.catalog.mutations import IdAllocator
from toolshed.catalog.schemas import ItemDraft


ADMIN_SECRET = "s3cret"


def make_draft(name="Gemini Pro", url="https://gemini.google.com", description="Chat model", category=None):
    return ItemDraft(name=name, url=url, description=description, category=category)


class StepClock:
    """Deterministic millisecond clock that advances by ``step`` per call."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 0):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "data" / "tools.json"


@pytest.fixture()
def store(data_file):
    s = catalog_store.CatalogStore(data_file, allocator=IdAllocator(StepClock()))
    s.load()
    return s


@pytest.fixture()
def settings_env(data_file, monkeypatch):
    """Point the settings at a temporary slot and a known admin secret."""
    monkeypatch.setenv("TOOLSHED_DATA_FILE", str(data_file))
    monkeypatch.setenv("TOOLSHED_ADMIN_SECRET", ADMIN_SECRET)
    monkeypatch.setenv("TOOLSHED_PAGE_SIZE", "2")
    core_config.get_settings.cache_clear()
    catalog_store.get_store.cache_clear()
    yield data_file
    core_config.get_settings.cache_clear()
    catalog_store.get_store.cache_clear()


@pytest.fixture()
def client(settings_env):
    from fastapi.testclient import TestClient

    from toolshed.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_headers():
    return {"X-Admin-Secret": ADMIN_SECRET}
