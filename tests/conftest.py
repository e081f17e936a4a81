"""Pytest fixtures: a fresh sqlite file per test, stores, and an API client."""

import pytest
from fastapi.testclient import TestClient

from lesson_api.config import get_settings
from lesson_api.database import Database, create_tables
from lesson_api.inventory import InventoryStore
from lesson_api.main import app
from lesson_api.orders import OrderRecorder
from lesson_api.schemas import NewLesson, OrderRequest
from lesson_api.service import OrderPlacementService


@pytest.fixture
def db(tmp_path) -> Database:
    db = Database(str(tmp_path / "lessons.db"))
    create_tables(db)
    return db


@pytest.fixture
def inventory(db) -> InventoryStore:
    return InventoryStore(db)


@pytest.fixture
def recorder(db) -> OrderRecorder:
    return OrderRecorder(db)


@pytest.fixture
def service(inventory, recorder) -> OrderPlacementService:
    return OrderPlacementService(inventory, recorder)


@pytest.fixture
def add_lesson(inventory):
    def _add(title: str = "Spanish", available: int = 5, location: str = "MADRID", price: float = 1800):
        [lesson] = inventory.insert_lessons(
            [NewLesson(title=title, location=location, price=price, available_inventory=available)]
        )
        return lesson

    return _add


@pytest.fixture
def make_order():
    def _make(lesson_ids: list[str], number_of_spaces: int | None = None, **overrides) -> OrderRequest:
        fields = dict(
            name="Ada Lovelace",
            phone_number="07700900123",
            address="12 Analytical Row",
            city="London",
            state="Greater London",
            zip="NW1 6XE",
            lesson_ids=lesson_ids,
            number_of_spaces=len(lesson_ids) if number_of_spaces is None else number_of_spaces,
        )
        fields.update(overrides)
        return OrderRequest(**fields)

    return _make


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("LESSON_API_DB_FILE", str(tmp_path / "api.db"))
    get_settings.cache_clear()
    with TestClient(app) as client:
        yield client
    get_settings.cache_clear()
