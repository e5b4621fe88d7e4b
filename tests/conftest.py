"""
Pytest configuration and shared fixtures for order backend tests.
"""

import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from order_backend.catalog import Catalog
from order_backend.models import MenuItem
from order_backend.store import OrderStore


@pytest.fixture
def catalog() -> Catalog:
    """The built-in three-dish menu."""
    return Catalog.default()


@pytest.fixture
def two_item_catalog() -> Catalog:
    """Menu with only Nasi Goreng and Mie Goreng (id 3 is absent)."""
    return Catalog([
        MenuItem(id=1, name="Nasi Goreng", price=Decimal("25000")),
        MenuItem(id=2, name="Mie Goreng", price=Decimal("20000")),
    ])


@pytest.fixture
def store(catalog) -> OrderStore:
    """Fresh order store over the built-in menu."""
    return OrderStore(catalog)


@pytest.fixture
def menu_file(tmp_path):
    """Write a small JSON menu and return its path."""
    path = tmp_path / "menu.json"
    path.write_text(json.dumps([
        {"id": 10, "name": "Sate Ayam", "price": 18000},
        {"id": 11, "name": "Es Teh", "price": 5000.5},
    ]), encoding="utf-8")
    return path


@pytest.fixture
def client():
    """
    Test client running the app lifespan, so every test gets a new,
    empty order store.
    """
    from order_backend.main import app

    with TestClient(app) as test_client:
        yield test_client
