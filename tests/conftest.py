"""
Pytest configuration and fixtures.

The HTTP suite runs against an in-memory repository, so no PostgreSQL is
needed. `APP_ENV=test` keeps the lifespan hook from opening a pool.
"""

import os
import sys

import pytest

# Make `api/` importable the way the app runs (`from core import db`).
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "api"))

os.environ["APP_ENV"] = "test"

from fastapi.testclient import TestClient  # noqa: E402

from core.errors import StoreError  # noqa: E402
from main import create_app  # noqa: E402
from products.dependencies import get_repository  # noqa: E402
from products.validation import SortColumn, SortDirection  # noqa: E402

SEED_PRODUCTS = [
    ("Web Development", 1500.00),
    ("Logo Design", 500.00),
    ("SEO Service", 750.00),
    ("Mobile App", 3000.00),
    ("Web Hosting", 120.00),
]


class FakeProductRepository:
    """
    In-memory stand-in with the same interface as ProductRepository.
    """

    def __init__(self, seed=()):
        self.rows = {}
        self.next_id = 1
        for name, price in seed:
            self._insert(name, price)

    def _insert(self, name, price):
        row = {"id": self.next_id, "name": name, "price": float(price)}
        self.rows[row["id"]] = row
        self.next_id += 1
        return dict(row)

    async def list_page(self, query):
        rows = list(self.rows.values())
        if query.name is not None:
            rows = [r for r in rows if query.name.lower() in r["name"].lower()]
        if query.min_price is not None:
            rows = [r for r in rows if r["price"] >= query.min_price]
        if query.max_price is not None:
            rows = [r for r in rows if r["price"] <= query.max_price]

        rows.sort(key=lambda r: r["id"])
        if query.sort_by is not SortColumn.ID:
            rows.sort(key=lambda r: r[query.sort_by.value])
        if query.sort_dir is SortDirection.DESC:
            rows.sort(key=lambda r: r[query.sort_by.value], reverse=True)

        window = rows[query.offset:query.offset + query.per_page]
        return [dict(r) for r in window], len(rows)

    async def get(self, product_id):
        row = self.rows.get(product_id)
        return dict(row) if row is not None else None

    async def create(self, product):
        return self._insert(product.name, product.price)

    async def update(self, product_id, patch):
        row = self.rows.get(product_id)
        if row is None:
            return None
        row.update(patch.changes())
        return dict(row)

    async def delete(self, product_id):
        return self.rows.pop(product_id, None) is not None


class FailingProductRepository:
    async def _fail(self, *args, **kwargs):
        raise StoreError("Query failed.") from ConnectionRefusedError("connection refused")

    list_page = get = create = update = delete = _fail


@pytest.fixture
def repository():
    return FakeProductRepository(SEED_PRODUCTS)


@pytest.fixture
def app(repository):
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: repository
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def failing_client():
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: FailingProductRepository()
    with TestClient(app) as test_client:
        yield test_client
