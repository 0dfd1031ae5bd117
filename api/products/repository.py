"""
Product persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database

from . import query as sql
from .validation import ListQuery, NewProduct, ProductPatch


def _to_product(row: dict[str, Any]) -> dict[str, Any]:
    # numeric comes back as Decimal; the API speaks JSON numbers.
    return {
        "id": int(row["id"]),
        "name": str(row["name"]),
        "price": float(row["price"]),
    }


class ProductRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def list_page(self, query: ListQuery) -> tuple[list[dict[str, Any]], int]:
        """
        Return one page of rows plus the total count for the same filter.

        The two statements run separately, so `total` can drift from the
        page under concurrent writes.
        """
        count_sql, count_args = sql.build_count(query)
        total = await self.db.fetch_val(count_sql, *count_args)

        page_sql, page_args = sql.build_page(query)
        rows = await self.db.fetch_all(page_sql, *page_args)
        return [_to_product(r) for r in rows], int(total or 0)

    async def get(self, product_id: int) -> dict[str, Any] | None:
        row = await self.db.fetch_one(
            f"""
            SELECT {sql.PRODUCT_COLUMNS}
            FROM products
            WHERE id = $1
            """,
            product_id,
        )
        return _to_product(row) if row is not None else None

    async def create(self, product: NewProduct) -> dict[str, Any]:
        row = await self.db.fetch_one(
            f"""
            INSERT INTO products (name, price)
            VALUES ($1, $2)
            RETURNING {sql.PRODUCT_COLUMNS}
            """,
            product.name,
            sql.to_numeric(product.price),
        )
        if row is None:
            raise RuntimeError("Failed to insert product.")
        return _to_product(row)

    async def update(self, product_id: int, patch: ProductPatch) -> dict[str, Any] | None:
        update_sql, args = sql.build_update(product_id, patch)
        row = await self.db.fetch_one(update_sql, *args)
        return _to_product(row) if row is not None else None

    async def delete(self, product_id: int) -> bool:
        affected = await self.db.execute(
            """
            DELETE FROM products
            WHERE id = $1
            """,
            product_id,
        )
        return affected > 0
