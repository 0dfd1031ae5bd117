"""
SQL text for the products table.

Column names in statement text only ever come from the fixed maps below,
keyed by enum members. User-supplied values always travel as positional
`$n` arguments.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from .validation import ListQuery, ProductPatch, SortColumn, SortDirection

PRODUCT_COLUMNS = "id, name, price"

SORT_COLUMNS: dict[SortColumn, str] = {
    SortColumn.ID: "id",
    SortColumn.NAME: "name",
    SortColumn.PRICE: "price",
}

SORT_DIRECTIONS: dict[SortDirection, str] = {
    SortDirection.ASC: "ASC",
    SortDirection.DESC: "DESC",
}

PATCHABLE_COLUMNS = {"name": "name", "price": "price"}


def to_numeric(value: float) -> Decimal:
    """
    Bind floats to `numeric` columns as Decimal, going through str so 9.99
    stays 9.99 instead of its binary expansion.
    """
    return Decimal(str(value))


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class _Args:
    """
    Collects positional arguments and hands out their placeholders.
    """

    def __init__(self) -> None:
        self.values: list[Any] = []

    def add(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def _where(query: ListQuery, args: _Args) -> str:
    clauses: list[str] = []
    if query.name is not None:
        clauses.append(f"name ILIKE '%' || {args.add(escape_like(query.name))} || '%' ESCAPE '\\'")
    if query.min_price is not None:
        clauses.append(f"price >= {args.add(to_numeric(query.min_price))}")
    if query.max_price is not None:
        clauses.append(f"price <= {args.add(to_numeric(query.max_price))}")
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


def build_count(query: ListQuery) -> tuple[str, list[Any]]:
    args = _Args()
    where = _where(query, args)
    sql = f"SELECT COUNT(*) FROM products {where}".strip()
    return sql, args.values


def build_page(query: ListQuery) -> tuple[str, list[Any]]:
    """
    Data query for one page: same filter as `build_count` plus order and window.

    `id` is appended as a tiebreaker so rows with equal sort keys keep a
    stable order across pages.
    """
    args = _Args()
    where = _where(query, args)
    order = f"{SORT_COLUMNS[query.sort_by]} {SORT_DIRECTIONS[query.sort_dir]}"
    if query.sort_by is not SortColumn.ID:
        order += ", id ASC"
    limit = args.add(query.per_page)
    offset = args.add(query.offset)
    parts = [f"SELECT {PRODUCT_COLUMNS} FROM products"]
    if where:
        parts.append(where)
    parts.append(f"ORDER BY {order} LIMIT {limit} OFFSET {offset}")
    return " ".join(parts), args.values


def build_update(product_id: int, patch: ProductPatch) -> tuple[str, list[Any]]:
    """
    UPDATE that only assigns the columns the patch sets.
    """
    changes = patch.changes()
    if not changes:
        raise ValueError("Patch has no fields to update.")

    args = _Args()
    assignments = []
    for field, value in changes.items():
        if field == "price":
            value = to_numeric(value)
        assignments.append(f"{PATCHABLE_COLUMNS[field]} = {args.add(value)}")
    id_placeholder = args.add(product_id)
    sql = (
        f"UPDATE products SET {', '.join(assignments)} "
        f"WHERE id = {id_placeholder} RETURNING {PRODUCT_COLUMNS}"
    )
    return sql, args.values
