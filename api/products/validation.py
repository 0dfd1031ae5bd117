"""
Turn raw request input into typed values.

Every parser returns `(value, errors)`. Malformed input is data, so none
of these raise: `errors` is a `{field: message}` map, and `value` is None
whenever `errors` is non-empty. Callers decide what to do with a failure.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
MAX_NAME_LENGTH = 255
# products.id is a 32-bit serial.
MAX_PRODUCT_ID = 2_147_483_647
# OFFSET binds as a Postgres bigint.
MAX_OFFSET = 2**63 - 1

Errors = dict[str, str]


class SortColumn(str, Enum):
    ID = "id"
    NAME = "name"
    PRICE = "price"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


ALLOWED_SORT_COLUMNS = ", ".join(column.value for column in SortColumn)


@dataclass(frozen=True)
class ListQuery:
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    name: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    sort_by: SortColumn = SortColumn.ID
    sort_dir: SortDirection = SortDirection.ASC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


class _Unset:
    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class NewProduct:
    name: str
    price: float


@dataclass(frozen=True)
class ProductPatch:
    """
    Partial update. A field left as UNSET is not touched in the store.
    """

    name: str | _Unset = UNSET
    price: float | _Unset = UNSET

    def changes(self) -> dict[str, Any]:
        return {
            field: value
            for field, value in (("name", self.name), ("price", self.price))
            if value is not UNSET
        }


def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def _parse_price_bound(raw: Any, field: str, errors: Errors) -> float | None:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        errors[field] = f"{field} must be a non-negative number"
        return None
    if not math.isfinite(value) or value < 0:
        errors[field] = f"{field} must be a non-negative number"
        return None
    return value


def parse_list_query(params: Mapping[str, Any]) -> tuple[ListQuery | None, Errors]:
    errors: Errors = {}

    page = _parse_int(params.get("page"), DEFAULT_PAGE)
    if page < 1:
        errors["page"] = "page must be an integer >= 1"

    per_page = _parse_int(params.get("per_page"), DEFAULT_PER_PAGE)
    if not 1 <= per_page <= MAX_PER_PAGE:
        errors["per_page"] = f"per_page must be an integer between 1 and {MAX_PER_PAGE}"

    if "page" not in errors and "per_page" not in errors and (page - 1) * per_page > MAX_OFFSET:
        errors["page"] = "page is too large for the requested per_page"

    name = str(params.get("name") or "").strip() or None

    min_price = _parse_price_bound(params.get("min_price"), "min_price", errors)
    max_price = _parse_price_bound(params.get("max_price"), "max_price", errors)
    if min_price is not None and max_price is not None and min_price > max_price:
        errors["price"] = "min_price cannot be greater than max_price"

    raw_sort_by = str(params.get("sort_by") or SortColumn.ID.value).strip().lower()
    try:
        sort_by = SortColumn(raw_sort_by)
    except ValueError:
        errors["sort_by"] = f"sort_by must be one of: {ALLOWED_SORT_COLUMNS}"
        sort_by = SortColumn.ID

    # Only an explicit "desc" flips the order; anything else sorts ascending.
    raw_sort_dir = str(params.get("sort_dir") or "").strip().lower()
    sort_dir = SortDirection.DESC if raw_sort_dir == SortDirection.DESC.value else SortDirection.ASC

    if errors:
        return None, errors
    return (
        ListQuery(
            page=page,
            per_page=per_page,
            name=name,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
            sort_dir=sort_dir,
        ),
        errors,
    )


def parse_product_id(raw: Any) -> tuple[int | None, Errors]:
    text = str(raw if raw is not None else "").strip()
    if not (text.isascii() and text.isdigit()):
        return None, {"id": "id must be a positive integer"}
    value = int(text)
    if not 1 <= value <= MAX_PRODUCT_ID:
        return None, {"id": "id must be a positive integer"}
    return value, {}


def _validate_name(raw: Any, errors: Errors) -> str | None:
    if not isinstance(raw, str) or not raw.strip():
        errors["name"] = "name is required and must be a non-empty string"
        return None
    name = raw.strip()
    if len(name) > MAX_NAME_LENGTH:
        errors["name"] = f"name must be at most {MAX_NAME_LENGTH} characters"
        return None
    return name


def _validate_price(raw: Any, errors: Errors) -> float | None:
    # bool is an int subclass; JSON true/false is not a price.
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        errors["price"] = "price is required and must be a non-negative number"
        return None
    try:
        value = float(raw)
    except OverflowError:
        value = math.inf
    if not math.isfinite(value) or value < 0:
        errors["price"] = "price is required and must be a non-negative number"
        return None
    return value


def _body_errors(body: Any) -> Errors:
    if not isinstance(body, dict):
        return {"body": "Request body must be a JSON object"}
    return {}


def parse_new_product(body: Any) -> tuple[NewProduct | None, Errors]:
    errors = _body_errors(body)
    if errors:
        return None, errors

    name = _validate_name(body.get("name"), errors)
    price = _validate_price(body.get("price"), errors)
    if errors:
        return None, errors
    return NewProduct(name=name, price=price), errors


def parse_product_patch(body: Any) -> tuple[ProductPatch | None, Errors]:
    errors = _body_errors(body)
    if errors:
        return None, errors

    if "name" not in body and "price" not in body:
        return None, {"body": "Provide at least one of: name, price"}

    name: str | _Unset = UNSET
    price: float | _Unset = UNSET
    if "name" in body:
        name = _validate_name(body["name"], errors)
    if "price" in body:
        price = _validate_price(body["price"], errors)
    if errors:
        return None, errors
    return ProductPatch(name=name, price=price), errors
