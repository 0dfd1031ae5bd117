"""
Product business logic.

Each function validates its raw input, talks to the repository and either
returns plain data or raises one of the `core.errors` types.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from core.errors import NotFoundError, ValidationError

from . import validation
from .repository import ProductRepository

logger = logging.getLogger(__name__)


def total_pages(total: int, per_page: int) -> int:
    # An empty result still reports one page.
    return max(1, math.ceil(total / per_page))


def _require_id(raw_id: Any) -> int:
    product_id, errors = validation.parse_product_id(raw_id)
    if errors:
        raise ValidationError(errors)
    return product_id


async def list_products(repo: ProductRepository, params: Mapping[str, Any]) -> dict:
    query, errors = validation.parse_list_query(params)
    if errors:
        raise ValidationError(errors)

    rows, total = await repo.list_page(query)
    return {
        "data": rows,
        "meta": {
            "page": query.page,
            "per_page": query.per_page,
            "total": total,
            "total_pages": total_pages(total, query.per_page),
            "sort_by": query.sort_by.value,
            "sort_dir": query.sort_dir.value,
        },
    }


async def get_product(repo: ProductRepository, raw_id: Any) -> dict:
    product_id = _require_id(raw_id)
    row = await repo.get(product_id)
    if row is None:
        raise NotFoundError()
    return row


async def create_product(repo: ProductRepository, body: Any) -> dict:
    product, errors = validation.parse_new_product(body)
    if errors:
        raise ValidationError(errors)

    row = await repo.create(product)
    logger.info("product_created id=%s", row["id"])
    return row


async def update_product(repo: ProductRepository, raw_id: Any, body: Any) -> dict:
    # Report id and body problems together.
    product_id, errors = validation.parse_product_id(raw_id)
    patch, body_errors = validation.parse_product_patch(body)
    errors.update(body_errors)
    if errors:
        raise ValidationError(errors)

    row = await repo.update(product_id, patch)
    if row is None:
        raise NotFoundError()
    logger.info("product_updated id=%s fields=%s", product_id, ",".join(patch.changes()))
    return row


async def delete_product(repo: ProductRepository, raw_id: Any) -> None:
    product_id = _require_id(raw_id)
    if not await repo.delete(product_id):
        raise NotFoundError()
    logger.info("product_deleted id=%s", product_id)
