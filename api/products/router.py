"""
Product API endpoints.

Query, path and body values are taken as raw strings/JSON and validated in
`validation.py`, so every failure uses the same `{error, errors}` shape.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status

from . import schemas, service
from .dependencies import get_repository
from .repository import ProductRepository

router = APIRouter(prefix="/products")

ERROR_RESPONSES = {
    404: {"model": schemas.ErrorResponse},
    422: {"model": schemas.ErrorResponse},
}


@router.get("", response_model=schemas.ProductPage, responses=ERROR_RESPONSES)
async def list_products(
    request: Request,
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None),
    name: str | None = Query(default=None),
    min_price: str | None = Query(default=None),
    max_price: str | None = Query(default=None),
    sort_by: str | None = Query(default=None),
    sort_dir: str | None = Query(default=None),
    repo: ProductRepository = Depends(get_repository),
) -> dict:
    """
    List products with optional name/price filters, sorting and pagination.
    """
    return await service.list_products(repo, request.query_params)


@router.get("/{product_id}", response_model=schemas.Product, responses=ERROR_RESPONSES)
async def get_product(
    product_id: str,
    repo: ProductRepository = Depends(get_repository),
) -> dict:
    return await service.get_product(repo, product_id)


@router.post(
    "",
    response_model=schemas.Product,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_product(
    payload: Any = Body(default=None),
    repo: ProductRepository = Depends(get_repository),
) -> dict:
    return await service.create_product(repo, payload)


@router.patch("/{product_id}", response_model=schemas.Product, responses=ERROR_RESPONSES)
async def update_product(
    product_id: str,
    payload: Any = Body(default=None),
    repo: ProductRepository = Depends(get_repository),
) -> dict:
    """
    Partial update: fields missing from the body keep their stored value.
    """
    return await service.update_product(repo, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
)
async def delete_product(
    product_id: str,
    repo: ProductRepository = Depends(get_repository),
) -> Response:
    await service.delete_product(repo, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
