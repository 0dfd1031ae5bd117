"""
Pydantic response models for product endpoints.

Request bodies are validated by hand in `validation.py` so every rule
reports into one `{field: message}` map; these models only shape output
and the OpenAPI docs.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Product(BaseModel):
    id: int
    name: str
    price: float


class PageMeta(BaseModel):
    page: int
    per_page: int
    total: int
    total_pages: int = Field(..., ge=1)
    sort_by: str
    sort_dir: str


class ProductPage(BaseModel):
    data: list[Product]
    meta: PageMeta


class ErrorResponse(BaseModel):
    error: str
    errors: dict[str, str] | None = None
