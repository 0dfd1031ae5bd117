"""
FastAPI dependencies for product routes.
"""

from __future__ import annotations

from fastapi import Depends, Request

from core.db import Database

from .repository import ProductRepository


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_repository(db: Database = Depends(get_database)) -> ProductRepository:
    return ProductRepository(db)
