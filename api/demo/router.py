"""
Health check and cookie round-trip demo endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

DEMO_COOKIE_NAME = "demo_cookie"
DEMO_COOKIE_VALUE = "hello"

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    message: str


@router.get("/", response_model=HealthResponse)
def root() -> dict:
    return {"status": "ok", "message": "Server is running"}


@router.get("/set-cookie")
def set_cookie(response: Response) -> dict:
    response.set_cookie(
        key=DEMO_COOKIE_NAME,
        value=DEMO_COOKIE_VALUE,
        max_age=60 * 60,
        httponly=True,
        samesite="lax",
    )
    return {"message": "Cookie set", "name": DEMO_COOKIE_NAME, "value": DEMO_COOKIE_VALUE}


@router.get("/read-cookie")
def read_cookie(request: Request) -> dict:
    return {"cookies": dict(request.cookies)}
