"""
Application error types.

Handlers raise these; `main.py` turns them into JSON responses. Nothing
below the HTTP layer knows about status codes beyond the attribute each
class carries.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 422
    message = "Validation failed"

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(self.message)
        self.errors = dict(errors)

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "errors": self.errors}


class NotFoundError(AppError):
    status_code = 404
    message = "Not Found"


class StoreError(AppError):
    """
    Connectivity or query failure in the database layer.

    The original exception stays on `__cause__` for logging; clients only
    ever see the generic message.
    """

    status_code = 500
    message = "Internal Server Error"
